import numpy as np
import pytest

from ffann.training.losses import REGISTRY, Loss, LossRegistry


def test_losses_return_plain_floats():
    mse = REGISTRY.get("mse")
    value = mse(np.array([1.0, 0.0]), np.array([0.0, 0.0]))
    assert isinstance(value, float)
    assert value == pytest.approx(0.5)
    assert REGISTRY.get("sse")([1.0, 2.0], [0.0, 0.0]) == pytest.approx(2.5)
    assert REGISTRY.get("mae")([1.0, -3.0], [0.0, 0.0]) == pytest.approx(2.0)


def test_registering_a_custom_loss():
    registry = LossRegistry()
    registry.register("max_abs", lambda y, t: np.max(np.abs(y - t)))
    loss = registry.get("max_abs")
    assert isinstance(loss, Loss)
    assert loss([0.5, 2.0], [0.0, 0.0]) == pytest.approx(2.0)


def test_unknown_loss_lists_the_available_ones():
    with pytest.raises(KeyError, match="mse"):
        REGISTRY.get("hinge")
