import numpy as np
import pytest

from ffann.core.activations import activate, activate_derivative, softmax
from ffann.core.types import ActivationKind

# Grid with step 0.1 that never lands on a kink (0 for the ReLU family,
# -l/k = -1.1 for the parametric leaky ReLU).
GRID = np.linspace(-9.95, 9.95, 200)
PARAMS = {"a": 0.2, "k": 1.0, "l": 1.1}


def _numerical_derivative(kind, z, h=1e-5, **params):
    return (activate(z + h, kind, **params) - activate(z - h, kind, **params)) / (2 * h)


@pytest.mark.parametrize("kind", list(ActivationKind))
def test_derivative_matches_numerical_derivative(kind):
    params = PARAMS if kind in {
        ActivationKind.PARAMETRIC_RELU,
        ActivationKind.PARAMETRIC_LEAKY_RELU,
    } else {}
    analytic = activate_derivative(GRID, kind, **params)
    numeric = _numerical_derivative(kind, GRID, **params)
    np.testing.assert_allclose(analytic, numeric, atol=1e-3)


@pytest.mark.parametrize("kind", [ActivationKind.ELU, ActivationKind.SELU])
def test_exponential_units_with_non_default_alpha(kind):
    z = GRID[GRID != 0]
    analytic = activate_derivative(z, kind, a=1.7, l=1.05)
    numeric = _numerical_derivative(kind, z, a=1.7, l=1.05)
    np.testing.assert_allclose(analytic, numeric, atol=1e-3)


def test_sigmoid_derivative_identity():
    s = activate(GRID, ActivationKind.SIGMOID)
    np.testing.assert_allclose(
        activate_derivative(GRID, ActivationKind.SIGMOID), s * (1 - s), rtol=1e-12
    )


def test_gelu_derivative_at_known_points():
    # d/dz GELU(0) = 0.5 and the curve approaches the identity's slope for large z
    assert activate_derivative(0.0, "gelu") == pytest.approx(0.5)
    assert activate_derivative(8.0, "gelu") == pytest.approx(1.0, abs=1e-9)


def test_step_functions_differ_only_at_zero():
    assert activate(0.0, ActivationKind.BINARY_STEP) == 1.0
    assert activate(0.0, ActivationKind.HEAVISIDE_STEP) == 0.0
    assert activate(-0.5, ActivationKind.BINARY_STEP) == 0.0
    assert activate(0.5, ActivationKind.HEAVISIDE_STEP) == 1.0
    assert activate_derivative(0.0, ActivationKind.BINARY_STEP) == 0.0
    assert activate_derivative(0.0, ActivationKind.HEAVISIDE_STEP) == 0.0


def test_closed_forms():
    assert activate(-2.0, "relu") == 0.0
    assert activate(-2.0, "leaky_relu") == pytest.approx(-0.2)
    assert activate(-2.0, "parametric_relu", a=0.3) == pytest.approx(-0.6)
    assert activate(-1.0, "elu") == pytest.approx(np.exp(-1.0) - 1.0)
    assert activate(-1.0, "selu", l=2.0) == pytest.approx(2.0 * (np.exp(-1.0) - 1.0))
    assert activate(1.0, "swish") == pytest.approx(1.0 / (1.0 + np.exp(-1.0)))
    assert activate(0.5, "tanh") == pytest.approx(np.tanh(0.5))
    assert activate(3.0, "linear") == 3.0


def test_parametric_leaky_relu_uses_offset_and_scale():
    # u = k*z + l
    assert activate(1.0, "parametric_leaky_relu", a=0.1, k=2.0, l=0.5) == pytest.approx(2.5)
    assert activate(-1.0, "parametric_leaky_relu", a=0.1, k=2.0, l=0.5) == pytest.approx(-0.15)
    assert activate_derivative(-1.0, "parametric_leaky_relu", a=0.1, k=2.0, l=0.5) == (
        pytest.approx(0.2)
    )


def test_scalar_in_scalar_out():
    value = activate(0.25, ActivationKind.SIGMOID)
    assert isinstance(value, float)
    assert np.shape(activate(np.zeros((2, 3)), "tanh")) == (2, 3)


def test_large_inputs_stay_finite_for_elu():
    assert activate(800.0, "elu") == 800.0
    assert activate_derivative(800.0, "selu") == pytest.approx(1.1)


def test_unknown_activation_name():
    with pytest.raises(ValueError, match="Unknown activation"):
        activate(0.0, "softplus")


def test_activation_kind_parse_accepts_names_and_values():
    assert ActivationKind.parse("ReLU") is ActivationKind.RELU
    assert ActivationKind.parse("PARAMETRIC_LEAKY_RELU") is ActivationKind.PARAMETRIC_LEAKY_RELU
    assert ActivationKind.parse(ActivationKind.GELU) is ActivationKind.GELU


@pytest.mark.parametrize(
    "values",
    [[0.0, 1.0, 2.0], [-3.0, 0.5, 7.0, 1.0], np.linspace(-5, 5, 11)],
)
def test_softmax_sums_to_one_and_is_shift_invariant(values):
    out = softmax(values)
    assert out.shape == np.shape(values)
    assert out.sum() == pytest.approx(1.0, abs=1e-6)
    np.testing.assert_allclose(softmax(np.asarray(values) + 3.5), out, atol=1e-9)


def test_softmax_power():
    out = softmax([1.0, 2.0], power=2)
    expected = np.exp([1.0, 4.0]) / np.exp([1.0, 4.0]).sum()
    np.testing.assert_allclose(out, expected)


def test_softmax_degenerate_input_is_not_finite():
    with np.errstate(invalid="ignore", under="ignore"):
        out = softmax([-1000.0, -1000.0])
    assert not np.isfinite(out).any()
