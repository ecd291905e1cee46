"""Single neuron: weighted sum, nonlinearity and momentum-based updates."""

from __future__ import annotations

from typing import Any, Sequence, Tuple

import numpy as np

from .activations import activate_with, derivative_with
from .inputs import Input
from .types import (
    DEFAULT_ETA,
    DEFAULT_MU,
    DEFAULT_R,
    ActivationKind,
    Array,
    PhiParams,
    ShapeMismatchError,
)


class Neuron:
    """A neuron with a fixed input width.

    The neuron keeps the pre-activation ``z`` and output ``y`` of its most
    recent forward step, and the weight/bias deltas of its most recent
    backward step, which feed the momentum term of the next update.
    """

    def __init__(
        self,
        weights: Sequence[float] | Array,
        bias: float = 0.0,
        kind: ActivationKind | str = ActivationKind.LINEAR,
        params: PhiParams | None = None,
    ) -> None:
        w = np.array(weights, dtype=np.float64)
        if w.ndim != 1:
            raise ShapeMismatchError(f"Neuron weights must be a vector, got shape {w.shape}")
        self._num_weights = int(w.shape[0])
        self._weights = w
        self.bias = float(bias)
        self.kind = ActivationKind.parse(kind)
        self.params = params or PhiParams()
        self._inputs: Tuple[Input, ...] = tuple(Input() for _ in range(self._num_weights))
        self.z = 0.0
        self.y = 0.0
        self._w_delta_prev = np.zeros(self._num_weights, dtype=np.float64)
        self._b_delta_prev = 0.0
        self._trained = False

    @property
    def num_weights(self) -> int:
        return self._num_weights

    @property
    def weights(self) -> Array:
        return self._weights.copy()

    @property
    def inputs(self) -> Tuple[Input, ...]:
        return self._inputs

    @property
    def is_trained(self) -> bool:
        """``True`` once a backward step has populated the momentum memory."""

        return self._trained

    def set_inputs(self, x: Sequence[Any]) -> None:
        if len(x) != self._num_weights:
            raise ShapeMismatchError(
                f"Neuron expects {self._num_weights} inputs but received {len(x)}"
            )
        self._inputs = tuple(Input.coerce(value) for value in x)

    def set_phi_params(self, a: float, k: float, l: float) -> None:  # noqa: E741
        self.params = PhiParams(a=float(a), k=float(k), l=float(l))

    def forward(self) -> float:
        """Compute ``z`` and ``y`` from the currently available inputs.

        Unset inputs are dropped together with their weights, so they add
        nothing to the dot product.
        """

        x: list[float] = []
        w: list[float] = []
        for idx, slot in enumerate(self._inputs):
            value = slot.get()
            if value is not None:
                x.append(value)
                w.append(self._weights[idx])
        self.z = float(np.dot(x, w)) + self.bias if x else self.bias
        self.y = float(activate_with(self.z, self.kind, self.params))
        return self.y

    def backward(
        self,
        y_target: float,
        eta: float = DEFAULT_ETA,
        mu: float = DEFAULT_MU,
        r: float = DEFAULT_R,
    ) -> Array:
        """Update weights and bias towards ``y_target``; return the raw gradient.

        The applied step is ``delta = eta * (-grad + mu * delta_prev + r)``.
        The returned vector is ``dC/dw`` before that transform.
        """

        error = -(float(y_target) - self.y)
        dC_dz = error * float(derivative_with(self.z, self.kind, self.params))
        values = [slot.get() for slot in self._inputs]
        dz_dw = np.array([0.0 if v is None else v for v in values], dtype=np.float64)
        dC_dw = dC_dz * dz_dw
        dC_db = dC_dz

        w_delta = eta * (-dC_dw + mu * self._w_delta_prev + r)
        b_delta = eta * (-dC_db + mu * self._b_delta_prev + r)
        self._weights += w_delta
        self.bias += b_delta

        self._w_delta_prev = w_delta
        self._b_delta_prev = b_delta
        self._trained = True
        return dC_dw

    def train(
        self,
        y_target: float,
        eta: float = DEFAULT_ETA,
        mu: float = DEFAULT_MU,
        r: float = DEFAULT_R,
    ) -> Array:
        self.forward()
        return self.backward(y_target, eta, mu, r)

    def output(self) -> Input:
        """Return a reference input that tracks this neuron's ``y``."""

        return Input.reference(self)

    def __repr__(self) -> str:
        return (
            f"Neuron(num_weights={self._num_weights}, kind={self.kind.value}, "
            f"bias={self.bias:.4g}, y={self.y:.4g})"
        )


__all__ = ["Neuron"]
