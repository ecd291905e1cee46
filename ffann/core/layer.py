"""A layer of neurons sharing one input vector."""

from __future__ import annotations

from typing import Any, Iterator, List, Sequence

import numpy as np

from .inputs import Input
from .neuron import Neuron
from .types import (
    DEFAULT_ETA,
    DEFAULT_MU,
    DEFAULT_R,
    ActivationKind,
    Array,
    PhiParams,
    ShapeMismatchError,
)


class NeuralLayer:
    """``No`` neurons, each reading the same ``Ni``-wide input vector.

    ``weights`` holds one row of ``Ni`` entries per neuron and ``biases``
    one entry per neuron.
    """

    def __init__(
        self,
        weights: Sequence[Sequence[float]] | Array,
        biases: Sequence[float] | Array,
        kind: ActivationKind | str = ActivationKind.LINEAR,
        params: PhiParams | None = None,
    ) -> None:
        rows = [np.asarray(row, dtype=np.float64) for row in weights]
        if not rows:
            raise ShapeMismatchError("A layer needs at least one weight row")
        num_inputs = int(rows[0].size)
        for idx, row in enumerate(rows):
            if row.ndim != 1 or row.size != num_inputs:
                raise ShapeMismatchError(
                    f"Weight row {idx} has shape {row.shape}, expected ({num_inputs},)"
                )
        bias_vec = np.asarray(biases, dtype=np.float64).reshape(-1)
        if bias_vec.size != len(rows):
            raise ShapeMismatchError(
                f"Layer has {len(rows)} weight rows but {bias_vec.size} biases"
            )
        self._num_inputs = num_inputs
        self._num_outputs = len(rows)
        self._neurons: List[Neuron] = [
            Neuron(row, float(bias), kind, params) for row, bias in zip(rows, bias_vec)
        ]

    @property
    def num_inputs(self) -> int:
        return self._num_inputs

    @property
    def num_outputs(self) -> int:
        return self._num_outputs

    @property
    def kind(self) -> ActivationKind:
        return self._neurons[0].kind

    def __len__(self) -> int:
        return self._num_outputs

    def __getitem__(self, idx: int) -> Neuron:
        return self._neurons[idx]

    def __iter__(self) -> Iterator[Neuron]:
        return iter(self._neurons)

    def set_inputs(self, x: Sequence[Any]) -> None:
        if len(x) != self._num_inputs:
            raise ShapeMismatchError(
                f"Layer expects {self._num_inputs} inputs but received {len(x)}"
            )
        shared = [Input.coerce(value) for value in x]
        for neuron in self._neurons:
            neuron.set_inputs(shared)

    def set_phi_params(self, a: float, k: float, l: float) -> None:  # noqa: E741
        for neuron in self._neurons:
            neuron.set_phi_params(a, k, l)

    def forward(self) -> Array:
        return np.array([neuron.forward() for neuron in self._neurons], dtype=np.float64)

    def backward(
        self,
        y_target: Sequence[float] | Array,
        eta: float = DEFAULT_ETA,
        mu: float = DEFAULT_MU,
        r: float = DEFAULT_R,
    ) -> Array:
        """Run every neuron's backward step; return the ``(No, Ni)`` gradient matrix."""

        targets = np.asarray(y_target, dtype=np.float64).reshape(-1)
        if targets.size != self._num_outputs:
            raise ShapeMismatchError(
                f"Layer has {self._num_outputs} outputs but received {targets.size} targets"
            )
        grad = np.empty((self._num_outputs, self._num_inputs), dtype=np.float64)
        for idx, neuron in enumerate(self._neurons):
            grad[idx] = neuron.backward(targets[idx], eta, mu, r)
        return grad

    def train(
        self,
        y_target: Sequence[float] | Array,
        eta: float = DEFAULT_ETA,
        mu: float = DEFAULT_MU,
        r: float = DEFAULT_R,
    ) -> Array:
        self.forward()
        return self.backward(y_target, eta, mu, r)

    def output(self) -> List[Input]:
        """Reference inputs onto each neuron's output, for wiring the next layer."""

        return [neuron.output() for neuron in self._neurons]

    def values(self) -> Array:
        return np.array([neuron.y for neuron in self._neurons], dtype=np.float64)

    def weight_matrix(self) -> Array:
        return np.vstack([neuron.weights for neuron in self._neurons])

    def bias_vector(self) -> Array:
        return np.array([neuron.bias for neuron in self._neurons], dtype=np.float64)

    def __repr__(self) -> str:
        return (
            f"NeuralLayer(num_inputs={self._num_inputs}, num_outputs={self._num_outputs}, "
            f"kind={self.kind.value})"
        )


__all__ = ["NeuralLayer"]
