"""Feed-forward network built from chained layers."""

from __future__ import annotations

from typing import Any, Iterator, List, Sequence

import numpy as np

from .inputs import Input
from .layer import NeuralLayer
from .types import (
    DEFAULT_ETA,
    DEFAULT_MU,
    DEFAULT_R,
    ActivationKind,
    Array,
    PhiParams,
    ShapeMismatchError,
)


class NeuralNetwork:
    """An ordered chain of layers.

    Layer ``i + 1`` reads references onto layer ``i``'s neuron outputs, so a
    forward pass only needs the network-level input bound to the first layer.
    """

    def __init__(
        self,
        weights: Sequence[Sequence[Sequence[float]] | Array],
        biases: Sequence[Sequence[float] | Array],
        kinds: Sequence[ActivationKind | str] | ActivationKind | str = ActivationKind.LINEAR,
        params: PhiParams | None = None,
    ) -> None:
        num_layers = len(weights)
        if num_layers == 0:
            raise ShapeMismatchError("A network needs at least one layer")
        if isinstance(kinds, (ActivationKind, str)):
            kinds = [kinds] * num_layers
        if len(biases) != num_layers or len(kinds) != num_layers:
            raise ShapeMismatchError(
                f"Got {num_layers} weight matrices, {len(biases)} bias vectors "
                f"and {len(kinds)} activation kinds"
            )
        self._layers: List[NeuralLayer] = [
            NeuralLayer(w, b, kind, params) for w, b, kind in zip(weights, biases, kinds)
        ]
        for idx in range(1, num_layers):
            upstream = self._layers[idx - 1]
            layer = self._layers[idx]
            if layer.num_inputs != upstream.num_outputs:
                raise ShapeMismatchError(
                    f"Layer {idx} expects {layer.num_inputs} inputs but layer {idx - 1} "
                    f"produces {upstream.num_outputs} outputs"
                )
            layer.set_inputs(upstream.output())

    @property
    def num_inputs(self) -> int:
        return self._layers[0].num_inputs

    @property
    def num_outputs(self) -> int:
        return self._layers[-1].num_outputs

    @property
    def layer_dims(self) -> List[int]:
        return [self.num_inputs] + [layer.num_outputs for layer in self._layers]

    def __len__(self) -> int:
        return len(self._layers)

    def __getitem__(self, idx: int) -> NeuralLayer:
        return self._layers[idx]

    def __iter__(self) -> Iterator[NeuralLayer]:
        return iter(self._layers)

    def set_inputs(self, x: Sequence[Any]) -> None:
        if len(x) != self.num_inputs:
            raise ShapeMismatchError(
                f"Network expects {self.num_inputs} inputs but received {len(x)}"
            )
        self._layers[0].set_inputs(x)

    def set_phi_params(self, a: float, k: float, l: float) -> None:  # noqa: E741
        for layer in self._layers:
            layer.set_phi_params(a, k, l)

    def forward(self) -> Array:
        """Run every layer in order and return the last layer's outputs."""

        out = np.empty(0)
        for layer in self._layers:
            out = layer.forward()
        return out

    def backward(
        self,
        y_target: Sequence[float] | Array,
        eta: float = DEFAULT_ETA,
        mu: float = DEFAULT_MU,
        r: float = DEFAULT_R,
    ) -> Array:
        """Backpropagate from the last layer to the first.

        Each earlier layer is trained against the column sums of the gradient
        matrix produced by the layer after it, i.e. every upstream neuron
        receives the sum of the partial derivatives of all neurons it feeds.
        Returns the first layer's raw gradient matrix.
        """

        targets = np.asarray(y_target, dtype=np.float64).reshape(-1)
        if targets.size != self.num_outputs:
            raise ShapeMismatchError(
                f"Network has {self.num_outputs} outputs but received {targets.size} targets"
            )
        grad = self._layers[-1].backward(targets, eta, mu, r)
        for idx in range(len(self._layers) - 2, -1, -1):
            grad_flat = grad.sum(axis=0)
            grad = self._layers[idx].backward(grad_flat, eta, mu, r)
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
        return self._layers[-1].output()

    def values(self) -> Array:
        return self._layers[-1].values()

    def predict(self, x: Sequence[Any]) -> Array:
        self.set_inputs(x)
        self.forward()
        return self.values()

    def __repr__(self) -> str:
        dims = "->".join(str(d) for d in self.layer_dims)
        return f"NeuralNetwork({dims})"


__all__ = ["NeuralNetwork"]
