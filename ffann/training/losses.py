"""Loss registry used to report training progress.

The engine's own update rule always uses the per-neuron error
``-(target - y)``; these losses only summarise how far outputs are from
their targets, so they return a scalar and no gradient.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict

import numpy as np

from ..core.types import Array

LossFn = Callable[[Array, Array], float]


@dataclass(frozen=True)
class Loss:
    """Named reporting loss over one sample's outputs and targets."""

    name: str
    fn: LossFn

    def __call__(self, predictions: Array, targets: Array) -> float:
        return float(
            self.fn(
                np.asarray(predictions, dtype=np.float64),
                np.asarray(targets, dtype=np.float64),
            )
        )


class LossRegistry:
    """Central registry for reporting losses."""

    def __init__(self) -> None:
        self._registry: Dict[str, Loss] = {}

    def register(self, name: str, fn: LossFn) -> None:
        self._registry[name] = Loss(name, fn)

    def get(self, name: str) -> Loss:
        if name not in self._registry:
            available = ", ".join(sorted(self._registry))
            raise KeyError(f"Unknown loss {name!r}. Available losses: {available}")
        return self._registry[name]


REGISTRY = LossRegistry()

REGISTRY.register("mse", lambda pred, target: np.mean(np.square(pred - target)))
# half sum of squares: its gradient is exactly the neuron error -(target - y)
REGISTRY.register("sse", lambda pred, target: 0.5 * np.sum(np.square(pred - target)))
REGISTRY.register("mae", lambda pred, target: np.mean(np.abs(pred - target)))

__all__ = ["Loss", "LossRegistry", "REGISTRY"]
