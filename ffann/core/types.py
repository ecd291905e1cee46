"""Core typing contracts for ffann."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Sequence

import numpy as np

Array = np.ndarray

DEFAULT_ETA = 0.1
DEFAULT_MU = 0.5
DEFAULT_R = 0.0


class ShapeMismatchError(ValueError):
    """Raised when a vector or matrix does not match the width it is wired to."""


class ActivationKind(str, Enum):
    """Closed set of activation functions understood by the engine."""

    BINARY_STEP = "binary_step"
    HEAVISIDE_STEP = "heaviside_step"
    LINEAR = "linear"
    SIGMOID = "sigmoid"
    TANH = "tanh"
    RELU = "relu"
    PARAMETRIC_RELU = "parametric_relu"
    LEAKY_RELU = "leaky_relu"
    PARAMETRIC_LEAKY_RELU = "parametric_leaky_relu"
    ELU = "elu"
    SWISH = "swish"
    GELU = "gelu"
    SELU = "selu"

    @classmethod
    def parse(cls, value: "ActivationKind | str") -> "ActivationKind":
        """Return the member named by ``value`` (member, value or name)."""

        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        for member in cls:
            if key in (member.value, member.name.lower()):
                return member
        choices = ", ".join(member.value for member in cls)
        raise ValueError(f"Unknown activation {value!r}. Available activations: {choices}")


@dataclass(frozen=True)
class PhiParams:
    """Shape constants shared by the parametric activations.

    ``a`` is the slope/alpha, ``k`` the slope scale and ``l`` the scale used
    by SELU and the offset used by the parametric leaky ReLU.
    """

    a: float = 1.0
    k: float = 1.0
    l: float = 1.1  # noqa: E741


@dataclass(frozen=True)
class Sample:
    """A single training example."""

    inputs: Sequence[float]
    targets: Sequence[float]


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :meth:`ffann.training.trainer.OnlineTrainer.run`."""

    steps: int
    epochs: int
    final_loss: float
    history: List[Dict[str, float]] = field(default_factory=list)
    metrics_path: str = ""
