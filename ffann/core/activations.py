"""Activation functions and their derivatives.

Every function works elementwise on scalars and numpy arrays.  Derivatives
reuse the already computed activation where that is cheaper, e.g. the
sigmoid derivative is ``s * (1 - s)``.
"""

from __future__ import annotations

import math
from typing import Callable, Dict, Sequence

import numpy as np

from .types import ActivationKind, Array, PhiParams

_ActivationFn = Callable[[Array, float, float, float], Array]

_SQRT2 = math.sqrt(2.0)
_INV_SQRT_2PI = 1.0 / math.sqrt(2.0 * math.pi)
_erf = np.vectorize(math.erf, otypes=[np.float64])


def _sigmoid(z: Array) -> Array:
    return 1.0 / (1.0 + np.exp(-z))


def _elu(z: Array, a: float) -> Array:
    # exp is only evaluated on the negative half to keep large z finite
    return np.where(z < 0, a * (np.exp(np.minimum(z, 0.0)) - 1.0), z)


def _elu_derivative(z: Array, a: float) -> Array:
    return np.where(z < 0, _elu(z, a) + a, 1.0)


def _swish(z: Array) -> Array:
    return z * _sigmoid(z)


def _swish_derivative(z: Array) -> Array:
    sw = _swish(z)
    return sw + _sigmoid(z) * (1.0 - sw)


def _gelu(z: Array) -> Array:
    return 0.5 * z * (1.0 + _erf(z / _SQRT2))


def _gelu_derivative(z: Array) -> Array:
    return 0.5 * (1.0 + _erf(z / _SQRT2)) + z * np.exp(-0.5 * z * z) * _INV_SQRT_2PI


_ACTIVATIONS: Dict[ActivationKind, _ActivationFn] = {
    ActivationKind.BINARY_STEP: lambda z, a, k, l: np.where(z < 0, 0.0, 1.0),
    ActivationKind.HEAVISIDE_STEP: lambda z, a, k, l: np.where(z <= 0, 0.0, 1.0),
    ActivationKind.LINEAR: lambda z, a, k, l: z * 1.0,
    ActivationKind.SIGMOID: lambda z, a, k, l: _sigmoid(z),
    ActivationKind.TANH: lambda z, a, k, l: np.tanh(z),
    ActivationKind.RELU: lambda z, a, k, l: np.maximum(0.0, z),
    ActivationKind.PARAMETRIC_RELU: lambda z, a, k, l: np.maximum(a * z, z),
    ActivationKind.LEAKY_RELU: lambda z, a, k, l: np.maximum(0.1 * z, z),
    ActivationKind.PARAMETRIC_LEAKY_RELU: lambda z, a, k, l: np.maximum(
        a * (k * z + l), k * z + l
    ),
    ActivationKind.ELU: lambda z, a, k, l: _elu(z, a),
    ActivationKind.SWISH: lambda z, a, k, l: _swish(z),
    ActivationKind.GELU: lambda z, a, k, l: _gelu(z),
    ActivationKind.SELU: lambda z, a, k, l: l * _elu(z, a),
}

# The step functions are singular at 0; the derivative is taken as 0 there too.
_DERIVATIVES: Dict[ActivationKind, _ActivationFn] = {
    ActivationKind.BINARY_STEP: lambda z, a, k, l: np.zeros_like(z),
    ActivationKind.HEAVISIDE_STEP: lambda z, a, k, l: np.zeros_like(z),
    ActivationKind.LINEAR: lambda z, a, k, l: np.ones_like(z),
    ActivationKind.SIGMOID: lambda z, a, k, l: _sigmoid(z) * (1.0 - _sigmoid(z)),
    ActivationKind.TANH: lambda z, a, k, l: 1.0 - np.tanh(z) ** 2,
    ActivationKind.RELU: lambda z, a, k, l: np.where(z < 0, 0.0, 1.0),
    ActivationKind.PARAMETRIC_RELU: lambda z, a, k, l: np.where(z < 0, a, 1.0),
    ActivationKind.LEAKY_RELU: lambda z, a, k, l: np.where(z < 0, 0.1, 1.0),
    ActivationKind.PARAMETRIC_LEAKY_RELU: lambda z, a, k, l: np.where(
        k * z + l < 0, a * k, k
    ),
    ActivationKind.ELU: lambda z, a, k, l: _elu_derivative(z, a),
    ActivationKind.SWISH: lambda z, a, k, l: _swish_derivative(z),
    ActivationKind.GELU: lambda z, a, k, l: _gelu_derivative(z),
    ActivationKind.SELU: lambda z, a, k, l: l * _elu_derivative(z, a),
}


def _evaluate(
    table: Dict[ActivationKind, _ActivationFn],
    z: float | Array,
    kind: ActivationKind | str,
    a: float,
    k: float,
    l: float,  # noqa: E741
) -> float | Array:
    fn = table[ActivationKind.parse(kind)]
    values = np.asarray(fn(np.asarray(z, dtype=np.float64), a, k, l), dtype=np.float64)
    return values[()]


def activate(
    z: float | Array,
    kind: ActivationKind | str,
    a: float = 1.0,
    k: float = 1.0,
    l: float = 1.1,  # noqa: E741
) -> float | Array:
    """Return the activation of pre-activation ``z`` for ``kind``."""

    return _evaluate(_ACTIVATIONS, z, kind, a, k, l)


def activate_derivative(
    z: float | Array,
    kind: ActivationKind | str,
    a: float = 1.0,
    k: float = 1.0,
    l: float = 1.1,  # noqa: E741
) -> float | Array:
    """Return ``d activate / dz`` evaluated at ``z``."""

    return _evaluate(_DERIVATIVES, z, kind, a, k, l)


def activate_with(z: float | Array, kind: ActivationKind | str, params: PhiParams) -> float | Array:
    return activate(z, kind, params.a, params.k, params.l)


def derivative_with(
    z: float | Array, kind: ActivationKind | str, params: PhiParams
) -> float | Array:
    return activate_derivative(z, kind, params.a, params.k, params.l)


def softmax(values: Sequence[float] | Array, power: float = 1.0) -> Array:
    """Normalised exponentials of ``values`` (of ``values ** power`` if ``power != 1``).

    No max-shift is applied: input whose exponentials all underflow produces
    non-finite output and must be guarded by the caller.
    """

    arr = np.asarray(values, dtype=np.float64)
    if power == 1:
        expo = np.exp(arr)
    else:
        expo = np.exp(np.power(arr, power))
    return expo / np.sum(expo)


__all__ = [
    "activate",
    "activate_derivative",
    "activate_with",
    "derivative_with",
    "softmax",
]
