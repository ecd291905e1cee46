"""Core numerical primitives for ffann."""

from . import activations, types
from .activations import activate, activate_derivative, softmax
from .inputs import Input
from .layer import NeuralLayer
from .network import NeuralNetwork
from .neuron import Neuron
from .types import ActivationKind, PhiParams, ShapeMismatchError

__all__ = [
    "activations",
    "types",
    "activate",
    "activate_derivative",
    "softmax",
    "Input",
    "Neuron",
    "NeuralLayer",
    "NeuralNetwork",
    "ActivationKind",
    "PhiParams",
    "ShapeMismatchError",
]
