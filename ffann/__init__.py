"""ffann public API."""

from .core import activations, types  # noqa: F401
from .core.activations import activate, activate_derivative, softmax
from .core.inputs import Input
from .core.layer import NeuralLayer
from .core.network import NeuralNetwork
from .core.neuron import Neuron
from .core.types import ActivationKind, PhiParams, RunResult, Sample, ShapeMismatchError
from .training.pipelines import build_network, load_config, load_preset, presets, run_pipeline
from .training.trainer import OnlineTrainer

__all__ = [
    "ActivationKind",
    "Input",
    "NeuralLayer",
    "NeuralNetwork",
    "Neuron",
    "OnlineTrainer",
    "PhiParams",
    "RunResult",
    "Sample",
    "ShapeMismatchError",
    "activate",
    "activate_derivative",
    "activations",
    "build_network",
    "load_config",
    "load_preset",
    "presets",
    "run_pipeline",
    "softmax",
    "types",
]
