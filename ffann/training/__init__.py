"""Training loop, losses and config pipelines."""

from .pipelines import build_network, load_config, load_preset, presets, run_pipeline
from .trainer import OnlineTrainer

__all__ = [
    "OnlineTrainer",
    "build_network",
    "load_config",
    "load_preset",
    "presets",
    "run_pipeline",
]
