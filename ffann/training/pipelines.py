"""Config-driven assembly of networks, datasets and training runs."""

from __future__ import annotations

import json
from copy import deepcopy
from dataclasses import replace
from pathlib import Path
from typing import Dict, List, Mapping, Sequence

import numpy as np
import yaml

from ..core.network import NeuralNetwork
from ..core.types import DEFAULT_ETA, DEFAULT_MU, DEFAULT_R, PhiParams, RunResult
from ..data import get_dataset
from ..reporting.metrics import JsonlSink
from ..reporting.plots import PlotAdapter
from .trainer import OnlineTrainer

_PRESETS: Dict[str, Mapping[str, object]] = {
    "or-sigmoid": {
        "data": {"name": "or", "options": {}},
        "model": {
            "layer_dims": [2, 1],
            "activation": "sigmoid",
            "init_scale": 0.5,
            "seed": 0,
        },
        "train": {
            "epochs": 200,
            "eta": 0.5,
            "mu": 0.5,
            "r": 0.0,
            "seed": 0,
            "shuffle": True,
            "run_dir": None,
            "enable_plots": False,
        },
    },
    "xor-sigmoid": {
        "data": {"name": "xor", "options": {}},
        "model": {
            "layer_dims": [2, 4, 1],
            "activation": "sigmoid",
            "init_scale": 1.0,
            "seed": 1,
        },
        "train": {
            "epochs": 2000,
            "eta": 0.5,
            "mu": 0.5,
            "r": 0.0,
            "seed": 1,
            "shuffle": True,
            "tolerance": 1e-3,
            "run_dir": "runs/xor-sigmoid",
            "enable_plots": False,
        },
    },
    "sine-tanh": {
        "data": {"name": "sine", "options": {"n_points": 32, "freq": 1.0, "seed": 0}},
        "model": {
            "layer_dims": [1, 8, 1],
            "activation": ["tanh", "sigmoid"],
            "init_scale": 0.5,
            "seed": 0,
        },
        "train": {
            "epochs": 300,
            "eta": 0.1,
            "mu": 0.5,
            "r": 0.0,
            "seed": 0,
            "shuffle": True,
            "early_stopping_patience": 50,
            "run_dir": "runs/sine-tanh",
            "enable_plots": False,
        },
    },
}

_REQUIRED_SECTIONS = {"data", "model", "train"}
_PRESET_DIR = Path(__file__).resolve().parents[2] / "configs" / "presets"
_FILE_PRESETS_CACHE: Dict[str, Mapping[str, object]] | None = None


def load_config(path: str | Path) -> Mapping[str, object]:
    """Read a YAML or JSON config file into a mapping."""

    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in {".yaml", ".yml", ".json"}:
        raise ValueError(f"Unsupported config file type: {path.suffix}")
    text = path.read_text()
    if suffix == ".json":
        data = json.loads(text or "{}")
    else:
        data = yaml.safe_load(text) or {}

    if not isinstance(data, Mapping):
        raise TypeError(f"Config {path.name} must decode to a mapping")
    missing = _REQUIRED_SECTIONS - set(data)
    if missing:
        raise KeyError(
            f"Config {path.name} is missing required sections: {', '.join(sorted(missing))}"
        )
    return data


def _file_presets() -> Dict[str, Mapping[str, object]]:
    global _FILE_PRESETS_CACHE
    if _FILE_PRESETS_CACHE is None:
        found: Dict[str, Mapping[str, object]] = {}
        if _PRESET_DIR.exists():
            for file in sorted(_PRESET_DIR.iterdir()):
                if file.suffix.lower() not in {".yaml", ".yml", ".json"}:
                    continue
                found[file.stem] = load_config(file)
        _FILE_PRESETS_CACHE = found
    return {name: deepcopy(cfg) for name, cfg in _FILE_PRESETS_CACHE.items()}


def presets() -> Mapping[str, Mapping[str, object]]:
    combined: Dict[str, Mapping[str, object]] = {}
    combined.update({name: deepcopy(cfg) for name, cfg in _PRESETS.items()})
    combined.update(_file_presets())
    return combined


def load_preset(name: str) -> Mapping[str, object]:
    available = presets()
    if name not in available:
        raise KeyError(f"Unknown preset {name!r}. Available presets: {', '.join(sorted(available))}")
    return available[name]


def _activations(model_cfg: Mapping[str, object], num_layers: int) -> List[str]:
    activation = model_cfg.get("activation", "linear")
    if isinstance(activation, str):
        return [activation] * num_layers
    kinds = [str(kind) for kind in activation]  # type: ignore[union-attr]
    if len(kinds) != num_layers:
        raise ValueError(
            f"Configured {len(kinds)} activations for {num_layers} layers"
        )
    return kinds


def build_network(model_cfg: Mapping[str, object]) -> NeuralNetwork:
    """Create a randomly initialised network from a ``model`` config section.

    Weights are drawn from ``N(0, init_scale**2)`` with a seeded generator;
    biases start at zero.
    """

    dims = [int(d) for d in model_cfg.get("layer_dims", [])]  # type: ignore[union-attr]
    if len(dims) < 2 or any(d < 1 for d in dims):
        raise ValueError(f"layer_dims needs at least two positive widths, got {dims}")
    rng = np.random.default_rng(int(model_cfg.get("seed", 0)))
    scale = float(model_cfg.get("init_scale", 0.5))
    weights = []
    biases = []
    for in_dim, out_dim in zip(dims[:-1], dims[1:]):
        weights.append(rng.standard_normal((out_dim, in_dim)) * scale)
        biases.append(np.zeros(out_dim))
    params = PhiParams(**dict(model_cfg.get("phi_params") or {}))  # type: ignore[arg-type]
    return NeuralNetwork(weights, biases, _activations(model_cfg, len(dims) - 1), params)


def run_pipeline(config: Mapping[str, object]) -> RunResult:
    missing = _REQUIRED_SECTIONS - set(config)
    if missing:
        raise KeyError(f"Config is missing required sections: {', '.join(sorted(missing))}")
    data_cfg = dict(config["data"])  # type: ignore[arg-type]
    model_cfg = dict(config["model"])  # type: ignore[arg-type]
    train_cfg = dict(config["train"])  # type: ignore[arg-type]

    dataset = get_dataset(str(data_cfg["name"]), **dict(data_cfg.get("options") or {}))
    network = build_network(model_cfg)
    if network.num_inputs != dataset.d_in:
        raise ValueError(
            f"Configured input width {network.num_inputs} but dataset has {dataset.d_in}"
        )
    if network.num_outputs != dataset.d_out:
        raise ValueError(
            f"Configured output width {network.num_outputs} but dataset has {dataset.d_out}"
        )

    seed = int(train_cfg.get("seed", 0))
    hyper = {
        "eta": float(train_cfg.get("eta", DEFAULT_ETA)),
        "mu": float(train_cfg.get("mu", DEFAULT_MU)),
        "r": float(train_cfg.get("r", DEFAULT_R)),
    }
    run_dir = train_cfg.get("run_dir")
    split_loggers: Dict[str, Sequence[object]] = {}
    callbacks: List[object] = []
    metrics_path = ""
    plots = None
    if run_dir:
        run_path = Path(str(run_dir))
        run_info = {
            "dataset": dataset.name,
            "layer_dims": network.layer_dims,
            "activations": [layer.kind.value for layer in network],
            **hyper,
        }
        sink = JsonlSink(run_path / "metrics.jsonl", split="train", seed=seed, run_info=run_info)
        split_loggers["train"] = [sink]
        metrics_path = str(sink.path)
        plots = PlotAdapter(run_path, enable_plots=bool(train_cfg.get("enable_plots", False)))
        callbacks.append(plots)

    trainer = OnlineTrainer(network, callbacks=callbacks, **hyper)
    patience = train_cfg.get("early_stopping_patience")
    try:
        result = trainer.run(
            dataset.samples,
            epochs=int(train_cfg.get("epochs", 1)),
            seed=seed,
            shuffle=bool(train_cfg.get("shuffle", True)),
            loss=str(train_cfg.get("loss", "mse")),
            split_loggers=split_loggers,
            early_stopping_patience=int(patience) if patience else None,
            tolerance=float(train_cfg.get("tolerance", 0.0)),
        )
    finally:
        # a partial curve is still written when training raises
        if plots is not None:
            plots.close()
    return replace(result, metrics_path=metrics_path)


__all__ = ["build_network", "load_config", "load_preset", "presets", "run_pipeline"]
