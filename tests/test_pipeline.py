from __future__ import annotations

import json

import numpy as np
import pytest

from ffann.core.types import ActivationKind
from ffann.training import pipelines


def test_builtin_and_file_presets_are_listed():
    names = set(pipelines.presets())
    assert {"or-sigmoid", "xor-sigmoid", "sine-tanh", "and-sigmoid"} <= names
    assert pipelines.load_preset("and-sigmoid")["data"]["name"] == "and"


def test_unknown_preset():
    with pytest.raises(KeyError, match="Unknown preset"):
        pipelines.load_preset("does-not-exist")


def test_build_network_from_model_section():
    net = pipelines.build_network(
        {
            "layer_dims": [3, 4, 2],
            "activation": ["relu", "sigmoid"],
            "seed": 5,
            "phi_params": {"a": 0.2},
        }
    )
    assert net.layer_dims == [3, 4, 2]
    assert net[0].kind is ActivationKind.RELU
    assert net[1].kind is ActivationKind.SIGMOID
    assert net[0][0].params.a == 0.2
    np.testing.assert_array_equal(net[0].bias_vector(), np.zeros(4))
    again = pipelines.build_network({"layer_dims": [3, 4, 2], "seed": 5})
    np.testing.assert_array_equal(again[0].weight_matrix(), net[0].weight_matrix())


def test_build_network_validation():
    with pytest.raises(ValueError):
        pipelines.build_network({"layer_dims": [3]})
    with pytest.raises(ValueError, match="activations"):
        pipelines.build_network({"layer_dims": [1, 2, 1], "activation": ["tanh"]})


def test_pipeline_smoke_writes_metrics(tmp_path):
    config = pipelines.load_preset("or-sigmoid")
    config["train"].update({"epochs": 20, "run_dir": str(tmp_path), "enable_plots": True})
    result = pipelines.run_pipeline(config)

    lines = (tmp_path / "metrics.jsonl").read_text().strip().splitlines()
    header, *records = [json.loads(line) for line in lines]
    assert header["event"] == "run"
    assert header["layer_dims"] == [2, 1] and header["activations"] == ["sigmoid"]
    assert len(records) == result.epochs == 20
    assert all(r["event"] == "epoch" and r["split"] == "train" for r in records)
    assert records[-1]["loss"] < records[0]["loss"]
    assert result.metrics_path.endswith("metrics.jsonl")
    assert (tmp_path / "loss.png").exists()


def test_pipeline_writes_partial_plot_when_training_fails(tmp_path, monkeypatch):
    def failing_run(self, samples, epochs, seed=0, **kwargs):
        for step in (1, 2, 3):
            for callback in self.callbacks:
                callback.on_step(step, {"loss": 1.0 / step})
        raise RuntimeError("diverged")

    monkeypatch.setattr(pipelines.OnlineTrainer, "run", failing_run)
    config = pipelines.load_preset("or-sigmoid")
    config["train"].update({"run_dir": str(tmp_path), "enable_plots": True})
    with pytest.raises(RuntimeError, match="diverged"):
        pipelines.run_pipeline(config)
    assert (tmp_path / "loss.png").exists()



def test_pipeline_without_run_dir():
    config = pipelines.load_preset("sine-tanh")
    config["train"].update({"epochs": 3, "run_dir": None})
    result = pipelines.run_pipeline(config)
    assert result.metrics_path == ""
    assert np.isfinite(result.final_loss)


def test_pipeline_rejects_mismatched_widths():
    config = pipelines.load_preset("or-sigmoid")
    config["model"]["layer_dims"] = [3, 1]
    config["train"]["run_dir"] = None
    with pytest.raises(ValueError, match="input width"):
        pipelines.run_pipeline(config)


def test_load_config_yaml_and_json(tmp_path):
    yaml_path = tmp_path / "cfg.yaml"
    yaml_path.write_text(
        "data: {name: xor}\nmodel: {layer_dims: [2, 2, 1]}\ntrain: {epochs: 1}\n"
    )
    assert pipelines.load_config(yaml_path)["model"]["layer_dims"] == [2, 2, 1]

    json_path = tmp_path / "cfg.json"
    json_path.write_text(json.dumps({"data": {}, "model": {}}))
    with pytest.raises(KeyError, match="train"):
        pipelines.load_config(json_path)

    with pytest.raises(ValueError, match="Unsupported"):
        pipelines.load_config(tmp_path / "cfg.toml")
