import numpy as np

from ffann.core.network import NeuralNetwork
from ffann.core.types import RunResult
from ffann.data import get_dataset
from ffann.training.trainer import OnlineTrainer


def _run(seed: int) -> RunResult:
    net = NeuralNetwork(
        [np.full((3, 2), 0.3), np.full((1, 3), -0.2)],
        [np.zeros(3), np.zeros(1)],
        ["tanh", "sigmoid"],
    )
    return OnlineTrainer(net, eta=0.2, mu=0.5).run(get_dataset("xor").samples, epochs=5, seed=seed)


def test_same_seed_gives_identical_history():
    first, second = _run(4), _run(4)
    assert first.history == second.history


def test_history_records_every_epoch():
    result = _run(0)
    assert isinstance(result, RunResult)
    assert [int(record["epoch"]) for record in result.history] == [1, 2, 3, 4, 5]
    assert all(np.isfinite(record["loss"]) for record in result.history)
