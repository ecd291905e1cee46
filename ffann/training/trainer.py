"""Online (per-sample) training loop for :class:`~ffann.core.network.NeuralNetwork`."""

from __future__ import annotations

import warnings
from typing import Iterable, List, Mapping, Sequence

import numpy as np

from ..core.network import NeuralNetwork
from ..core.types import DEFAULT_ETA, DEFAULT_MU, DEFAULT_R, Array, RunResult, Sample
from .losses import REGISTRY as LOSS_REGISTRY
from .losses import Loss
from .metrics import DEFAULT_METRICS, compute_metrics


class OnlineTrainer:
    """Train a network one sample at a time and report progress to callbacks.

    Callbacks may implement ``on_step(step, metrics)`` and/or
    ``on_epoch(epoch, metrics)``; plain callables receive epoch events.
    """

    def __init__(
        self,
        network: NeuralNetwork,
        eta: float = DEFAULT_ETA,
        mu: float = DEFAULT_MU,
        r: float = DEFAULT_R,
        callbacks: Sequence[object] | None = None,
    ) -> None:
        self.network = network
        self.eta = float(eta)
        self.mu = float(mu)
        self.r = float(r)
        self.callbacks = list(callbacks or [])

    def run(
        self,
        samples: Sequence[Sample],
        epochs: int,
        seed: int = 0,
        *,
        shuffle: bool = True,
        loss: str = "mse",
        metric_names: Sequence[str] = DEFAULT_METRICS,
        val_samples: Sequence[Sample] | None = None,
        split_loggers: Mapping[str, Sequence[object]] | None = None,
        early_stopping_patience: int | None = None,
        tolerance: float = 0.0,
    ) -> RunResult:
        if epochs < 1:
            raise ValueError(f"epochs must be >= 1, got {epochs}")
        if not samples:
            raise ValueError("Cannot train on an empty sample sequence")
        loss_fn = LOSS_REGISTRY.get(loss)
        split_loggers = split_loggers or {}
        history: List[dict] = []
        best_loss = float("inf")
        epochs_no_improve = 0
        epochs_run = 0
        total_steps = 0

        for epoch in range(1, epochs + 1):
            order = np.arange(len(samples))
            if shuffle:
                np.random.default_rng(seed + epoch).shuffle(order)
            train_metrics = self._train_epoch(
                [samples[i] for i in order], loss_fn, metric_names, first_step=total_steps + 1
            )
            total_steps += len(order)
            epochs_run = epoch
            if not np.isfinite(train_metrics["loss"]):
                warnings.warn(
                    f"Non-finite training loss at epoch {epoch}; "
                    f"consider lowering eta (currently {self.eta})",
                    RuntimeWarning,
                )
            self._emit_split("train", epoch, train_metrics, split_loggers)
            record = dict(train_metrics)

            target_metrics = train_metrics
            if val_samples:
                val_metrics = self.evaluate(val_samples, loss=loss, metric_names=metric_names)
                self._emit_split("val", epoch, val_metrics, split_loggers)
                record.update({f"val_{k}": v for k, v in val_metrics.items()})
                target_metrics = val_metrics
            self._emit_epoch(epoch, record)
            history.append({"epoch": float(epoch), **record})

            current_loss = float(target_metrics["loss"])
            if current_loss <= tolerance:
                break
            if current_loss < best_loss - 1e-12:
                best_loss = current_loss
                epochs_no_improve = 0
            else:
                epochs_no_improve += 1
                if early_stopping_patience and epochs_no_improve >= early_stopping_patience:
                    break

        final_loss = float(history[-1]["loss"]) if history else float("nan")
        return RunResult(
            steps=total_steps,
            epochs=epochs_run,
            final_loss=final_loss,
            history=history,
        )

    def evaluate(
        self,
        samples: Iterable[Sample],
        *,
        loss: str = "mse",
        metric_names: Sequence[str] = DEFAULT_METRICS,
    ) -> dict:
        """Forward-only pass over ``samples``; weights are left untouched."""

        loss_fn = LOSS_REGISTRY.get(loss)
        losses: List[float] = []
        preds: List[Array] = []
        targets: List[Array] = []
        for sample in samples:
            outputs = self.network.predict(sample.inputs)
            target = np.asarray(sample.targets, dtype=np.float64)
            losses.append(loss_fn(outputs, target))
            preds.append(outputs)
            targets.append(target)
        return self._summarise(losses, preds, targets, metric_names)

    # ------------------------------------------------------------------
    # Internal helpers

    def _train_epoch(
        self,
        samples: Sequence[Sample],
        loss_fn: Loss,
        metric_names: Sequence[str],
        *,
        first_step: int,
    ) -> dict:
        losses: List[float] = []
        preds: List[Array] = []
        targets: List[Array] = []
        for step, sample in enumerate(samples, start=first_step):
            target = np.asarray(sample.targets, dtype=np.float64)
            self.network.set_inputs(sample.inputs)
            self.network.train(target, self.eta, self.mu, self.r)
            # backward leaves y untouched, so these are the outputs trained against
            outputs = self.network.values()
            loss_value = loss_fn(outputs, target)
            self._emit_step(step, {"loss": loss_value})
            losses.append(loss_value)
            preds.append(outputs)
            targets.append(target)
        return self._summarise(losses, preds, targets, metric_names)

    @staticmethod
    def _summarise(
        losses: List[float],
        preds: List[Array],
        targets: List[Array],
        metric_names: Sequence[str],
    ) -> dict:
        metrics = {"loss": float(np.mean(losses)) if losses else 0.0}
        if preds:
            metrics.update(compute_metrics(metric_names, np.stack(preds), np.stack(targets)))
        return metrics

    def _emit_step(self, step: int, metrics: Mapping[str, float]) -> None:
        for callback in self.callbacks:
            if hasattr(callback, "on_step"):
                callback.on_step(step, metrics)  # type: ignore[attr-defined]

    def _emit_epoch(self, epoch: int, record: Mapping[str, float]) -> None:
        """Send the epoch record, including any ``val_`` metrics, to the callbacks."""

        for callback in self.callbacks:
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, record)  # type: ignore[attr-defined]
            elif callable(callback) and not hasattr(callback, "on_step"):
                callback(epoch, record)

    @staticmethod
    def _emit_split(
        split: str,
        epoch: int,
        metrics: Mapping[str, float],
        loggers: Mapping[str, Sequence[object]],
    ) -> None:
        for callback in loggers.get(split, []):
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(epoch, metrics)


__all__ = ["OnlineTrainer"]
