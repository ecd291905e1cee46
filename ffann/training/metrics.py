"""Metric helpers for the online trainer."""

from __future__ import annotations

from typing import Dict, Sequence

import numpy as np

from ..core.types import Array

DEFAULT_METRICS = ("mae", "rmse", "max_abs_error")


def compute_metric(name: str, predictions: Array, targets: Array) -> float:
    key = name.lower()
    diff = np.asarray(predictions, dtype=np.float64) - np.asarray(targets, dtype=np.float64)
    if key == "mae":
        return float(np.mean(np.abs(diff)))
    if key == "rmse":
        return float(np.sqrt(np.mean(diff**2)))
    if key == "max_abs_error":
        return float(np.max(np.abs(diff)))
    raise KeyError(f"Unknown metric {name!r}. Available metrics: {', '.join(DEFAULT_METRICS)}")


def compute_metrics(
    names: Sequence[str], predictions: Array, targets: Array
) -> Dict[str, float]:
    if predictions.size == 0:
        return {}
    return {name: compute_metric(name, predictions, targets) for name in names}


__all__ = ["DEFAULT_METRICS", "compute_metric", "compute_metrics"]
