"""Metric sinks that record an online training run."""

from __future__ import annotations

import csv
import json
import math
from pathlib import Path
from typing import Any, Dict, List, Mapping


def _jsonable(value: float) -> float | None:
    # diverging runs produce inf/nan, which json would emit as invalid tokens
    return value if math.isfinite(value) else None


def _numeric(metrics: Mapping[str, Any]) -> Dict[str, float]:
    return {
        k: float(v)
        for k, v in metrics.items()
        if isinstance(v, (int, float)) and not isinstance(v, bool)
    }


class JsonlSink:
    """JSON-lines log of one run.

    The first record (``"event": "run"``) describes the network and
    hyperparameters when ``run_info`` is given; every following record is a
    ``"step"`` or ``"epoch"`` event.  Non-finite metric values are written
    as ``null``.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        split: str = "train",
        seed: int | None = None,
        run_info: Mapping[str, Any] | None = None,
    ) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.split = split
        self.seed = seed
        with self.path.open("w", encoding="utf-8") as handle:
            if run_info is not None:
                handle.write(json.dumps({"event": "run", "seed": seed, **run_info}) + "\n")

    def _write(self, event: str, index: int, metrics: Mapping[str, Any]) -> None:
        record: Dict[str, Any] = {"event": event, event: int(index), "split": self.split}
        record.update({k: _jsonable(v) for k, v in _numeric(metrics).items()})
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record) + "\n")

    def on_step(self, step: int, metrics: Mapping[str, Any]) -> None:
        self._write("step", step, metrics)

    def on_epoch(self, epoch: int, metrics: Mapping[str, Any]) -> None:
        self._write("epoch", epoch, metrics)

    def read(self) -> List[Dict[str, Any]]:
        with self.path.open(encoding="utf-8") as handle:
            return [json.loads(line) for line in handle if line.strip()]


class CsvSink:
    """Per-epoch CSV table.

    The columns are fixed by the first epoch written; metrics that only
    appear later are dropped and missing ones are left blank, so every row
    lines up with the header.
    """

    def __init__(self, path: str | Path, *, split: str = "train") -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")
        self.split = split
        self._fieldnames: List[str] | None = None

    def on_epoch(self, epoch: int, metrics: Mapping[str, Any]) -> None:
        row: Dict[str, Any] = {"epoch": int(epoch), "split": self.split}
        row.update(_numeric(metrics))
        if self._fieldnames is None:
            self._fieldnames = ["epoch", "split"] + sorted(set(row) - {"epoch", "split"})
        with self.path.open("a", encoding="utf-8", newline="") as handle:
            writer = csv.DictWriter(
                handle, fieldnames=self._fieldnames, restval="", extrasaction="ignore"
            )
            if handle.tell() == 0:
                writer.writeheader()
            writer.writerow(row)

    __call__ = on_epoch


__all__ = ["CsvSink", "JsonlSink"]
