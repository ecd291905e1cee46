"""Loss curves for online training runs."""

from __future__ import annotations

from pathlib import Path
from typing import List, Mapping, Tuple

import numpy as np

# past this many epochs the boundary markers just paint the axis grey
_MAX_EPOCH_MARKERS = 50


class PlotAdapter:
    """Record per-sample and per-epoch loss and draw them side by side.

    Used as a trainer callback: ``on_step`` receives each sample's loss and
    ``on_epoch`` the epoch record, whose optional ``val_loss`` is plotted
    next to the training loss.  Nothing is recorded unless ``enable_plots``.
    """

    def __init__(self, run_dir: str | Path, enable_plots: bool = False, filename: str = "loss.png"):
        self.enable_plots = enable_plots
        self.run_dir = Path(run_dir)
        self.filename = filename
        self._samples: List[Tuple[int, float]] = []
        self._epochs: List[Tuple[int, float, float]] = []
        self._boundaries: List[int] = []

    @property
    def epoch_boundaries(self) -> List[int]:
        """Last step number of every recorded epoch."""

        return list(self._boundaries)

    def on_step(self, step: int, metrics: Mapping[str, float]) -> None:
        if self.enable_plots:
            self._samples.append((step, float(metrics.get("loss", np.nan))))

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        if not self.enable_plots:
            return
        self._boundaries.append(self._samples[-1][0] if self._samples else 0)
        self._epochs.append(
            (
                epoch,
                float(metrics.get("loss", np.nan)),
                float(metrics.get("val_loss", np.nan)),
            )
        )

    def close(self) -> Path | None:
        if not self.enable_plots or not self._samples:
            return None
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt  # imported lazily for headless safety

        self.run_dir.mkdir(parents=True, exist_ok=True)
        fig, (ax_sample, ax_epoch) = plt.subplots(1, 2, figsize=(11, 4))

        steps, losses = (np.asarray(v) for v in zip(*self._samples))
        ax_sample.plot(steps, losses, linewidth=0.6)
        if len(self._boundaries) <= _MAX_EPOCH_MARKERS:
            for boundary in self._boundaries[:-1]:
                ax_sample.axvline(boundary + 0.5, color="grey", linestyle=":", linewidth=0.6)
        ax_sample.set_xlabel("Sample")
        ax_sample.set_ylabel("Loss")
        ax_sample.set_title("Per-sample loss")

        if self._epochs:
            epochs, train, val = (np.asarray(v) for v in zip(*self._epochs))
            ax_epoch.plot(epochs, train, marker=".", label="train")
            if np.isfinite(val).any():
                ax_epoch.plot(epochs, val, marker=".", label="val")
            ax_epoch.legend()
        ax_epoch.set_xlabel("Epoch")
        ax_epoch.set_title("Epoch mean loss")

        fig.tight_layout()
        plot_path = self.run_dir / self.filename
        fig.savefig(plot_path)
        plt.close(fig)
        return plot_path
