"""Loss-curve rendering for training runs."""

from __future__ import annotations

from pathlib import Path
from typing import List


class PlotAdapter:
    """Record the loss per epoch and render it with the running best.

    Nothing is recorded or written unless ``enable_plots`` is set. The figure
    is produced by :meth:`close`, which can mark the epoch where early
    stopping ended the run.
    """

    def __init__(self, run_dir: str | Path, enable_plots: bool = False):
        self.enable_plots = enable_plots
        self.run_dir = Path(run_dir)
        self.epochs: List[int] = []
        self.losses: List[float] = []
        self.best: List[float] = []

    def on_epoch(self, epoch: int, metrics) -> None:
        if not self.enable_plots or "loss" not in metrics:
            return
        loss = float(metrics["loss"])
        self.epochs.append(int(epoch))
        self.losses.append(loss)
        self.best.append(min(loss, self.best[-1]) if self.best else loss)

    __call__ = on_epoch

    def close(self, stopped_epoch: int | None = None) -> Path | None:
        if not self.enable_plots or not self.epochs:
            return None
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt

        self.run_dir.mkdir(parents=True, exist_ok=True)
        fig, ax = plt.subplots()
        ax.plot(self.epochs, self.losses, label="loss")
        ax.plot(self.epochs, self.best, linestyle="--", label="best")
        if stopped_epoch is not None:
            ax.axvline(stopped_epoch, color="grey", linestyle=":", label="early stop")
        ax.set_xlabel("Epoch")
        ax.set_ylabel("Loss")
        ax.set_yscale("log" if min(self.losses) > 0 else "linear")
        ax.legend()
        plot_path = self.run_dir / "loss.png"
        fig.savefig(plot_path)
        plt.close(fig)
        return plot_path


__all__ = ["PlotAdapter"]
