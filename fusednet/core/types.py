"""Core typing contracts for fusednet."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import numpy as np

Array = np.ndarray


@dataclass(frozen=True)
class TrainResult:
    """Summary returned by :meth:`fusednet.training.network.NeuralNetwork.train`."""

    epochs_run: int
    stopped_epoch: int
    stop_reason: str
    best_loss: float
    final_loss: float
    history: List[float] = field(default_factory=list)

    @property
    def early_stopped(self) -> bool:
        return self.stop_reason == "early_stop"


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :func:`fusednet.training.pipelines.run_pipeline`."""

    epochs: int
    metrics_path: str
    manifest_path: str
    model_path: str = ""
    final_metrics: dict = field(default_factory=dict)
