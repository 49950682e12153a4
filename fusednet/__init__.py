"""fusednet public API."""

from .core import activations  # noqa: F401
from .core import errors  # noqa: F401
from .core.layer import Layer
from .core.types import RunResult, TrainResult
from .persistence import ModelManager
from .training import metrics  # noqa: F401
from .training.network import NeuralNetwork
from .training.optimizers import AdamOptimizer
from .training.pipelines import load_preset, presets, run_pipeline

__all__ = [
    "AdamOptimizer",
    "Layer",
    "ModelManager",
    "NeuralNetwork",
    "RunResult",
    "TrainResult",
    "activations",
    "errors",
    "load_preset",
    "metrics",
    "presets",
    "run_pipeline",
]
