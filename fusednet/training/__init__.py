"""Training loop, optimizer, losses and metrics."""

from .losses import REGISTRY as LOSS_REGISTRY
from .network import NeuralNetwork
from .optimizers import AdamMoments, AdamOptimizer

__all__ = ["AdamMoments", "AdamOptimizer", "LOSS_REGISTRY", "NeuralNetwork"]
