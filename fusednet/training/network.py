"""Sequential network and its full-batch training loop."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Mapping, Sequence, Tuple

import numpy as np

from ..core.errors import ConfigurationError
from ..core.layer import Layer
from ..core.types import Array, TrainResult
from .losses import REGISTRY as LOSS_REGISTRY
from .losses import output_gradient
from .optimizers import AdamOptimizer

logger = logging.getLogger(__name__)

MIN_IMPROVEMENT = 1e-6
LOG_EVERY = 100


class NeuralNetwork:
    """Ordered stack of :class:`Layer` objects trained with Adam.

    Training is full-batch: each epoch runs one forward pass over the whole
    input, one loss evaluation, and one backward pass in which every layer is
    updated by the optimizer right after its own gradients are computed.
    """

    def __init__(
        self,
        learning_rate: float = 0.01,
        patience: int = 500,
        optimizer: AdamOptimizer | None = None,
    ) -> None:
        if patience < 1:
            raise ValueError("patience must be at least 1")
        self.optimizer = optimizer or AdamOptimizer(learning_rate=learning_rate)
        self.optimizer.bind(self)
        self.patience = int(patience)
        self._layers: list[Layer] = []

    @property
    def layers(self) -> Tuple[Layer, ...]:
        return tuple(self._layers)

    def add_layer(self, layer: Layer) -> "NeuralNetwork":
        if self._layers and self._layers[-1].output_size != layer.input_size:
            raise ConfigurationError(
                f"layer {len(self._layers)} expects {layer.input_size} inputs but the "
                f"previous layer produces {self._layers[-1].output_size}"
            )
        layer.index = len(self._layers)
        self._layers.append(layer)
        return self

    def parameter_count(self) -> int:
        return sum(layer.parameter_count() for layer in self._layers)

    def predict(self, inputs: Array) -> Array:
        out = np.asarray(inputs, dtype=np.float64)
        for layer in self._layers:
            out = layer.forward(out)
        return out

    def calculate_loss(self, labels: Array, predictions: Array, loss: str = "bce") -> float:
        return LOSS_REGISTRY.get(loss)(labels, predictions)

    def evaluate(
        self,
        inputs: Array,
        labels: Array,
        metrics: Mapping[str, Callable[[Array, Array], float]],
    ) -> dict[str, float]:
        predictions = self.predict(inputs)
        return {name: float(fn(labels, predictions)) for name, fn in metrics.items()}

    def train(
        self,
        inputs: Array,
        labels: Array,
        epochs: int = 1000,
        loss: str = "bce",
        verbose: bool = False,
        callbacks: Sequence[object] | None = None,
    ) -> TrainResult:
        if not self._layers:
            raise ConfigurationError("cannot train a network without layers")
        if epochs < 1:
            raise ValueError("epochs must be at least 1")
        loss_fn = LOSS_REGISTRY.get(loss)
        X = np.asarray(inputs, dtype=np.float64)
        y = np.asarray(labels, dtype=np.float64)
        callbacks = list(callbacks or [])

        best = float("inf")
        no_improve = 0
        history: list[float] = []
        stop_reason = "epochs_exhausted"
        epoch = 0

        for epoch in range(epochs):
            predictions = self.predict(X)
            current = loss_fn(y, predictions)
            history.append(current)
            self._emit_epoch(callbacks, epoch, {"loss": current})

            if current < best - MIN_IMPROVEMENT:
                best = current
                no_improve = 0
                if verbose and epoch % LOG_EVERY == 0:
                    logger.info("epoch %d loss %.6f", epoch, best)
            else:
                no_improve += 1
                if no_improve >= self.patience:
                    stop_reason = "early_stop"
                    if verbose:
                        logger.info("early stop at epoch %d, loss %.6f", epoch, current)
                    break

            grad = output_gradient(self._layers[-1].get_activation(), y, predictions)
            for layer in reversed(self._layers):
                grad = layer.backward(grad)
                self.optimizer.update_layer(layer)

        return TrainResult(
            epochs_run=len(history),
            stopped_epoch=epoch,
            stop_reason=stop_reason,
            best_loss=best,
            final_loss=history[-1],
            history=history,
        )

    @staticmethod
    def _emit_epoch(
        callbacks: Iterable[object], epoch: int, metrics: Mapping[str, float]
    ) -> None:
        for callback in callbacks:
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(epoch, metrics)


__all__ = ["NeuralNetwork"]
