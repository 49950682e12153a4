"""Loss registry and output-layer gradient seeding."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Tuple

import numpy as np

from ..core.errors import ConfigurationError, LossShapeError, UnknownLossError
from ..core.types import Array

EPSILON = 1e-12

LossFn = Callable[[Array, Array], float]


@dataclass(frozen=True)
class Loss:
    """Named loss taking ``(labels, predictions)`` and returning a scalar."""

    name: str
    fn: LossFn

    def __call__(self, labels: Array, predictions: Array) -> float:
        return self.fn(labels, predictions)


class LossRegistry:
    """Central registry for loss functions."""

    def __init__(self) -> None:
        self._registry: Dict[str, Loss] = {}

    def register(self, name: str, fn: LossFn) -> None:
        self._registry[name] = Loss(name, fn)

    def names(self) -> Iterable[str]:
        return sorted(self._registry)

    def get(self, name: str) -> Loss:
        try:
            return self._registry[name]
        except KeyError as exc:
            available = ", ".join(self.names())
            raise UnknownLossError(
                f"Unknown loss {name!r}. Available losses: {available}"
            ) from exc

    def resolve(self, name: str, *, task_type: str) -> Loss:
        if name == "auto":
            if task_type == "regression":
                name = "mse"
            elif task_type == "multiclass":
                name = "cce"
            elif task_type == "binary":
                name = "bce"
            else:
                raise ValueError(f"Unknown task type: {task_type}")
        return self.get(name)


def _as_2d(values: Array, what: str) -> Array:
    arr = np.asarray(values, dtype=np.float64)
    if arr.ndim == 1:
        return arr.reshape(arr.shape[0], 1)
    if arr.ndim == 2:
        return arr
    raise LossShapeError(f"{what} have invalid rank {arr.ndim}; expected 1 or 2")


def reshape_for_loss(labels: Array, predictions: Array) -> Tuple[Array, Array]:
    """Promote rank-1 labels/predictions to ``[N, 1]``."""

    return _as_2d(labels, "labels"), _as_2d(predictions, "predictions")


def mse(labels: Array, predictions: Array) -> float:
    y, p = reshape_for_loss(labels, predictions)
    return float(np.mean(np.square(y - p)))


def binary_cross_entropy(labels: Array, predictions: Array) -> float:
    y, p = reshape_for_loss(labels, predictions)
    p = np.clip(p, EPSILON, 1.0 - EPSILON)
    return float(-np.mean(y * np.log(p) + (1.0 - y) * np.log(1.0 - p)))


def categorical_cross_entropy(labels: Array, predictions: Array) -> float:
    """Mean over rows of ``-sum_j y_j log p_j``; labels are one-hot."""

    y, p = reshape_for_loss(labels, predictions)
    p = np.clip(p, EPSILON, 1.0 - EPSILON)
    per_row = -np.sum(y * np.log(p), axis=1)
    return float(np.mean(per_row))


def output_gradient(activation: str, labels: Array, predictions: Array) -> Array:
    """Initial gradient for the backward pass, chosen by the output activation.

    ``sigmoid`` pairs with binary cross-entropy. ``softmax`` pairs with
    categorical cross-entropy over one-hot labels; the softmax layer skips its
    own derivative on that assumption, so combining softmax with any other
    loss yields silently wrong gradients.
    """

    predictions = np.asarray(predictions, dtype=np.float64)
    labels = np.asarray(labels, dtype=np.float64)
    if activation == "sigmoid":
        return predictions - labels.reshape(predictions.shape)
    if activation == "softmax":
        return predictions - labels
    raise ConfigurationError(
        f"No initial gradient defined for output activation {activation!r}; "
        "use 'sigmoid' or 'softmax' on the output layer"
    )


REGISTRY = LossRegistry()
REGISTRY.register("mse", mse)
REGISTRY.register("bce", binary_cross_entropy)
REGISTRY.register("cce", categorical_cross_entropy)

__all__ = [
    "EPSILON",
    "Loss",
    "LossRegistry",
    "REGISTRY",
    "binary_cross_entropy",
    "categorical_cross_entropy",
    "mse",
    "output_gradient",
    "reshape_for_loss",
]
