"""Evaluation metrics over ``(labels, predictions)`` pairs."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, Mapping

import numpy as np

from ..core.types import Array

THRESHOLD = 0.5

MetricFn = Callable[[Array, Array], float]


def align_shapes(labels: Array, predictions: Array) -> Array:
    """Return ``labels`` shaped like ``predictions``.

    Only the ``[N] -> [N, 1]`` promotion is performed; any other mismatch is
    an error.
    """

    y = np.asarray(labels, dtype=np.float64)
    p = np.asarray(predictions)
    if y.shape == p.shape:
        return y
    if y.ndim == 1 and p.ndim == 2 and p.shape[1] == 1 and y.shape[0] == p.shape[0]:
        return y.reshape(p.shape)
    raise ValueError(f"Cannot align label shape {y.shape} with prediction shape {p.shape}")


def argmax(values: Array) -> Array:
    """One-hot encode the row-wise argmax of ``values``."""

    arr = np.asarray(values, dtype=np.float64)
    if arr.ndim == 1:
        arr = arr.reshape(1, -1)
    out = np.zeros_like(arr)
    out[np.arange(arr.shape[0]), np.argmax(arr, axis=1)] = 1.0
    return out


def _binarise(predictions: Array) -> Array:
    return (np.asarray(predictions, dtype=np.float64) > THRESHOLD).astype(np.float64)


def accuracy(labels: Array, predictions: Array) -> float:
    """Thresholded accuracy for one output column, argmax accuracy otherwise.

    With several columns a row counts as correct when its argmax matches the
    label's argmax, so the score is a fraction of rows. It is not the mean of
    element-wise agreement over the one-hot matrix, which would credit the
    zero entries of every wrong row.
    """

    p = np.asarray(predictions, dtype=np.float64)
    if p.ndim == 1:
        p = p.reshape(-1, 1)
    y = align_shapes(labels, p)
    if p.shape[1] == 1:
        return float(np.mean(_binarise(p) == y))
    return float(np.mean(np.argmax(p, axis=1) == np.argmax(y, axis=1)))


def precision(labels: Array, predictions: Array) -> float:
    y = align_shapes(labels, predictions)
    pred = _binarise(predictions)
    tp = float(np.sum(pred * y))
    fp = float(np.sum(pred)) - tp
    return tp / (tp + fp) if (tp + fp) > 0 else 0.0


def recall(labels: Array, predictions: Array) -> float:
    y = align_shapes(labels, predictions)
    pred = _binarise(predictions)
    tp = float(np.sum(pred * y))
    fn = float(np.sum(y)) - tp
    return tp / (tp + fn) if (tp + fn) > 0 else 0.0


def f1(labels: Array, predictions: Array) -> float:
    p = precision(labels, predictions)
    r = recall(labels, predictions)
    return 2 * p * r / (p + r) if (p + r) > 0 else 0.0


def mse(labels: Array, predictions: Array) -> float:
    p = np.asarray(predictions, dtype=np.float64)
    diff = np.asarray(labels, dtype=np.float64).reshape(p.shape) - p
    return float(np.mean(np.square(diff)))


def mae(labels: Array, predictions: Array) -> float:
    p = np.asarray(predictions, dtype=np.float64)
    diff = np.asarray(labels, dtype=np.float64).reshape(p.shape) - p
    return float(np.mean(np.abs(diff)))


METRICS: Dict[str, MetricFn] = {
    "accuracy": accuracy,
    "precision": precision,
    "recall": recall,
    "f1": f1,
    "mse": mse,
    "mae": mae,
}


def default_metrics(task_type: str) -> list[str]:
    if task_type == "regression":
        return ["mse", "mae"]
    if task_type == "multiclass":
        return ["accuracy"]
    if task_type == "binary":
        return ["accuracy", "precision", "recall", "f1"]
    raise ValueError(f"Unknown task type: {task_type}")


def compute_metrics(
    names: Iterable[str], labels: Array, predictions: Array
) -> Mapping[str, float]:
    results: Dict[str, float] = {}
    for name in names:
        key = name.lower()
        if key not in METRICS:
            raise KeyError(f"Unknown metric: {name}")
        results[key] = METRICS[key](labels, predictions)
    return results


__all__ = [
    "METRICS",
    "accuracy",
    "align_shapes",
    "argmax",
    "compute_metrics",
    "default_metrics",
    "f1",
    "mae",
    "mse",
    "precision",
    "recall",
]
