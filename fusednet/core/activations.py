"""Activation functions and their derivatives, dispatched by tag."""

from __future__ import annotations

from typing import Callable, Dict, Tuple

import numpy as np

from .errors import UnknownActivationError
from .types import Array

LEAKY_SLOPE = 0.01

ActivationFn = Callable[[Array], Array]


def relu(x: Array) -> Array:
    """Return the ReLU activation."""

    return np.maximum(x, 0.0)


def relu_deriv(x: Array) -> Array:
    return (x > 0).astype(np.float64)


def leaky_relu(x: Array) -> Array:
    """Return the leaky ReLU activation with slope :data:`LEAKY_SLOPE`."""

    return np.where(x > 0, x, LEAKY_SLOPE * x)


def leaky_relu_deriv(x: Array) -> Array:
    return np.where(x > 0, 1.0, LEAKY_SLOPE)


def tanh(x: Array) -> Array:
    return np.tanh(x)


def tanh_deriv(x: Array) -> Array:
    return 1.0 - np.tanh(x) ** 2


def sigmoid(x: Array) -> Array:
    """Return the logistic sigmoid; inputs are clipped to keep ``exp`` finite."""

    return 1.0 / (1.0 + np.exp(-np.clip(x, -500.0, 500.0)))


def sigmoid_deriv(x: Array) -> Array:
    s = sigmoid(x)
    return s * (1.0 - s)


def softmax(x: Array) -> Array:
    """Row-wise softmax over the last axis."""

    shifted = x - np.max(x, axis=-1, keepdims=True)
    e = np.exp(shifted)
    return e / np.sum(e, axis=-1, keepdims=True)


def softmax_deriv(x: Array) -> Array:
    """Diagonal of the softmax Jacobian, ``s * (1 - s)``."""

    s = softmax(x)
    return s * (1.0 - s)


def linear(x: Array) -> Array:
    return np.array(x, dtype=np.float64, copy=True)


def linear_deriv(x: Array) -> Array:
    return np.ones_like(x, dtype=np.float64)


_TABLE: Dict[str, Tuple[ActivationFn, ActivationFn]] = {
    "relu": (relu, relu_deriv),
    "leaky_relu": (leaky_relu, leaky_relu_deriv),
    "tanh": (tanh, tanh_deriv),
    "sigmoid": (sigmoid, sigmoid_deriv),
    "softmax": (softmax, softmax_deriv),
    "linear": (linear, linear_deriv),
}

ACTIVATIONS: Tuple[str, ...] = tuple(_TABLE)


def _lookup(kind: str) -> Tuple[ActivationFn, ActivationFn]:
    try:
        return _TABLE[kind]
    except KeyError as exc:
        available = ", ".join(ACTIVATIONS)
        raise UnknownActivationError(
            f"Unknown activation {kind!r}. Available activations: {available}"
        ) from exc


def validate(kind: str) -> str:
    """Return ``kind`` unchanged if it is a supported tag."""

    _lookup(kind)
    return kind


def apply(x: Array, kind: str) -> Array:
    """Evaluate the activation ``kind`` elementwise on ``x``."""

    fn, _ = _lookup(kind)
    return fn(np.asarray(x, dtype=np.float64))


def derivative(x: Array, kind: str) -> Array:
    """Evaluate the derivative of ``kind`` at the pre-activation ``x``."""

    _, deriv = _lookup(kind)
    return deriv(np.asarray(x, dtype=np.float64))


__all__ = [
    "ACTIVATIONS",
    "LEAKY_SLOPE",
    "apply",
    "derivative",
    "leaky_relu",
    "linear",
    "relu",
    "sigmoid",
    "softmax",
    "tanh",
    "validate",
]
