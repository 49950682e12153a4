"""Fused affine + activation layer."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np

from . import activations
from .errors import LayerStateError
from .types import Array

# Activations initialised with He scaling; the rest use Glorot scaling.
_HE_SCALED = {"relu", "leaky_relu", "sigmoid"}


@dataclass(eq=False)
class Layer:
    """Dense layer computing ``activation(x @ W + b)``.

    ``index`` is assigned by :meth:`NeuralNetwork.add_layer` and keys the
    optimizer state for this layer. The forward caches are populated by
    :meth:`forward` and consumed by the matching :meth:`backward` call; the
    gradient caches are populated by :meth:`backward` and consumed by the
    optimizer.
    """

    input_size: int
    output_size: int
    activation: str = "relu"
    seed: Optional[int] = None
    index: Optional[int] = None
    weights: Array = field(init=False, repr=False)
    bias: Array = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.input_size <= 0 or self.output_size <= 0:
            raise ValueError(
                f"Layer sizes must be positive, got {self.input_size}x{self.output_size}"
            )
        activations.validate(self.activation)
        self.reset(self.seed)

    def reset(self, seed: Optional[int] = None) -> None:
        """Draw fresh parameters and drop every cache."""

        rng = np.random.default_rng(seed)
        if self.activation in _HE_SCALED:
            scale = math.sqrt(2.0 / self.input_size)
        else:
            scale = math.sqrt(2.0 / (self.input_size + self.output_size))
        shape = (self.input_size, self.output_size)
        self.weights = rng.uniform(-1.0, 1.0, size=shape) * scale
        self.bias = rng.uniform(-0.1, 0.1, size=self.output_size)
        self.last_input: Array | None = None
        self.last_z: Array | None = None
        self.last_output: Array | None = None
        self.grad_weights: Array | None = None
        self.grad_bias: Array | None = None

    def forward(self, inputs: Array) -> Array:
        x = np.array(inputs, dtype=np.float64, copy=True)
        if x.ndim == 1:
            x = x.reshape(1, x.shape[0])
        z = x @ self.weights + self.bias
        out = activations.apply(z, self.activation)
        self.last_input = x
        self.last_z = z
        self.last_output = out
        return out

    def backward(self, grad_output: Array) -> Array:
        """Cache ``(dW, dB)`` and return the gradient for the previous layer.

        A softmax layer passes ``grad_output`` through unchanged: the caller
        must already have folded the softmax Jacobian into it, which is only
        the case for ``prediction - label`` under categorical cross-entropy.
        """

        if self.last_input is None or self.last_z is None:
            raise LayerStateError("backward called before forward on this layer")
        grad = np.asarray(grad_output, dtype=np.float64)
        if self.activation == "softmax":
            dz = grad
        else:
            dz = grad * activations.derivative(self.last_z, self.activation)

        batch_size = self.last_input.shape[0]
        self.grad_weights = (self.last_input.T @ dz) / batch_size
        self.grad_bias = dz.sum(axis=0) / batch_size
        return dz @ self.weights.T

    def get_params(self) -> Tuple[Array, Array]:
        return self.weights, self.bias

    def set_params(self, weights: Array, bias: Array) -> None:
        """Replace weights and bias together."""

        weights = np.array(weights, dtype=np.float64)
        bias = np.array(bias, dtype=np.float64).reshape(-1)
        if weights.shape != (self.input_size, self.output_size):
            raise ValueError(
                f"weights shape {weights.shape} does not match "
                f"({self.input_size}, {self.output_size})"
            )
        if bias.shape != (self.output_size,):
            raise ValueError(
                f"bias shape {bias.shape} does not match ({self.output_size},)"
            )
        self.weights = weights
        self.bias = bias

    def get_gradients(self) -> Tuple[Array, Array]:
        if self.grad_weights is None or self.grad_bias is None:
            raise LayerStateError("no gradients cached; call backward first")
        return self.grad_weights, self.grad_bias

    def get_activation(self) -> str:
        return self.activation

    def parameter_count(self) -> int:
        return int(self.weights.size + self.bias.size)


__all__ = ["Layer"]
