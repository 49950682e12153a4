"""Adam optimizer with per-layer moment state."""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from typing import Dict, Tuple

import numpy as np

from ..core.errors import ConfigurationError
from ..core.layer import Layer
from ..core.types import Array


@dataclass
class AdamMoments:
    """First and second moments for one layer's weights and bias."""

    m_w: Array
    v_w: Array
    m_b: Array
    v_b: Array

    @classmethod
    def zeros_like(cls, grad_w: Array, grad_b: Array) -> "AdamMoments":
        return cls(
            m_w=np.zeros_like(grad_w),
            v_w=np.zeros_like(grad_w),
            m_b=np.zeros_like(grad_b),
            v_b=np.zeros_like(grad_b),
        )


@dataclass
class AdamOptimizer:
    """Adam with a single step counter shared by every layer it updates.

    The counter advances once per :meth:`update_layer` call, so bias
    correction stays consistent only while every layer is updated exactly
    once per training step. A :class:`RuntimeWarning` is emitted when the
    per-layer update counts drift apart.
    """

    learning_rate: float = 0.001
    beta1: float = 0.9
    beta2: float = 0.999
    epsilon: float = 1e-8
    _t: int = field(default=0, init=False, repr=False)
    _moments: Dict[int, AdamMoments] = field(default_factory=dict, init=False, repr=False)
    _updates: Dict[int, int] = field(default_factory=dict, init=False, repr=False)
    _owner: object = field(default=None, init=False, repr=False)

    @property
    def step(self) -> int:
        return self._t

    def state_for(self, index: int) -> AdamMoments | None:
        return self._moments.get(index)

    def bind(self, owner: object) -> None:
        """Attach the optimizer to the network whose layer indices key its state."""

        if self._owner is not None and self._owner is not owner:
            raise ConfigurationError(
                "optimizer is already bound to another network; layer indices "
                "restart at 0 in every network, so moment state cannot be shared"
            )
        self._owner = owner

    def reset(self) -> None:
        self._t = 0
        self._moments.clear()
        self._updates.clear()

    def update_layer(self, layer: Layer) -> None:
        if layer.index is None:
            raise ValueError("layer has no index; add it to a NeuralNetwork first")
        self._t += 1
        key = layer.index
        self._track(key)

        grad_w, grad_b = layer.get_gradients()
        weights, bias = layer.get_params()
        moments = self._moments.get(key)
        if moments is None:
            moments = AdamMoments.zeros_like(grad_w, grad_b)

        new_w, moments.m_w, moments.v_w = self._adam(weights, grad_w, moments.m_w, moments.v_w)
        new_b, moments.m_b, moments.v_b = self._adam(bias, grad_b, moments.m_b, moments.v_b)

        layer.set_params(new_w, new_b)
        self._moments[key] = moments

    def _adam(
        self, param: Array, grad: Array, m: Array, v: Array
    ) -> Tuple[Array, Array, Array]:
        m = self.beta1 * m + (1.0 - self.beta1) * grad
        v = self.beta2 * v + (1.0 - self.beta2) * np.square(grad)
        m_hat = m / (1.0 - self.beta1**self._t)
        v_hat = v / (1.0 - self.beta2**self._t)
        update = self.learning_rate * m_hat / (np.sqrt(v_hat) + self.epsilon)
        return param - update, m, v

    def _track(self, key: int) -> None:
        count = self._updates.get(key, 0) + 1
        self._updates[key] = count
        others = [n for idx, n in self._updates.items() if idx != key]
        if others and count - min(others) > 1:
            warnings.warn(
                f"layer {key} has been updated {count} times while another layer "
                f"has only {min(others)} updates; the shared Adam step counter "
                "assumes one update per layer per step",
                RuntimeWarning,
                stacklevel=3,
            )


__all__ = ["AdamMoments", "AdamOptimizer"]
