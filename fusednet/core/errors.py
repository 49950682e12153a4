"""Exception hierarchy shared by the fusednet modules."""

from __future__ import annotations


class FusedNetError(Exception):
    """Base class for every error raised by fusednet."""


class UnknownActivationError(FusedNetError, ValueError):
    """Raised when an activation tag is not registered."""


class UnknownLossError(FusedNetError, ValueError):
    """Raised when a loss name is not registered."""


class LossShapeError(FusedNetError, ValueError):
    """Raised when labels or predictions are not rank 1 or rank 2."""


class ConfigurationError(FusedNetError, RuntimeError):
    """Raised for network or pipeline configurations that cannot be trained."""


class ModelFormatError(FusedNetError, RuntimeError):
    """Raised when a persisted model cannot be applied to a network."""


class LayerStateError(FusedNetError, RuntimeError):
    """Raised when a layer is asked for cached values it does not hold yet."""


__all__ = [
    "ConfigurationError",
    "FusedNetError",
    "LayerStateError",
    "LossShapeError",
    "ModelFormatError",
    "UnknownActivationError",
    "UnknownLossError",
]
