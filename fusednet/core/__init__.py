"""Core numerical primitives for fusednet."""

from . import activations, errors, types
from .layer import Layer

__all__ = ["Layer", "activations", "errors", "types"]
