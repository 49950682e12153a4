"""Small in-memory datasets used by presets and tests."""

from __future__ import annotations

import numpy as np

from .registry import Dataset, register_dataset

_GATE_INPUTS = np.array([[0, 0], [0, 1], [1, 0], [1, 1]], dtype=np.float64)

_GATES = {
    "or": [0.0, 1.0, 1.0, 1.0],
    "and": [0.0, 0.0, 0.0, 1.0],
    "xor": [0.0, 1.0, 1.0, 0.0],
}

# sepal length, sepal width, petal length, petal width
_IRIS_ROWS = [
    [5.1, 3.5, 1.4, 0.2],
    [4.9, 3.0, 1.4, 0.2],
    [7.0, 3.2, 4.7, 1.4],
    [6.4, 3.2, 4.5, 1.5],
    [6.3, 3.3, 6.0, 2.5],
    [5.8, 2.7, 5.1, 1.9],
]
_IRIS_CLASSES = [0, 0, 1, 1, 2, 2]


def _logic_gate(gate: str) -> Dataset:
    return Dataset(
        name=f"logic_{gate}",
        inputs=_GATE_INPUTS.copy(),
        targets=np.array(_GATES[gate], dtype=np.float64),
        task_type="binary",
        provenance={"type": "logic_gate", "gate": gate},
    )


@register_dataset("logic_or")
def logic_or(**_: object) -> Dataset:
    return _logic_gate("or")


@register_dataset("logic_and")
def logic_and(**_: object) -> Dataset:
    return _logic_gate("and")


@register_dataset("logic_xor")
def logic_xor(**_: object) -> Dataset:
    return _logic_gate("xor")


@register_dataset("iris_sample")
def iris_sample(*, normalize: bool = True, **_: object) -> Dataset:
    """Six iris flowers, two per class, with one-hot targets."""

    X = np.array(_IRIS_ROWS, dtype=np.float64)
    if normalize:
        lo, hi = X.min(axis=0), X.max(axis=0)
        X = (X - lo) / np.where(hi - lo == 0, 1.0, hi - lo)
    y = np.eye(3, dtype=np.float64)[_IRIS_CLASSES]
    return Dataset(
        name="iris_sample",
        inputs=X,
        targets=y,
        task_type="multiclass",
        provenance={"type": "iris_sample", "rows": len(_IRIS_ROWS), "normalize": normalize},
    )
