"""Dataset registry and metadata contracts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, MutableMapping

import numpy as np

from ..core.types import Array

TASK_TYPES = "regression", "multiclass", "binary"


@dataclass(frozen=True)
class Dataset:
    """An in-memory, full-batch dataset.

    Attributes
    ----------
    inputs:
        Feature matrix of shape ``[N, d_in]``.
    targets:
        Labels, either ``[N]`` for binary tasks or ``[N, C]`` one-hot rows.
    task_type:
        One of ``{"regression", "multiclass", "binary"}``.
    provenance:
        Free-form description recorded in run manifests.
    """

    name: str
    inputs: Array
    targets: Array
    task_type: str
    provenance: Dict[str, Any] = field(default_factory=dict)

    @property
    def d_in(self) -> int:
        return int(self.inputs.shape[1])

    @property
    def d_out(self) -> int:
        return 1 if self.targets.ndim == 1 else int(self.targets.shape[1])

    def __len__(self) -> int:
        return int(self.inputs.shape[0])


DatasetFactory = Callable[..., Dataset]

_REGISTRY: MutableMapping[str, DatasetFactory] = {}


def register_dataset(
    name: str | None = None,
    factory: DatasetFactory | None = None,
) -> Callable[[DatasetFactory], DatasetFactory] | DatasetFactory:
    """Register a dataset factory.

    ``register_dataset`` can be used both as a decorator::

        @register_dataset("logic_or")
        def make_or(**kwargs):
            ...

    or directly::

        register_dataset("logic_or", make_or)
    """

    def _decorator(func: DatasetFactory) -> DatasetFactory:
        _REGISTRY[str(name or func.__name__)] = func
        return func

    if factory is not None:
        return _decorator(factory)
    return _decorator


def get_dataset(name: str, /, **options: Any) -> Dataset:
    """Build the dataset registered under ``name``."""

    if name not in _REGISTRY:
        available = ", ".join(available_datasets())
        raise KeyError(f"Unknown dataset {name!r}. Available datasets: {available}")
    dataset = _REGISTRY[name](**options)
    _validate(dataset)
    return dataset


def available_datasets() -> Iterable[str]:
    return sorted(_REGISTRY)


def _validate(dataset: Dataset) -> None:
    if dataset.task_type not in TASK_TYPES:
        raise ValueError(f"Invalid task type: {dataset.task_type}")
    if dataset.inputs.ndim != 2:
        raise ValueError("Dataset inputs must be a 2-D array")
    if dataset.inputs.shape[0] != dataset.targets.shape[0]:
        raise ValueError(
            f"Dataset {dataset.name!r} has {dataset.inputs.shape[0]} inputs "
            f"but {dataset.targets.shape[0]} targets"
        )
    if not np.all(np.isfinite(dataset.inputs)):
        raise ValueError(f"Dataset {dataset.name!r} contains non-finite inputs")


__all__ = ["Dataset", "available_datasets", "get_dataset", "register_dataset"]
