"""Dataset registry and loader helpers."""

# Ensure built-in datasets register themselves when the package is imported.
from . import builtin as _builtin  # noqa: F401
from . import csv_loader as _csv_loader  # noqa: F401
from .registry import Dataset, available_datasets, get_dataset, register_dataset

__all__ = ["Dataset", "available_datasets", "get_dataset", "register_dataset"]
