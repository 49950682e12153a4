"""CSV loader for binary classification tables."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import numpy as np
import pandas as pd
from sklearn.preprocessing import MinMaxScaler

from .registry import Dataset, register_dataset

_LABELS = {"yes": 1.0, "no": 0.0, "true": 1.0, "false": 0.0, "1": 1.0, "0": 0.0}


def _encode_target(column: pd.Series) -> pd.Series:
    return column.astype(str).str.strip().str.lower().map(_LABELS)


@register_dataset("csv")
def load_csv(
    *,
    csv_path: str | Path,
    target_col: str,
    feature_cols: Sequence[str] | None = None,
    normalize: bool = True,
    **_: object,
) -> Dataset:
    """Load features and a yes/no style target from ``csv_path``.

    Rows whose target is not one of ``yes/no/true/false/1/0`` are dropped.
    Features are min-max scaled to ``[0, 1]`` when ``normalize`` is set.
    """

    path = Path(csv_path)
    df = pd.read_csv(path)
    if target_col not in df.columns:
        raise KeyError(f"Target column {target_col!r} not found in CSV")
    columns = list(feature_cols) if feature_cols else [c for c in df.columns if c != target_col]
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise KeyError(f"Feature columns not found in CSV: {missing}")

    y = _encode_target(df[target_col])
    keep = y.notna()
    X = df.loc[keep, columns].to_numpy(dtype=np.float64)
    targets = y[keep].to_numpy(dtype=np.float64)

    normalization: dict[str, list[float]] = {}
    if normalize and X.shape[0]:
        scaler = MinMaxScaler()
        X = scaler.fit_transform(X)
        normalization = {
            "min": scaler.data_min_.tolist(),
            "max": scaler.data_max_.tolist(),
        }

    return Dataset(
        name="csv",
        inputs=X,
        targets=targets,
        task_type="binary",
        provenance={
            "type": "csv",
            "path": str(path),
            "target_col": target_col,
            "feature_cols": columns,
            "rows": int(X.shape[0]),
            "dropped": int((~keep).sum()),
            "normalization": normalization,
        },
    )
