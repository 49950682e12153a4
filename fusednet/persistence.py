"""Model persistence and evaluation helpers."""

from __future__ import annotations

import json
import zipfile
from pathlib import Path
from typing import Callable, List, Mapping

import numpy as np

from .core.errors import ModelFormatError
from .core.types import Array
from .training.network import NeuralNetwork


class ModelManager:
    """Save and restore layer parameters positionally.

    The JSON format is a list with one ``{"weights", "bias", "activation"}``
    record per layer, weights and bias stored as nested lists. The binary
    format stores the same records in a compressed ``.npz`` archive.
    """

    @staticmethod
    def to_records(network: NeuralNetwork) -> List[dict]:
        records = []
        for layer in network.layers:
            weights, bias = layer.get_params()
            records.append(
                {
                    "weights": weights.tolist(),
                    "bias": bias.tolist(),
                    "activation": layer.get_activation(),
                }
            )
        return records

    @staticmethod
    def apply_records(network: NeuralNetwork, records: object) -> None:
        if not isinstance(records, list):
            raise ModelFormatError("invalid model format: expected a list of layer records")
        layers = network.layers
        if len(records) != len(layers):
            missing = min(len(records), len(layers))
            raise ModelFormatError(
                f"missing parameters for layer {missing}: file has {len(records)} "
                f"layers, network has {len(layers)}"
            )
        for idx, (layer, params) in enumerate(zip(layers, records)):
            if not isinstance(params, Mapping) or not {"weights", "bias"} <= set(params):
                raise ModelFormatError(f"invalid record for layer {idx}")
            try:
                layer.set_params(np.asarray(params["weights"]), np.asarray(params["bias"]))
            except ValueError as exc:
                raise ModelFormatError(f"layer {idx}: {exc}") from exc

    @classmethod
    def save(cls, network: NeuralNetwork, path: str | Path, binary: bool = False) -> str:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        records = cls.to_records(network)
        if binary:
            payload = {}
            for idx, record in enumerate(records):
                payload[f"weights_{idx}"] = np.asarray(record["weights"], dtype=np.float64)
                payload[f"bias_{idx}"] = np.asarray(record["bias"], dtype=np.float64)
                payload[f"activation_{idx}"] = np.asarray(record["activation"])
            with path.open("wb") as handle:
                np.savez_compressed(handle, layers=np.asarray(len(records)), **payload)
        else:
            path.write_text(json.dumps(records))
        return str(path)

    @classmethod
    def load(cls, network: NeuralNetwork, path: str | Path, binary: bool = False) -> None:
        path = Path(path)
        if binary:
            records = cls._read_npz(path)
        else:
            try:
                records = json.loads(path.read_text())
            except json.JSONDecodeError as exc:
                raise ModelFormatError(f"invalid model format in {path}") from exc
        cls.apply_records(network, records)

    @staticmethod
    def _read_npz(path: Path) -> List[dict]:
        try:
            archive = np.load(path, allow_pickle=False)
        except FileNotFoundError:
            raise
        except (OSError, ValueError, zipfile.BadZipFile) as exc:
            raise ModelFormatError(f"invalid model format in {path}: {exc}") from exc
        if not hasattr(archive, "files"):
            raise ModelFormatError(f"invalid model format in {path}: not an npz archive")
        with archive:
            if "layers" not in archive.files:
                raise ModelFormatError(f"invalid model format in {path}")
            count = int(archive["layers"])
            records = []
            for idx in range(count):
                try:
                    records.append(
                        {
                            "weights": archive[f"weights_{idx}"],
                            "bias": archive[f"bias_{idx}"],
                            "activation": str(archive[f"activation_{idx}"]),
                        }
                    )
                except (KeyError, ValueError, zipfile.BadZipFile) as exc:
                    raise ModelFormatError(
                        f"missing parameters for layer {idx} in {path}: {exc}"
                    ) from exc
        return records

    @staticmethod
    def evaluate(
        network: NeuralNetwork,
        inputs: Array,
        labels: Array,
        metrics: Mapping[str, Callable[[Array, Array], float]],
    ) -> dict[str, float]:
        """Predict ``inputs`` and score the result with each metric callback."""

        return network.evaluate(inputs, labels, metrics)


__all__ = ["ModelManager"]
