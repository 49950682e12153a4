"""Config-driven training runs with named presets."""

from __future__ import annotations

import json
import logging
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence

from ..core.errors import ConfigurationError, FusedNetError
from ..core.layer import Layer
from ..core.types import RunResult
from ..data import get_dataset
from ..persistence import ModelManager
from ..reporting.artifacts import write_manifest
from ..reporting.metrics import CsvSink, JsonlSink
from ..reporting.plots import PlotAdapter
from .losses import REGISTRY as LOSS_REGISTRY
from .metrics import compute_metrics, default_metrics
from .network import NeuralNetwork

logger = logging.getLogger(__name__)

_PRESETS: Dict[str, Mapping[str, object]] = {
    "or_gate": {
        "data": {"name": "logic_or", "options": {}},
        "model": {
            "layers": [
                {"units": 8, "activation": "relu"},
                {"units": 1, "activation": "sigmoid"},
            ]
        },
        "train": {
            "epochs": 1000,
            "lr": 0.1,
            "patience": 500,
            "loss": "bce",
            "seed": 0,
            "run_dir": "runs/or-gate",
            "enable_plots": False,
        },
    },
    "and_gate": {
        "data": {"name": "logic_and", "options": {}},
        "model": {
            "layers": [
                {"units": 8, "activation": "relu"},
                {"units": 1, "activation": "sigmoid"},
            ]
        },
        "train": {
            "epochs": 1000,
            "lr": 0.1,
            "patience": 500,
            "loss": "bce",
            "seed": 0,
            "run_dir": "runs/and-gate",
            "enable_plots": False,
        },
    },
    "xor_tanh": {
        "data": {"name": "logic_xor", "options": {}},
        "model": {
            "layers": [
                {"units": 8, "activation": "tanh"},
                {"units": 1, "activation": "sigmoid"},
            ]
        },
        "train": {
            "epochs": 2000,
            "lr": 0.05,
            "patience": 500,
            "loss": "bce",
            "seed": 3,
            "run_dir": "runs/xor-tanh",
            "enable_plots": False,
        },
    },
    "iris_softmax": {
        "data": {"name": "iris_sample", "options": {"normalize": True}},
        "model": {
            "layers": [
                {"units": 8, "activation": "relu"},
                {"units": 3, "activation": "softmax"},
            ]
        },
        "train": {
            "epochs": 500,
            "lr": 0.05,
            "patience": 100,
            "loss": "cce",
            "seed": 1,
            "run_dir": "runs/iris-softmax",
            "enable_plots": False,
        },
    },
}


def presets() -> Mapping[str, Mapping[str, object]]:
    return _PRESETS


def load_preset(name: str) -> Dict[str, Any]:
    if name not in _PRESETS:
        available = ", ".join(sorted(_PRESETS))
        raise KeyError(f"Unknown preset {name!r}. Available presets: {available}")
    return deepcopy(dict(_PRESETS[name]))


def build_network(
    d_in: int,
    layer_cfgs: Sequence[Mapping[str, Any]],
    *,
    lr: float,
    patience: int,
    seed: int | None = None,
) -> NeuralNetwork:
    """Assemble a network from ``[{"units": int, "activation": str}, ...]``."""

    if not layer_cfgs:
        raise ConfigurationError("model.layers must list at least one layer")
    network = NeuralNetwork(learning_rate=lr, patience=patience)
    fan_in = int(d_in)
    for idx, cfg in enumerate(layer_cfgs):
        if "units" not in cfg:
            raise ConfigurationError(f"model.layers[{idx}] is missing 'units'")
        units = int(cfg["units"])
        try:
            layer = Layer(
                fan_in,
                units,
                activation=str(cfg.get("activation", "relu")),
                seed=None if seed is None else seed + idx,
            )
        except (FusedNetError, ValueError) as exc:
            raise ConfigurationError(f"model.layers[{idx}]: {exc}") from exc
        network.add_layer(layer)
        fan_in = units
    return network


def _require(config: Mapping[str, Any], section: str) -> Mapping[str, Any]:
    value = config.get(section)
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"config is missing the {section!r} section")
    return value


def _metric_names(value: object, task_type: str) -> List[str]:
    if value is None or value == "default":
        return default_metrics(task_type)
    if isinstance(value, str):
        return [m.strip() for m in value.split(",") if m.strip()]
    return [str(m) for m in value]  # type: ignore[union-attr]


def run_pipeline(config: Mapping[str, Any]) -> RunResult:
    """Train the network described by ``config`` and write run artifacts."""

    data_cfg = _require(config, "data")
    model_cfg = _require(config, "model")
    train_cfg = _require(config, "train")

    if "name" not in data_cfg:
        raise ConfigurationError("data.name is required")
    try:
        dataset = get_dataset(str(data_cfg["name"]), **dict(data_cfg.get("options") or {}))
    except (KeyError, TypeError, ValueError) as exc:
        raise ConfigurationError(f"data: {exc}") from exc
    seed = train_cfg.get("seed")
    seed = None if seed is None else int(seed)
    try:
        network = build_network(
            dataset.d_in,
            list(model_cfg.get("layers") or []),
            lr=float(train_cfg.get("lr", 0.01)),
            patience=int(train_cfg.get("patience", 500)),
            seed=seed,
        )
    except ValueError as exc:
        raise ConfigurationError(f"train: {exc}") from exc
    try:
        loss_name = LOSS_REGISTRY.resolve(
            str(train_cfg.get("loss", "auto")), task_type=dataset.task_type
        ).name
    except ValueError as exc:
        raise ConfigurationError(f"train.loss: {exc}") from exc
    metric_names = _metric_names(train_cfg.get("metrics"), dataset.task_type)

    run_dir = Path(str(train_cfg.get("run_dir", "runs/default")))
    run_dir.mkdir(parents=True, exist_ok=True)
    jsonl = JsonlSink(run_dir / "metrics.jsonl", split="train", seed=seed)
    csv_sink = CsvSink(run_dir / "metrics.csv", split="train")
    plots = PlotAdapter(run_dir, enable_plots=bool(train_cfg.get("enable_plots", False)))

    logger.info(
        "training %s on %s: %d layers, %d parameters, loss=%s",
        [layer.get_activation() for layer in network.layers],
        dataset.name,
        len(network.layers),
        network.parameter_count(),
        loss_name,
    )
    result = network.train(
        dataset.inputs,
        dataset.targets,
        epochs=int(train_cfg.get("epochs", 1000)),
        loss=loss_name,
        verbose=bool(train_cfg.get("verbose", False)),
        callbacks=[jsonl, csv_sink, plots],
    )
    plots.close(stopped_epoch=result.stopped_epoch if result.early_stopped else None)

    predictions = network.predict(dataset.inputs)
    final_metrics = {"loss": result.final_loss, "best_loss": result.best_loss}
    final_metrics.update(compute_metrics(metric_names, dataset.targets, predictions))

    model_path = ""
    if train_cfg.get("save_model", True):
        model_path = ModelManager.save(network, run_dir / "model.json")

    manifest = write_manifest(
        run_dir / "manifest.json",
        config=json.loads(json.dumps(config)),
        dataset_provenance=dataset.provenance,
        result={
            "epochs_run": result.epochs_run,
            "stop_reason": result.stop_reason,
            "metrics": final_metrics,
        },
    )
    logger.info("run finished after %d epochs (%s)", result.epochs_run, result.stop_reason)
    return RunResult(
        epochs=result.epochs_run,
        metrics_path=str(jsonl.path),
        manifest_path=manifest,
        model_path=model_path,
        final_metrics=final_metrics,
    )


__all__ = ["build_network", "load_preset", "presets", "run_pipeline"]
