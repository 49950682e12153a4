import json
from pathlib import Path

import pytest
import yaml

from cli.main import main


def test_cli_runs_preset(tmp_path, capsys):
    run_dir = tmp_path / "or"
    main(["--preset", "or_gate", "--epochs", "25", "--run-dir", str(run_dir)])
    payload = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert payload["epochs"] == 25
    assert (run_dir / "metrics.jsonl").exists()
    assert (run_dir / "manifest.json").exists()
    assert Path(payload["model"]).exists()


def test_cli_yaml_override_and_dump(tmp_path, capsys):
    override = tmp_path / "override.yaml"
    override.write_text(
        yaml.safe_dump({"train": {"epochs": 15, "run_dir": str(tmp_path / "yaml")}})
    )
    dump = tmp_path / "resolved.json"
    main(["--preset", "and_gate", "--config", str(override), "--dump-config", str(dump)])
    resolved = json.loads(dump.read_text())
    assert resolved["data"]["name"] == "logic_and"
    assert resolved["train"]["epochs"] == 15
    payload = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert payload["epochs"] == 15


def test_cli_lists_presets(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--list-presets"])
    assert exc.value.code == 0
    names = capsys.readouterr().out.split()
    assert {"or_gate", "and_gate", "xor_tanh", "iris_softmax"} <= set(names)
