from __future__ import annotations

import json
from pathlib import Path

from gvt.config.loader import ConfigLoader
from gvt.config.types import DEFAULT_CONTROL_DIR, GvtConfig


def _write_global_config(home: Path, data: dict) -> None:
    cfg_dir = home / ".config" / "gvt"
    cfg_dir.mkdir(parents=True, exist_ok=True)
    (cfg_dir / "config.json").write_text(json.dumps(data, indent=2), encoding="utf-8")


def test_defaults_without_config_files(tmp_path):
    cfg = ConfigLoader(project_root=tmp_path / "proj").load()

    assert cfg == GvtConfig()
    assert cfg.control_dir == ".gvt"
    assert cfg.init_message == "GVT initialized."
    assert cfg.history.default_limit is None
    assert cfg.copy.preserve_metadata is True


def test_global_config_is_applied(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    _write_global_config(tmp_path, {"initMessage": "Hello", "history": {"defaultLimit": 5}})

    cfg = ConfigLoader(project_root=tmp_path / "proj").load()

    assert cfg.init_message == "Hello"
    assert cfg.history.default_limit == 5


def test_project_config_overrides_global(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    _write_global_config(tmp_path, {"history": {"defaultLimit": 5}, "copy": {"preserveMetadata": False}})
    project = tmp_path / "proj"
    project.mkdir()
    (project / ".gvt.json").write_text(json.dumps({"history": {"defaultLimit": 2}}), encoding="utf-8")

    cfg = ConfigLoader(project_root=project).load()

    assert cfg.history.default_limit == 2
    assert cfg.copy.preserve_metadata is False


def test_malformed_values_fall_back(tmp_path):
    cfg = GvtConfig.from_dict(
        {
            "controlDir": "../outside",
            "initMessage": "   ",
            "history": {"defaultLimit": -3},
            "copy": "yes",
        }
    )

    assert cfg.control_dir == DEFAULT_CONTROL_DIR
    assert cfg.init_message == "GVT initialized."
    assert cfg.history.default_limit is None
    assert cfg.copy.preserve_metadata is True


def test_invalid_json_is_ignored(tmp_path):
    project = tmp_path / "proj"
    project.mkdir()
    (project / ".gvt.json").write_text("{not json", encoding="utf-8")

    assert ConfigLoader(project_root=project).load() == GvtConfig()
