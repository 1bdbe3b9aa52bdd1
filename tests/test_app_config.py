from __future__ import annotations

import json
from pathlib import Path

import pytest

from phrasepair.app import config as app_config


def test_load_default_config_contains_expected_keys() -> None:
    cfg = app_config.load_default_config()
    assert cfg["translator"] in {"openai", "argos", "stub"}
    assert cfg["source_lang"] == "en"
    assert cfg["target_lang"] == "fr"
    assert "speed" in cfg


def test_resolve_defaults_uses_explicit_config(tmp_path: Path) -> None:
    cfg_path = tmp_path / "explicit.json"
    cfg_path.write_text(json.dumps({"target_lang": "de", "tts": "edge"}), encoding="utf-8")
    defaults, used = app_config.resolve_defaults(str(cfg_path))
    assert used == cfg_path
    assert defaults["target_lang"] == "de"
    assert defaults["tts"] == "edge"


def test_missing_explicit_config_exits(tmp_path: Path) -> None:
    with pytest.raises(SystemExit, match="Config file not found"):
        app_config.load_user_config(str(tmp_path / "nope.json"))


def test_ensure_user_config_exists_creates_file(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(app_config, "user_config_dir", lambda appname, appauthor=None: str(tmp_path))
    created = app_config.ensure_user_config_exists({"translator": "stub", "speed": 1.1})
    assert created.exists()
    loaded = json.loads(created.read_text(encoding="utf-8"))
    assert loaded["translator"] == "stub"
    assert loaded["speed"] == 1.1


def test_load_user_config_ignores_unknown_keys(tmp_path: Path) -> None:
    cfg_path = tmp_path / "user.json"
    cfg_path.write_text(
        json.dumps({"speed": 0.9, "translator": "argos", "unexpected": 1}),
        encoding="utf-8",
    )
    loaded, used = app_config.load_user_config(str(cfg_path))
    assert used == cfg_path
    assert loaded["speed"] == 0.9
    assert loaded["translator"] == "argos"
    assert "unexpected" not in loaded


def test_save_user_config_merges_and_filters_keys(tmp_path: Path) -> None:
    cfg_path = tmp_path / "user.json"
    cfg_path.write_text(
        json.dumps({"speed": 1.2, "translator": "stub", "debug": False}),
        encoding="utf-8",
    )
    saved = app_config.save_user_config(
        {"translator": "openai", "voice_target": "shimmer", "junk": "x"},
        config_path=str(cfg_path),
    )
    assert saved == cfg_path
    loaded = json.loads(cfg_path.read_text(encoding="utf-8"))
    assert loaded["speed"] == 1.2
    assert loaded["translator"] == "openai"
    assert loaded["voice_target"] == "shimmer"
    assert "junk" not in loaded


def test_config_json_never_contains_api_key(tmp_path: Path) -> None:
    cfg_path = tmp_path / "user.json"
    app_config.save_user_config({"api_key": "sk-secret", "model": "gpt-4o"}, config_path=str(cfg_path))
    assert "sk-secret" not in cfg_path.read_text(encoding="utf-8")
