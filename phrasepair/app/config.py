from __future__ import annotations

import argparse
import copy
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from phrasepair.openai_api import OPENAI_BASE_URL


DEFAULTS: dict[str, Any] = {
    "list_devices": False,
    "device": None,
    "debug": False,
    "translator": "openai",
    "tts": "openai",
    "model": "gpt-4o-mini",
    "tts_model": "tts-1",
    "voice_source": None,
    "voice_target": None,
    "speed": 1.0,
    "source_lang": "en",
    "target_lang": "fr",
    "api_base_url": OPENAI_BASE_URL,
    "request_timeout": 60.0,
}
CONFIG_KEYS: tuple[str, ...] = tuple(DEFAULTS.keys())


@dataclass(frozen=True)
class AppPaths:
    config_dir: Path
    config_path: Path


def app_paths() -> AppPaths:
    config_dir = Path(user_config_dir("PhrasePair", "PhrasePair"))
    return AppPaths(config_dir=config_dir, config_path=config_dir / "config.json")


def _load_json_dict(path: Path) -> dict[str, Any]:
    # Accept UTF-8 with or without BOM for Windows-edited config files.
    with path.open("r", encoding="utf-8-sig") as f:
        loaded = json.load(f)
    if not isinstance(loaded, dict):
        raise ValueError(f"config must be a JSON object: {path}")
    return loaded


def _write_json_dict(path: Path, payload: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
        f.write("\n")


def _known_only(payload: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key in CONFIG_KEYS:
        if key in payload:
            out[key] = payload[key]
    return out


def load_default_config() -> dict[str, Any]:
    return copy.deepcopy(DEFAULTS)


def load_user_config(config_path: str | None = None) -> tuple[dict[str, Any], Path]:
    defaults = load_default_config()
    if config_path:
        chosen = Path(config_path)
        if not chosen.exists():
            raise SystemExit(f"Config file not found: {chosen}")
    else:
        chosen = ensure_user_config_exists(defaults)
    merged = dict(defaults)
    merged.update(_known_only(_load_json_dict(chosen)))
    return merged, chosen


def save_user_config(values: dict[str, Any], config_path: str | None = None) -> Path:
    payload = _known_only(values)
    if config_path:
        path = Path(config_path)
        existing = _known_only(_load_json_dict(path)) if path.exists() else {}
    else:
        path = ensure_user_config_exists()
        existing = _known_only(_load_json_dict(path))
    merged = load_default_config()
    merged.update(existing)
    merged.update(payload)
    _write_json_dict(path, _known_only(merged))
    return path


def ensure_user_config_exists(defaults: dict[str, Any] | None = None) -> Path:
    paths = app_paths()
    if paths.config_path.exists():
        return paths.config_path
    _write_json_dict(paths.config_path, defaults or load_default_config())
    return paths.config_path


def resolve_defaults(config_path: str | None = None) -> tuple[dict[str, Any], Path]:
    return load_user_config(config_path=config_path)


def parser_with_defaults(defaults: dict[str, Any]) -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="phrasepair",
        description="Translate text sentence by sentence and play it back in both languages.",
    )
    p.add_argument("text", nargs="*", help="text to process (default: --input file or stdin)")
    p.add_argument("--config", default=None, help="JSON config path (CLI flags override config)")
    p.add_argument("--input", default=None, help="read the text block from this file")
    p.add_argument("--list-devices", action="store_true", help="print audio output devices and exit")
    p.add_argument("--validate-key", action="store_true", help="check the OpenAI API key and exit")
    p.add_argument("--device", type=int, default=defaults["device"], help="sounddevice output device id")
    p.add_argument("--debug", action="store_true", help="log debug events")
    p.add_argument(
        "--translator",
        default=defaults["translator"],
        choices=["openai", "argos", "stub"],
        help="translation backend",
    )
    p.add_argument("--tts", default=defaults["tts"], choices=["openai", "edge"], help="speech backend")
    p.add_argument("--model", default=defaults["model"], help="chat model used for translation")
    p.add_argument("--tts-model", default=defaults["tts_model"], help="OpenAI speech model")
    p.add_argument("--voice-source", default=defaults["voice_source"], help="voice for source sentences")
    p.add_argument("--voice-target", default=defaults["voice_target"], help="voice for translated sentences")
    p.add_argument("--speed", type=float, default=defaults["speed"], help="speech speed multiplier")
    p.add_argument("--source-lang", default=defaults["source_lang"], help="source language code")
    p.add_argument("--target-lang", default=defaults["target_lang"], help="target language code")
    p.add_argument("--api-base-url", default=defaults["api_base_url"], help="OpenAI-compatible API base URL")
    p.add_argument(
        "--request-timeout",
        type=float,
        default=defaults["request_timeout"],
        help="HTTP timeout per request (seconds)",
    )
    return p


def resolve_args(argv: list[str] | None = None) -> argparse.Namespace:
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--config", default=None)
    pre_args, _ = pre.parse_known_args(argv)
    defaults, _ = resolve_defaults(config_path=pre_args.config)
    parser = parser_with_defaults(defaults)
    args = parser.parse_args(argv)
    if defaults.get("list_devices"):
        args.list_devices = True
    if defaults.get("debug"):
        args.debug = True
    return args
