from __future__ import annotations

import json
import logging
from pathlib import Path

from phrasepair.app import config as app_config
from phrasepair.app.logging_setup import JsonLineFormatter, log_event, setup_app_logger


def test_setup_app_logger_writes_json_line(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(app_config, "user_config_dir", lambda appname, appauthor=None: str(tmp_path))
    logger, log_dir, log_path = setup_app_logger("phrasepair.test")

    log_event(logger, logging.INFO, "stage_failed", stage="translate", index=7)
    for h in logger.handlers:
        h.flush()

    assert log_dir.exists()
    assert log_path.exists()
    lines = [ln for ln in log_path.read_text(encoding="utf-8").splitlines() if ln.strip()]
    assert lines
    payload = json.loads(lines[-1])
    assert payload["message"] == "stage_failed"
    assert payload["stage"] == "translate"
    assert payload["index"] == 7
    assert payload["level"] == "INFO"

    for h in logger.handlers:
        h.close()
    logging.getLogger("phrasepair.test").handlers.clear()


def test_setup_app_logger_debug_level(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(app_config, "user_config_dir", lambda appname, appauthor=None: str(tmp_path))
    logger, _, _ = setup_app_logger("phrasepair.test.debug", debug=True)
    assert logger.level == logging.DEBUG
    for h in logger.handlers:
        h.close()
    logger.handlers.clear()


def test_log_event_without_logger_is_noop() -> None:
    log_event(None, logging.INFO, "ignored", value=1)


def test_formatter_emits_only_extra_fields() -> None:
    record = logging.LogRecord("phrasepair.test", logging.WARNING, __file__, 12, "playback_failed", (), None)
    record.index = 3
    record.language = "target"

    payload = json.loads(JsonLineFormatter().format(record))

    assert set(payload) == {"ts", "level", "logger", "message", "index", "language"}
    assert payload["message"] == "playback_failed"
