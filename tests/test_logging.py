"""Tests for logging setup and the JSONL file format."""

from __future__ import annotations

import json
import logging

import pytest

from termnews.config import LoggingConfig
from termnews.core.errors import ConfigError
from termnews.utils.logging import level_from_string, log_event, setup_logging


def test_level_names_are_case_insensitive():
    assert level_from_string("debug") == logging.DEBUG
    assert level_from_string(" Warning ") == logging.WARNING


def test_unknown_level_is_a_config_error():
    with pytest.raises(ConfigError, match="Unknown log level"):
        level_from_string("chatty")


def test_jsonl_file_carries_event_fields(tmp_path):
    cfg = LoggingConfig(level="INFO", console=False, file=True, format="jsonl", filename="run.jsonl")
    logger = setup_logging(cfg, log_dir=tmp_path)

    log_event(logger, "Fetch failed", level=logging.WARNING, event="fetch_failed", url="https://a.example/rss")
    for handler in logger.handlers:
        handler.close()

    lines = (tmp_path / "run.jsonl").read_text(encoding="utf-8").splitlines()
    record = json.loads(lines[-1])
    assert record["level"] == "WARNING"
    assert record["message"] == "Fetch failed"
    assert record["event"] == "fetch_failed"
    assert record["url"] == "https://a.example/rss"
    assert "timestamp" in record


def test_setup_replaces_previous_handlers():
    cfg = LoggingConfig(level="INFO", console=True, file=False)

    setup_logging(cfg)
    logger = setup_logging(cfg)

    assert len(logger.handlers) == 1
