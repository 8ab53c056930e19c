#!/usr/bin/env python3
"""Tests for extraction settings and logging setup."""

import logging

import pytest
from pydantic import ValidationError

from prompt_extract.logging_utils import setup_logging
from prompt_extract.settings import PositiveMarker, Settings, get_settings


def test_defaults():
    settings = Settings()
    assert settings.metadata_prompt_min_length == 50
    assert settings.fallback_min_length == 200
    assert settings.metadata_prompt_keys == ["positive", "positive_prompt", "Prompt", "Positive prompt"]
    assert list(settings.keyword_scores) == ["workflow", "prompt", "parameters"]
    assert settings.log_level == "INFO"


def test_get_settings_is_shared():
    assert get_settings() is get_settings()


def test_load_from_yaml(tmp_path, monkeypatch):
    monkeypatch.delenv("PROMPT_EXTRACT_LOG_LEVEL", raising=False)
    monkeypatch.delenv("PROMPT_EXTRACT_MAX_BYTES", raising=False)
    config_file = tmp_path / "prompt_extract.yml"
    config_file.write_text(
        "fallback_min_length: 120\n"
        "log_level: debug\n"
        "positive_markers:\n"
        "  - field: title\n"
        "    value: subject\n",
        encoding="utf-8",
    )
    settings = Settings.load_from_yaml(config_file)
    assert settings.fallback_min_length == 120
    assert settings.log_level == "DEBUG"
    assert settings.positive_markers == [PositiveMarker(field="title", value="subject")]


def test_load_from_missing_yaml_uses_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("PROMPT_EXTRACT_LOG_LEVEL", raising=False)
    monkeypatch.delenv("PROMPT_EXTRACT_MAX_BYTES", raising=False)
    assert Settings.load_from_yaml(tmp_path / "absent.yml") == Settings()


def test_load_from_invalid_yaml_uses_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("PROMPT_EXTRACT_LOG_LEVEL", raising=False)
    monkeypatch.delenv("PROMPT_EXTRACT_MAX_BYTES", raising=False)
    config_file = tmp_path / "broken.yml"
    config_file.write_text("fallback_min_length: [unclosed\n", encoding="utf-8")
    assert Settings.load_from_yaml(config_file) == Settings()


def test_env_overrides(tmp_path, monkeypatch):
    config_file = tmp_path / "prompt_extract.yml"
    config_file.write_text("log_level: ERROR\nmax_file_bytes: 1000\n", encoding="utf-8")
    monkeypatch.setenv("PROMPT_EXTRACT_LOG_LEVEL", "warning")
    monkeypatch.setenv("PROMPT_EXTRACT_MAX_BYTES", "2048")
    settings = Settings.load_from_yaml(config_file)
    assert settings.log_level == "WARNING"
    assert settings.max_file_bytes == 2048


@pytest.mark.parametrize("kwargs", [
    {"fallback_min_length": -1},
    {"metadata_prompt_min_length": -5},
    {"max_file_bytes": 0},
    {"log_level": "VERBOSE"},
])
def test_validation_errors(kwargs):
    with pytest.raises(ValidationError):
        Settings(**kwargs)


def test_positive_marker_matching():
    contains = PositiveMarker(field="class_type", value="positive")
    exact = PositiveMarker(field="title", match="equals", value="Positive", case_sensitive=True)
    assert contains.matches("EasyPositiveNode")
    assert not contains.matches("Negative")
    assert exact.matches("Positive")
    assert not exact.matches("positive")
    assert not exact.matches("Positive prompt")


def test_setup_logging_to_file(tmp_path):
    log_file = tmp_path / "logs" / "extract.log"
    logger = setup_logging(log_file, level="DEBUG", logger_name="prompt_extract.test_file")
    logger.info("hello from the test")
    for handler in logger.handlers:
        handler.flush()
    assert "| INFO  | hello from the test" in log_file.read_text(encoding="utf-8")


def test_setup_logging_replaces_handlers():
    logger = setup_logging(logger_name="prompt_extract.test_console")
    logger = setup_logging(level="WARNING", logger_name="prompt_extract.test_console")
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], logging.StreamHandler)
    assert logger.level == logging.WARNING


def test_setup_logging_uses_configured_level(tmp_path, monkeypatch):
    """The log_level setting, including its env override, reaches the logger."""
    monkeypatch.setenv("PROMPT_EXTRACT_LOG_LEVEL", "error")
    settings = Settings.load_from_yaml(tmp_path / "absent.yml")
    logger = setup_logging(settings=settings, logger_name="prompt_extract.test_settings_level")
    assert logger.level == logging.ERROR
    assert logger.handlers[0].level == logging.ERROR


def test_explicit_level_beats_settings():
    logger = setup_logging(level="DEBUG", settings=Settings(log_level="ERROR"),
                           logger_name="prompt_extract.test_explicit_level")
    assert logger.level == logging.DEBUG
