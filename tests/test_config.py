"""
Tests for configuration helpers: credential lookup and logging setup.
"""

import logging

import pytest

from team_scheduler.core import config
from team_scheduler.core.logging_config import setup_logging


def test_missing_credentials_raise(monkeypatch, tmp_path):
    monkeypatch.setattr(config, "CREDENTIALS_JSON", None)
    monkeypatch.setattr(config, "CREDENTIALS_FILE", None)
    monkeypatch.setattr(config, "OAUTH_TOKEN_FILE", str(tmp_path / "token.json"))

    with pytest.raises(ValueError, match="credentials not found"):
        config.get_google_credentials()


def test_malformed_credentials_json_raises(monkeypatch):
    monkeypatch.setattr(config, "CREDENTIALS_JSON", "{not json")

    with pytest.raises(ValueError, match="Invalid JSON"):
        config.get_google_credentials()


def test_setup_logging_is_idempotent():
    root = setup_logging("debug")
    setup_logging("DEBUG")

    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert logging.getLogger("gspread").level == logging.WARNING

    setup_logging("not-a-level")
    assert root.level == logging.INFO


def test_setup_logging_with_file(tmp_path):
    log_file = tmp_path / "api.log"
    setup_logging(logging.INFO, log_file=str(log_file))

    logging.getLogger("team_scheduler.test").info("hello file")
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert "hello file" in log_file.read_text(encoding="utf-8")
    setup_logging(logging.INFO)
