import logging

import pytest

from loadlink.utils.logging import resolve_level, setup_logging


def test_level_from_environment(monkeypatch):
    monkeypatch.setenv("LOGLEVEL", "warning")
    assert resolve_level() == "WARNING"
    assert resolve_level("debug") == "DEBUG"


def test_unknown_level_is_rejected(monkeypatch):
    monkeypatch.delenv("LOGLEVEL", raising=False)
    with pytest.raises(ValueError, match="Unknown log level: LOUD"):
        resolve_level("loud")


def test_http_request_logs_only_at_debug(monkeypatch):
    monkeypatch.delenv("LOGLEVEL", raising=False)

    assert setup_logging() == "INFO"
    assert logging.getLogger("httpx").level == logging.WARNING

    assert setup_logging("DEBUG") == "DEBUG"
    assert logging.getLogger("httpx").level == logging.INFO
