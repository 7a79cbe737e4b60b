"""Tests for settings and logging setup."""

import logging

from feedscope.config import FeedscopeSettings
from feedscope.logging_config import get_logger, init_logging


def test_settings_defaults(monkeypatch) -> None:
    for name in ("MAX_DEPTH", "REQUEST_TIMEOUT", "FETCH_RETRIES", "USER_AGENT", "LOG_LEVEL"):
        monkeypatch.delenv(f"FEEDSCOPE_{name}", raising=False)

    settings = FeedscopeSettings(_env_file=None)

    assert settings.max_depth == 4
    assert settings.request_timeout == 30.0
    assert settings.fetch_retries == 2
    assert settings.user_agent == "Feedscope/1.0"
    assert settings.log_level == "INFO"


def test_settings_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("FEEDSCOPE_MAX_DEPTH", "2")
    monkeypatch.setenv("FEEDSCOPE_USER_AGENT", "Custom/2.0")

    settings = FeedscopeSettings(_env_file=None)

    assert settings.max_depth == 2
    assert settings.user_agent == "Custom/2.0"


def test_get_logger_nests_under_package() -> None:
    assert get_logger("feedscope.discoverer").name == "feedscope.discoverer"
    assert get_logger("plugins").name == "feedscope.plugins"


def test_init_logging_is_idempotent() -> None:
    logger = init_logging("debug")
    handlers = list(logger.handlers)

    assert init_logging(logging.WARNING) is logger
    assert logger.handlers == handlers
    assert logger.level == logging.WARNING
