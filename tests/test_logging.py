"""Tests for logging configuration."""

import json
import logging
import sys

import pytest

from hn_newsletter.utils.config import reset_settings
from hn_newsletter.utils.logging_config import (
    JsonFormatter,
    StandardFormatter,
    get_logger,
    reset_logging,
    setup_logging,
)


def _stdout_handlers() -> list[logging.Handler]:
    return [
        h for h in logging.getLogger().handlers
        if isinstance(h, logging.StreamHandler) and h.stream == sys.stdout
    ]


def _record(level: int = logging.INFO, msg: str = "Test message", exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name="test.module",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


class TestLoggingSetup:
    """Test logging setup and configuration."""

    def setup_method(self) -> None:
        """Reset state before each test."""
        reset_logging()
        reset_settings()

    def teardown_method(self) -> None:
        """Clean up after each test."""
        reset_logging()
        reset_settings()

    def test_setup_logging_configures_root_logger(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "INFO")

        setup_logging()

        assert logging.getLogger().level == logging.INFO
        assert len(_stdout_handlers()) == 1

    def test_setup_logging_prevents_duplicate_handlers(self) -> None:
        setup_logging()
        setup_logging()
        setup_logging()

        assert len(_stdout_handlers()) == 1

    def test_setup_logging_with_force_reconfigure(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "INFO")
        setup_logging()

        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        reset_settings()
        setup_logging(force_reconfigure=True)

        assert logging.getLogger().level == logging.DEBUG
        assert len(_stdout_handlers()) == 1

    def test_level_argument_overrides_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "WARNING")

        setup_logging(level="debug")

        assert logging.getLogger().level == logging.DEBUG

    def test_http_client_loggers_are_quieted(self) -> None:
        setup_logging()

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING

    def test_http_client_loggers_follow_debug(self) -> None:
        setup_logging(level="DEBUG")

        assert logging.getLogger("httpx").level == logging.DEBUG

    def test_reset_logging_releases_http_client_loggers(self) -> None:
        setup_logging()

        reset_logging()

        assert logging.getLogger("httpx").level == logging.NOTSET


class TestLogLevels:
    """Test that LOG_LEVEL is respected."""

    def setup_method(self) -> None:
        reset_logging()
        reset_settings()

    def teardown_method(self) -> None:
        reset_logging()
        reset_settings()

    def test_info_level_filters_debug_messages(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        monkeypatch.setenv("LOG_LEVEL", "INFO")

        caplog.set_level(logging.DEBUG)
        setup_logging()
        logger = get_logger("test")

        logger.debug("This should not appear")
        logger.info("This should appear")

        messages = [record.message for record in caplog.records]
        assert "This should not appear" not in messages
        assert "This should appear" in messages

    def test_warning_level_filters_info_and_debug(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        monkeypatch.setenv("LOG_LEVEL", "WARNING")

        caplog.set_level(logging.DEBUG)
        setup_logging()
        logger = get_logger("test")

        logger.info("Info message")
        logger.warning("Warning message")

        messages = [record.message for record in caplog.records]
        assert "Info message" not in messages
        assert "Warning message" in messages


class TestLogFormatters:
    """Test different log formatters."""

    def test_standard_formatter(self) -> None:
        formatted = StandardFormatter().format(_record())

        assert "INFO" in formatted
        assert "test.module" in formatted
        assert "Test message" in formatted
        assert formatted.startswith("[")

    def test_json_formatter(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_NAME", "test-app")
        monkeypatch.setenv("ENVIRONMENT", "staging")

        log_data = json.loads(JsonFormatter().format(_record()))

        assert log_data["level"] == "INFO"
        assert log_data["name"] == "test.module"
        assert log_data["message"] == "Test message"
        assert log_data["app_name"] == "test-app"
        assert log_data["environment"] == "staging"
        assert "timestamp" in log_data

    def test_json_formatter_with_extra_fields(self) -> None:
        record = _record()
        record.extra_fields = {"tool": "fetch_article", "turns": 3}

        log_data = json.loads(JsonFormatter().format(record))

        assert log_data["tool"] == "fetch_article"
        assert log_data["turns"] == 3

    def test_json_formatter_with_exception(self) -> None:
        try:
            raise ValueError("Test error")
        except ValueError:
            exc_info = sys.exc_info()

        log_data = json.loads(JsonFormatter().format(_record(logging.ERROR, "Error occurred", exc_info)))

        assert "ValueError: Test error" in log_data["exception"]


class TestGetLogger:
    """Test get_logger function."""

    def setup_method(self) -> None:
        reset_logging()
        reset_settings()

    def teardown_method(self) -> None:
        reset_logging()
        reset_settings()

    def test_get_logger_returns_named_logger(self) -> None:
        logger = get_logger("test.module")

        assert isinstance(logger, logging.Logger)
        assert logger.name == "test.module"
        assert get_logger("test.module") is logger

    def test_get_logger_configures_logging_if_needed(self) -> None:
        get_logger("test.module")

        assert len(_stdout_handlers()) == 1

    def test_single_log_message_not_duplicated(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO)
        setup_logging()
        setup_logging()

        get_logger("test").info("Unique message")

        count = sum(1 for record in caplog.records if record.message == "Unique message")
        assert count == 1
