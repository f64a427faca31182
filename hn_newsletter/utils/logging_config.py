"""Logging setup for the CLI and the library.

Records go to a single stdout handler on the root logger, either as
bracketed text lines or as one JSON object per line. Context for a record
is passed as ``extra={"extra_fields": {...}}`` and is merged into the JSON
output.
"""

import json
import logging
import sys
from typing import Any

from hn_newsletter.utils.config import get_settings

# Third-party loggers that log every request at INFO
_NOISY_LOGGERS = ("httpx", "httpcore", "LiteLLM")

TEXT_FORMAT = "[%(asctime)s] %(levelname)s - %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class JsonFormatter(logging.Formatter):
    """Render a record as a JSON line tagged with the app name and environment."""

    def format(self, record: logging.LogRecord) -> str:
        settings = get_settings()
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "app_name": settings.APP_NAME,
            "environment": settings.ENVIRONMENT,
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        entry.update(getattr(record, "extra_fields", None) or {})
        return json.dumps(entry, default=str)


class StandardFormatter(logging.Formatter):
    """Human-readable ``[time] LEVEL - logger - message`` lines."""

    def __init__(self) -> None:
        super().__init__(fmt=TEXT_FORMAT, datefmt=DATE_FORMAT)


_logging_configured = False


def _is_console_handler(handler: logging.Handler) -> bool:
    return isinstance(handler, logging.StreamHandler) and handler.stream == sys.stdout


def setup_logging(
    use_json: bool = False,
    force_reconfigure: bool = False,
    level: str | None = None,
) -> None:
    """Install the stdout handler.

    Repeated calls are no-ops unless ``force_reconfigure`` is set, in which
    case the previous stdout handler is replaced. Handlers installed by
    others (pytest's caplog among them) are left alone.

    Args:
        use_json: Emit JSON lines instead of text
        force_reconfigure: Replace an existing configuration
        level: Level name overriding LOG_LEVEL
    """
    global _logging_configured

    if _logging_configured and not force_reconfigure:
        return

    level_name = (level or get_settings().LOG_LEVEL).upper()
    log_level = getattr(logging, level_name)

    root = logging.getLogger()
    for handler in [h for h in root.handlers if _is_console_handler(h)]:
        root.removeHandler(handler)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(log_level)
    console.setFormatter(JsonFormatter() if use_json else StandardFormatter())
    root.addHandler(console)
    root.setLevel(log_level)

    quiet_level = logging.DEBUG if log_level <= logging.DEBUG else logging.WARNING
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)

    _logging_configured = True
    logging.getLogger(__name__).debug(
        "Logging configured: level=%s, format=%s",
        level_name,
        "json" if use_json else "text",
    )


def get_logger(name: str) -> logging.Logger:
    """Return a named logger, configuring logging on first use."""
    if not _logging_configured:
        setup_logging()
    return logging.getLogger(name)


def reset_logging() -> None:
    """Drop all root handlers and forget the current configuration."""
    global _logging_configured

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.WARNING)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET)

    _logging_configured = False
