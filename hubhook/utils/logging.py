"""Structured JSON logging for hubhook.

Rejections are logged with ``kind`` and ``reason`` extras. The formatter
groups those under a ``rejection`` object and never writes key material:
extras named after secrets, signatures or digests are replaced with
``<redacted>``.
"""

import json
import logging
import os
import traceback
from datetime import UTC, datetime
from typing import IO, Any, ClassVar

ROOT_LOGGER_NAME = "hubhook"

REDACTED = "<redacted>"

# Attributes every LogRecord carries; anything else came in through ``extra``
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""

    REJECTION_FIELDS: ClassVar[tuple[str, ...]] = ("kind", "reason")
    REDACTED_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {"secret", "signature", "digest", "expected", "webhook_secret"}
    )

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as a single JSON line.

        Args:
            record: The log record to format.

        Returns:
            JSON-formatted string.
        """
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.levelno >= logging.WARNING:
            log_entry["location"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info:
            log_entry["exception"] = "".join(traceback.format_exception(*record.exc_info))

        rejection: dict[str, Any] = {}
        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRS or key.startswith("_"):
                continue
            if key in self.REDACTED_FIELDS:
                log_entry[key] = REDACTED
            elif key in self.REJECTION_FIELDS:
                rejection[key] = _plain(value)
            else:
                log_entry[key] = _plain(value)

        if rejection:
            log_entry["rejection"] = rejection

        return json.dumps(log_entry, default=str)


def _plain(value: Any) -> Any:
    """Return ``value`` if it serializes to JSON, else its string form."""
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


def configure_logging(
    name: str = ROOT_LOGGER_NAME,
    *,
    level: str | None = None,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Send hubhook log records to ``stream`` as JSON lines.

    Args:
        name: The root logger name.
        level: Level name. Defaults to ``LOG_LEVEL``, then INFO; unknown
            names fall back to INFO.
        stream: Destination stream. Defaults to stderr.

    Returns:
        Configured logger instance.
    """
    level_name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    log_level = logging.getLevelNamesMapping().get(level_name, logging.INFO)

    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    # Calling twice must not duplicate output
    logger.handlers.clear()

    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(module_name: str) -> logging.Logger:
    """Get a child logger of the hubhook root logger."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{module_name}")
