"""Logging configuration utilities for treecache.

Provides centralized logging configuration with:
- Output to stdout or a file
- Plain text or structured JSON records
- Context-aware loggers via LoggerAdapter (e.g. the cache type label)
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

# Standard LogRecord attributes; everything else on a record is context
_STANDARD_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "exc_info",
        "exc_text",
        "stack_info",
        "taskName",
    }
)

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class StructuredJSONFormatter(logging.Formatter):
    """Formatter that outputs one JSON object per record.

    Format:
    {
        "level": "WARNING",
        "message": "...",
        "timestamp": "2026-01-29T12:00:00.000000+00:00",
        "context": {
            "logger_name": "...",
            "module": "...",
            "function": "...",
            "line": 42,
            ...extra fields...
        }
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON.

        Args:
            record: LogRecord to format

        Returns:
            JSON-formatted log string
        """
        context: dict[str, Any] = {
            "logger_name": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            context["error_type"] = record.exc_info[0].__name__ if record.exc_info[0] else None
            context["error_message"] = str(record.exc_info[1]) if record.exc_info[1] else None
            context["stack_trace"] = record.exc_text or self.formatException(record.exc_info)

        # Extra fields from LoggerAdapter or extra kwargs
        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_"):
                context[key] = value

        log_entry = {
            "level": record.levelname,
            "message": record.getMessage(),
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "context": context,
        }

        return json.dumps(log_entry, default=str)


def _supress_noisy_loggers() -> None:
    """Supress noisy loggers."""
    logging.getLogger("asyncio").setLevel(logging.ERROR)
    logging.getLogger("aiofiles").setLevel(logging.ERROR)


def configure_logging(
    level: str = "INFO",
    format_string: str | None = None,
    filename: str | None = None,
    structured: bool = False,
) -> None:
    """Configure application-wide logging.

    Can be called multiple times to reconfigure logging (uses force=True).

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Case-insensitive.
        format_string: Custom format string. Ignored if structured=True.
        filename: Path to log file. If None, logs to stderr.
        structured: If True, use structured JSON logging format.

    Examples:
        >>> configure_logging(level="DEBUG")
        >>> configure_logging(level="INFO", structured=True, filename="cache.jsonl")
    """
    handler: logging.Handler
    if filename:
        handler = logging.FileHandler(filename)
    else:
        # stdout carries command output
        handler = logging.StreamHandler(sys.stderr)

    formatter: logging.Formatter
    if structured:
        formatter = StructuredJSONFormatter()
    else:
        formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

    handler.setFormatter(formatter)

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        handlers=[handler],
        force=True,
    )

    _supress_noisy_loggers()


class PrefixedLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that also prefixes every message with `[label]`.

    The context still travels as record attributes for structured output;
    the prefix makes the label visible in plain text logs.
    """

    def __init__(self, logger: logging.Logger, label: str, extra: dict[str, Any]) -> None:
        super().__init__(logger, extra)
        self.label = label

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        msg, kwargs = super().process(msg, kwargs)
        return f"[{self.label}] {msg}", kwargs


def get_logger(
    name: str, prefix: str | None = None, **kwargs: Any
) -> logging.Logger | logging.LoggerAdapter:
    """Get a logger instance.

    If context kwargs are provided, returns a LoggerAdapter that attaches
    the context to every record.

    Args:
        name: Logger name (usually __name__ from the calling module)
        prefix: Label prepended to every message as `[prefix]`
        **kwargs: Additional context to include in logs (e.g., cache_type)

    Returns:
        Logger instance, or LoggerAdapter if context or prefix provided
    """
    logger = logging.getLogger(name)

    if prefix is not None:
        return PrefixedLoggerAdapter(logger, prefix, kwargs)

    if kwargs:
        return logging.LoggerAdapter(logger, kwargs)

    return logger
