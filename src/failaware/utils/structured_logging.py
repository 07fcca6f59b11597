r"""Logging setup and structured (JSON) log output.

failaware only emits debug messages through the standard ``logging``
module and never configures logging on import. This module lets an
application opt in explicitly: ``configure_logging`` attaches a handler
to the ``failaware`` logger with a level given by name, optionally with
the JSON ``StructuredFormatter``.

Example:
    Enable structured retry notices:

    ```python
    from failaware import new_default_client
    from failaware.utils.structured_logging import configure_logging, set_correlation_id

    configure_logging("debug", structured=True)
    set_correlation_id("request-123")
    with new_default_client() as client:
        response = client.get("https://api.example.com/data")
    ```
"""

from __future__ import annotations

__all__ = [
    "LOGGER_NAME",
    "StructuredFormatter",
    "clear_correlation_id",
    "configure_logging",
    "get_correlation_id",
    "parse_log_level",
    "set_correlation_id",
]

import contextvars
import json
import logging
import time
from typing import IO, Any

LOGGER_NAME = "failaware"

LOG_LEVELS = {
    "panic": logging.CRITICAL,
    "fatal": logging.CRITICAL,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": logging.DEBUG,
}

# Attributes every LogRecord has; anything else was passed through ``extra``
_RECORD_ATTRIBUTES = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys() | {"message", "asctime"}
)

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)


def get_correlation_id() -> str | None:
    """Get the correlation ID of the current context.

    Returns:
        The current correlation ID, or None if not set.
    """
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current context.

    The ID is stored in a context variable, so concurrent threads and
    tasks each see their own value.

    Args:
        correlation_id: The correlation ID to set (e.g., request ID, trace ID).

    Example:
        ```pycon
        >>> from failaware.utils.structured_logging import (
        ...     clear_correlation_id,
        ...     get_correlation_id,
        ...     set_correlation_id,
        ... )
        >>> set_correlation_id("request-456")
        >>> get_correlation_id()
        'request-456'
        >>> clear_correlation_id()
        >>> get_correlation_id()

        ```
    """
    _correlation_id.set(correlation_id)


def clear_correlation_id() -> None:
    """Clear the correlation ID for the current context."""
    _correlation_id.set(None)


def parse_log_level(name: str | None) -> int:
    """Convert a log level name to a ``logging`` level.

    The accepted names are ``panic``, ``fatal``, ``error``, ``warn``,
    ``warning``, ``info``, ``debug`` and ``trace`` (case-insensitive).
    ``panic`` and ``fatal`` map to ``CRITICAL``, ``trace`` maps to
    ``DEBUG``.

    Args:
        name: The level name. ``None`` or an empty string selects
            ``ERROR``.

    Returns:
        The matching ``logging`` level.

    Raises:
        ValueError: If the name is not a known level.

    Example:
        ```pycon
        >>> import logging
        >>> from failaware.utils.structured_logging import parse_log_level
        >>> parse_log_level("debug") == logging.DEBUG
        True
        >>> parse_log_level(None) == logging.ERROR
        True

        ```
    """
    if not name:
        return logging.ERROR
    try:
        return LOG_LEVELS[name.strip().lower()]
    except KeyError:
        msg = f"log level {name!r} is not known, expected one of {sorted(LOG_LEVELS)}"
        raise ValueError(msg) from None


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Each record is rendered as one JSON object with the fields
    ``timestamp``, ``level``, ``logger``, ``message``, ``module``,
    ``function``, ``line``, ``thread`` and ``process``. The correlation
    ID is added when one is set, the formatted exception when present,
    and every field passed through ``extra`` as well (the retry notices
    attach ``attempt``, ``wait_time``, ``method`` and ``url``).
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as one JSON line.

        Args:
            record: The log record to format.

        Returns:
            The JSON-formatted record.
        """
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "thread": record.threadName,
            "process": record.process,
        }

        correlation_id = get_correlation_id()
        if correlation_id is not None:
            log_data["correlation_id"] = correlation_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRIBUTES:
                log_data[key] = value

        return json.dumps(log_data, default=str)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        """Format the timestamp as ISO 8601 (UTC, millisecond precision).

        Args:
            record: The log record.
            datefmt: Ignored, the format is always ISO 8601.

        Returns:
            The formatted timestamp.
        """
        return (
            time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
            + f".{int(record.msecs):03d}Z"
        )


def configure_logging(
    level: str | int | None = "error",
    *,
    structured: bool = False,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Configure the ``failaware`` logger.

    Calling this function again replaces the handler installed by the
    previous call instead of adding a second one.

    Args:
        level: A level name accepted by ``parse_log_level`` or a
            ``logging`` level number.
        structured: If ``True``, records are formatted as JSON lines
            with ``StructuredFormatter``.
        stream: The stream written by the handler. Defaults to
            ``sys.stderr``.

    Returns:
        The configured ``failaware`` logger.

    Raises:
        ValueError: If ``level`` is an unknown level name.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level if isinstance(level, int) else parse_log_level(level))

    for handler in list(logger.handlers):
        if getattr(handler, "_failaware_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        StructuredFormatter()
        if structured
        else logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    handler._failaware_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger
