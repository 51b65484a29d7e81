r"""Structured logging utilities for machine-readable log output.

The request logic logs through the standard ``logging`` module and
attaches its metadata (method, url, attempt, delay, ...) as ``extra``
fields. ``StructuredFormatter`` renders these records as JSON objects,
including the correlation ID of the current context when one is set.

Example:
    Enable structured logging for retrywire:

    ```python
    import logging
    from retrywire.utils.structured_logging import StructuredFormatter

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())

    logger = logging.getLogger("retrywire")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    ```

    Use correlation IDs to track the attempts of one call:

    ```python
    from retrywire import get
    from retrywire.utils.structured_logging import clear_correlation_id, set_correlation_id

    set_correlation_id("request-123")
    try:
        response = await get("https://api.example.com/data")
    finally:
        clear_correlation_id()
    ```
"""

from __future__ import annotations

__all__ = [
    "LOG_LEVELS",
    "StructuredFormatter",
    "clear_correlation_id",
    "get_correlation_id",
    "is_enabled_for",
    "log_structured",
    "set_correlation_id",
]

import contextvars
import json
import logging
import time
from typing import Any

# Levels of the logging policy, mapped to the standard logging levels
LOG_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

# Context variable for correlation ID (thread-safe and async-safe)
_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)

# Attributes of every LogRecord, anything else comes from ``extra``
_RECORD_ATTRIBUTES = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "msecs",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "sinfo",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "message",
        "taskName",
    }
)


def get_correlation_id() -> str | None:
    """Get the current correlation ID.

    Returns:
        The current correlation ID, or None if not set.
    """
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current context.

    Args:
        correlation_id: The correlation ID to set (e.g., request ID, trace ID).

    Example:
        ```pycon
        >>> from retrywire.utils.structured_logging import (
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


def is_enabled_for(level: str, threshold: str) -> bool:
    """Indicate if a message level passes the policy threshold.

    Args:
        level: The level of the message (``"debug"``, ``"info"``,
            ``"warn"`` or ``"error"``).
        threshold: The minimum level of the logging policy.

    Returns:
        ``True`` if the message should be emitted.

    Example:
        ```pycon
        >>> from retrywire.utils.structured_logging import is_enabled_for
        >>> is_enabled_for("warn", "info")
        True
        >>> is_enabled_for("debug", "info")
        False

        ```
    """
    return LOG_LEVELS[level] >= LOG_LEVELS[threshold]


_LEVEL_NAMES = {number: name for name, number in LOG_LEVELS.items()}


def _level_name(levelno: int) -> str:
    if levelno in _LEVEL_NAMES:
        return _LEVEL_NAMES[levelno]
    return logging.getLevelName(levelno).lower()


class StructuredFormatter(logging.Formatter):
    """Render every log record as one JSON object per line.

    The object always carries ``timestamp`` (UTC, millisecond ISO 8601),
    ``level`` (``"debug"``, ``"info"``, ``"warn"`` or ``"error"``, the
    names used by ``LoggingConfig.level``), ``logger``, ``message`` and
    the code location (``module``, ``function``, ``line``). The
    request metadata passed as ``extra`` (method, url, attempt, delay,
    ...) is copied as top-level keys, values that are not JSON types are
    rendered with ``str``. ``correlation_id`` is present only while a
    correlation ID is set in the current context.

    Example:
        ```pycon
        >>> import json
        >>> import logging
        >>> from io import StringIO
        >>> from retrywire.utils.structured_logging import StructuredFormatter
        >>> stream = StringIO()
        >>> handler = logging.StreamHandler(stream)
        >>> handler.setFormatter(StructuredFormatter())
        >>> logger = logging.getLogger("doctest_formatter")
        >>> logger.addHandler(handler)
        >>> logger.setLevel(logging.INFO)
        >>> logger.warning("HTTP request failed, retrying", extra={"attempt": 1})
        >>> record = json.loads(stream.getvalue())
        >>> record["level"], record["attempt"]
        ('warn', 1)

        ```
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": _level_name(record.levelno),
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        correlation_id = get_correlation_id()
        if correlation_id is not None:
            log_data["correlation_id"] = correlation_id
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        log_data.update(
            (key, value) for key, value in vars(record).items() if key not in _RECORD_ATTRIBUTES
        )
        return json.dumps(log_data, default=str)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        """Return the UTC creation time of a record, e.g.
        ``2024-05-01T12:00:00.123Z``.

        ``datefmt`` is ignored so every line shares one timestamp format.
        """
        created = time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
        return f"{created}.{int(record.msecs):03d}Z"


def log_structured(
    logger: logging.Logger,
    level: str,
    message: str,
    *,
    threshold: str = "debug",
    **extra: Any,
) -> None:
    """Log a message with structured data if the policy allows it.

    Args:
        logger: Logger to use.
        level: Level of the message (``"debug"``, ``"info"``, ``"warn"``
            or ``"error"``).
        message: Log message.
        threshold: Minimum level of the logging policy. Messages below it
            are dropped.
        **extra: Additional structured fields to include in the log.

    Example:
        ```pycon
        >>> import logging
        >>> from io import StringIO
        >>> from retrywire.utils.structured_logging import StructuredFormatter, log_structured
        >>> stream = StringIO()
        >>> handler = logging.StreamHandler(stream)
        >>> handler.setFormatter(StructuredFormatter())
        >>> logger = logging.getLogger("doctest_structured")
        >>> logger.addHandler(handler)
        >>> logger.setLevel(logging.DEBUG)
        >>> log_structured(logger, "info", "Request completed", status=200)
        >>> '"status": 200' in stream.getvalue()
        True
        >>> log_structured(logger, "debug", "Dropped", threshold="info")
        >>> "Dropped" in stream.getvalue()
        False

        ```
    """
    if is_enabled_for(level, threshold):
        logger.log(LOG_LEVELS[level], message, extra=extra)
