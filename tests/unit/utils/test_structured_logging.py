from __future__ import annotations

import json
import logging
from io import StringIO

import pytest

from retrywire.utils.structured_logging import (
    StructuredFormatter,
    clear_correlation_id,
    get_correlation_id,
    is_enabled_for,
    log_structured,
    set_correlation_id,
)


@pytest.fixture
def json_logger() -> tuple[logging.Logger, StringIO]:
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    logger = logging.getLogger("test_retrywire_structured")
    logger.handlers = [handler]
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    return logger, stream


##############################################
#     Tests for correlation ID management    #
##############################################


def test_get_correlation_id_initially_none() -> None:
    """Test that correlation ID is initially None."""
    clear_correlation_id()  # Ensure clean state
    assert get_correlation_id() is None


def test_set_and_get_correlation_id() -> None:
    """Test setting and getting correlation ID."""
    set_correlation_id("test-123")
    assert get_correlation_id() == "test-123"
    clear_correlation_id()


def test_clear_correlation_id() -> None:
    """Test clearing correlation ID."""
    set_correlation_id("test-456")
    clear_correlation_id()
    assert get_correlation_id() is None


####################################
#     Tests for is_enabled_for     #
####################################


@pytest.mark.parametrize(
    ("level", "threshold", "expected"),
    [
        ("debug", "debug", True),
        ("debug", "info", False),
        ("info", "info", True),
        ("warn", "info", True),
        ("warn", "error", False),
        ("error", "warn", True),
    ],
)
def test_is_enabled_for(level: str, threshold: str, expected: bool) -> None:
    """Test the ordering debug < info < warn < error."""
    assert is_enabled_for(level, threshold) is expected


#########################################
#     Tests for StructuredFormatter     #
#########################################


def test_structured_formatter_fields(json_logger: tuple[logging.Logger, StringIO]) -> None:
    """Test the standard fields of the JSON output."""
    logger, stream = json_logger
    logger.warning("Something happened")
    data = json.loads(stream.getvalue())
    assert data["level"] == "warn"
    assert data["logger"] == "test_retrywire_structured"
    assert data["message"] == "Something happened"
    assert data["timestamp"].endswith("Z")
    assert "correlation_id" not in data


def test_structured_formatter_extra_fields(json_logger: tuple[logging.Logger, StringIO]) -> None:
    """Test that extra fields are included in the JSON output."""
    logger, stream = json_logger
    logger.info("Retrying", extra={"attempt": 2, "delay": 1000, "url": "https://a.example"})
    data = json.loads(stream.getvalue())
    assert data["attempt"] == 2
    assert data["delay"] == 1000
    assert data["url"] == "https://a.example"


def test_structured_formatter_correlation_id(
    json_logger: tuple[logging.Logger, StringIO],
) -> None:
    """Test that the correlation ID of the context is included."""
    logger, stream = json_logger
    set_correlation_id("req-789")
    try:
        logger.info("Correlated")
    finally:
        clear_correlation_id()
    assert json.loads(stream.getvalue())["correlation_id"] == "req-789"


def test_structured_formatter_non_serializable_extra(
    json_logger: tuple[logging.Logger, StringIO],
) -> None:
    """Test that non-JSON values are rendered as strings."""
    logger, stream = json_logger
    logger.info("Error", extra={"error": ValueError("boom")})
    assert json.loads(stream.getvalue())["error"] == "boom"


def test_structured_formatter_exception(json_logger: tuple[logging.Logger, StringIO]) -> None:
    logger, stream = json_logger
    try:
        msg = "boom"
        raise RuntimeError(msg)
    except RuntimeError:
        logger.exception("Failed")
    assert "RuntimeError: boom" in json.loads(stream.getvalue())["exception"]


####################################
#     Tests for log_structured     #
####################################


def test_log_structured_emits_with_level(json_logger: tuple[logging.Logger, StringIO]) -> None:
    """Test that the policy level names map to standard levels."""
    logger, stream = json_logger
    log_structured(logger, "warn", "HTTP request failed, retrying", attempt=1)
    data = json.loads(stream.getvalue())
    assert data["level"] == "warn"
    assert data["attempt"] == 1


def test_log_structured_below_threshold(json_logger: tuple[logging.Logger, StringIO]) -> None:
    """Test that messages below the policy threshold are dropped."""
    logger, stream = json_logger
    log_structured(logger, "info", "Dropped", threshold="warn")
    assert stream.getvalue() == ""


def test_log_structured_at_threshold(json_logger: tuple[logging.Logger, StringIO]) -> None:
    logger, stream = json_logger
    log_structured(logger, "error", "Kept", threshold="error")
    assert json.loads(stream.getvalue())["message"] == "Kept"


def test_structured_formatter_level_names(json_logger: tuple[logging.Logger, StringIO]) -> None:
    """Test that levels use the names of the logging policy."""
    logger, stream = json_logger
    logger.debug("a")
    logger.error("b")
    logger.critical("c")
    levels = [json.loads(line)["level"] for line in stream.getvalue().splitlines()]
    assert levels == ["debug", "error", "critical"]


def test_structured_formatter_timestamp_format(
    json_logger: tuple[logging.Logger, StringIO],
) -> None:
    logger, stream = json_logger
    logger.info("Timed")
    timestamp = json.loads(stream.getvalue())["timestamp"]
    assert len(timestamp) == len("2024-05-01T12:00:00.123Z")
    assert timestamp[10] == "T"
