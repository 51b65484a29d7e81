r"""Utility functions for backoff delays, transport error conversion,
and structured logging."""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "calculate_backoff_delay",
    "extract_error_code",
    "log_structured",
    "to_transport_error",
]

from retrywire.utils.backoff import calculate_backoff_delay
from retrywire.utils.exceptions import extract_error_code, to_transport_error
from retrywire.utils.structured_logging import StructuredFormatter, log_structured
