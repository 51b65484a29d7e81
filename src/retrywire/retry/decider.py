r"""Retry decision logic for failed attempts.

This module decides whether a failure is transient. The decision
dispatches on the kind of the error rather than on its class.
"""

from __future__ import annotations

__all__ = [
    "RETRYABLE_NETWORK_CODES",
    "RETRYABLE_STATUS_CODES",
    "classify_failure",
    "is_retryable",
]

import logging
from typing import TYPE_CHECKING

from retrywire.exceptions import ErrorKind
from retrywire.retry.outcome import FatalFailure, RetryableFailure

if TYPE_CHECKING:
    from retrywire.exceptions import HttpClientError, HttpError, NetworkError, RequestTimeoutError

logger: logging.Logger = logging.getLogger(__name__)

# OS-level error codes of transient network failures
RETRYABLE_NETWORK_CODES = frozenset(
    {
        "ECONNREFUSED",
        "ECONNRESET",
        "ETIMEDOUT",
        "ENOTFOUND",
        "EAI_AGAIN",
        "ENETUNREACH",
        "EHOSTUNREACH",
    }
)

# Only 500 Internal Server Error is retried, 4xx and 501-511 are fatal
RETRYABLE_STATUS_CODES = frozenset({500})


def is_retryable(error: HttpClientError) -> bool:
    r"""Indicate if a failure is transient and eligible for a retry.

    Args:
        error: The failure of an attempt.

    Returns:
        ``True`` for a timeout, a network error with a transient code, or
        an HTTP error with status 500; otherwise ``False``.

    Example:
        ```pycon
        >>> from retrywire.exceptions import HttpError, NetworkError
        >>> from retrywire.retry.decider import is_retryable
        >>> is_retryable(HttpError("GET", "https://api.example.com", status=500))
        True
        >>> is_retryable(HttpError("GET", "https://api.example.com", status=503))
        False
        >>> is_retryable(NetworkError("Network error", code="ECONNREFUSED"))
        True

        ```
    """
    if error.kind is ErrorKind.TIMEOUT:
        return True
    if error.kind is ErrorKind.NETWORK:
        return getattr(error, "code", None) in RETRYABLE_NETWORK_CODES
    if error.kind is ErrorKind.HTTP:
        return getattr(error, "status", None) in RETRYABLE_STATUS_CODES
    return False


def classify_failure(
    error: HttpError | RequestTimeoutError | NetworkError,
) -> RetryableFailure | FatalFailure:
    r"""Wrap the failure of an attempt into its outcome.

    Args:
        error: The failure of an attempt.

    Returns:
        ``RetryableFailure`` if the failure is transient, otherwise
        ``FatalFailure``.
    """
    if is_retryable(error):
        return RetryableFailure(error)
    logger.debug(f"Non-retryable failure ({error.kind.value}): {error}")
    return FatalFailure(error)
