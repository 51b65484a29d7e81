r"""Define the exceptions raised by resilient HTTP requests.

Every failure of a request surfaces as one of four error kinds, each
carrying the structured data needed to diagnose it without inspecting
logs:

- ``HttpError``: the server answered with a status >= 400
- ``RequestTimeoutError``: an attempt or the whole call ran out of time
- ``NetworkError``: a transport failure below the HTTP layer
- ``RetryExhaustedError``: a retryable failure recurred past the budget

The kind of an error is available as the ``kind`` attribute so the retry
logic can dispatch on it without ``isinstance`` checks.
"""

from __future__ import annotations

__all__ = [
    "ErrorKind",
    "HttpClientError",
    "HttpError",
    "NetworkError",
    "RequestTimeoutError",
    "RetryExhaustedError",
]

from enum import Enum
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    import httpx


class ErrorKind(str, Enum):
    r"""Tag identifying the kind of a request failure."""

    HTTP = "http"
    TIMEOUT = "timeout"
    NETWORK = "network"
    RETRY_EXHAUSTED = "retry_exhausted"


class HttpClientError(Exception):
    r"""Base class of all the errors raised by a resilient request.

    Args:
        message: The error message.

    Attributes:
        kind: The kind of failure.
    """

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class HttpError(HttpClientError):
    r"""Raised when the server responds with a status code >= 400.

    Args:
        method: The HTTP method of the request.
        url: The requested URL.
        status: The HTTP status code.
        status_text: The reason phrase sent by the server.
        headers: The response headers.
        body: The response body as text.

    Example:
        ```pycon
        >>> from retrywire.exceptions import HttpError
        >>> error = HttpError(
        ...     method="GET",
        ...     url="https://api.example.com/data",
        ...     status=404,
        ...     status_text="Not Found",
        ... )
        >>> error.status
        404
        >>> str(error)
        'HTTP 404: Not Found'

        ```
    """

    kind = ErrorKind.HTTP

    def __init__(
        self,
        method: str,
        url: str,
        status: int,
        status_text: str = "",
        headers: httpx.Headers | dict[str, str] | None = None,
        body: str = "",
    ) -> None:
        super().__init__(f"HTTP {status}: {status_text}")
        self.method = method
        self.url = url
        self.status = status
        self.status_text = status_text
        self.headers = headers if headers is not None else {}
        self.body = body


class RequestTimeoutError(HttpClientError):
    r"""Raised when a time budget is exceeded.

    The ``scope`` attribute tells which budget fired: ``"request"`` when a
    single attempt exceeded the request timeout, ``"global"`` when the
    whole call exceeded the global timeout.

    Args:
        message: The error message.
        timeout: The budget that was exceeded, in milliseconds.
        elapsed_time: The time spent when the timeout was detected, in
            milliseconds.
        scope: Which budget was exceeded.
    """

    kind = ErrorKind.TIMEOUT

    def __init__(
        self,
        message: str,
        timeout: float,
        elapsed_time: float,
        scope: Literal["request", "global"] = "request",
    ) -> None:
        super().__init__(message)
        self.timeout = timeout
        self.elapsed_time = elapsed_time
        self.scope = scope


class NetworkError(HttpClientError):
    r"""Raised when the transport fails below the HTTP layer.

    Args:
        message: The error message.
        code: The OS-level error code (e.g. ``"ECONNREFUSED"``), or
            ``"UNKNOWN"`` if it could not be determined.
        original_error: The exception raised by the transport.
    """

    kind = ErrorKind.NETWORK

    def __init__(self, message: str, code: str, original_error: BaseException | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.original_error = original_error


class RetryExhaustedError(HttpClientError):
    r"""Raised when a retryable failure recurs past the retry budget.

    Args:
        message: The error message.
        attempts: The total number of attempts made.
        elapsed_time: The total time spent on the call, in milliseconds.
        last_error: The failure of the last attempt, or ``None`` if the
            retry budget allowed no attempt.
    """

    kind = ErrorKind.RETRY_EXHAUSTED

    def __init__(
        self,
        message: str,
        attempts: int,
        elapsed_time: float,
        last_error: HttpClientError | None,
    ) -> None:
        super().__init__(message)
        self.attempts = attempts
        self.elapsed_time = elapsed_time
        self.last_error = last_error
