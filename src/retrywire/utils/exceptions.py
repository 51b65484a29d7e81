r"""Conversion of transport failures into request errors.

This module turns the exceptions raised by httpx and the error responses
of the server into the errors of ``retrywire.exceptions``. The OS-level
error code of a network failure is recovered from the exception chain
so callers can tell a refused connection from a DNS failure.
"""

from __future__ import annotations

__all__ = [
    "extract_error_code",
    "http_error_from_response",
    "to_transport_error",
]

import errno
import logging
import re
import socket
from typing import TYPE_CHECKING

import httpx

from retrywire.exceptions import HttpError, NetworkError, RequestTimeoutError

if TYPE_CHECKING:
    from retrywire.response import Response

logger: logging.Logger = logging.getLogger(__name__)

UNKNOWN_ERROR_CODE = "UNKNOWN"

_ERRNO_PATTERN = re.compile(r"\[Errno (-?\d+)\]")

# Resolver failures use their own negative code space
_GAI_ERROR_CODES = {
    socket.EAI_NONAME: "ENOTFOUND",
    socket.EAI_AGAIN: "EAI_AGAIN",
}
if hasattr(socket, "EAI_NODATA"):
    _GAI_ERROR_CODES[socket.EAI_NODATA] = "ENOTFOUND"

# Used when the exception chain carries no errno
_FALLBACK_CODES: tuple[tuple[type[httpx.RequestError], str], ...] = (
    (httpx.ConnectError, "ECONNREFUSED"),
    (httpx.ReadError, "ECONNRESET"),
    (httpx.WriteError, "ECONNRESET"),
    (httpx.RemoteProtocolError, "ECONNRESET"),
    (httpx.TimeoutException, "ETIMEDOUT"),
    # Body not matching its content-encoding, as reported by zlib
    (httpx.DecodingError, "Z_DATA_ERROR"),
)


def _iter_chain(exc: BaseException) -> list[BaseException]:
    seen: list[BaseException] = []
    pending = [exc]
    while pending:
        current = pending.pop(0)
        if any(current is item for item in seen):
            continue
        seen.append(current)
        pending.extend(getattr(current, "exceptions", ()))
        for linked in (current.__cause__, current.__context__):
            if linked is not None:
                pending.append(linked)
    return seen


def _code_from_errno(number: int, gai: bool = False) -> str | None:
    if gai or number < 0:
        return _GAI_ERROR_CODES.get(number)
    return errno.errorcode.get(number)


def extract_error_code(exc: BaseException) -> str:
    r"""Find the OS-level error code of a transport failure.

    The exception chain is searched for an ``OSError`` with an errno;
    then for an errno embedded in a message (e.g. ``"[Errno 111] ..."``);
    then the httpx exception type gives a best-effort code.

    Args:
        exc: The exception raised by the transport.

    Returns:
        The error code name (e.g. ``"ECONNREFUSED"``), or ``"UNKNOWN"``.

    Example:
        ```pycon
        >>> import httpx
        >>> from retrywire.utils.exceptions import extract_error_code
        >>> try:
        ...     try:
        ...         raise ConnectionRefusedError(111, "Connection refused")
        ...     except OSError as exc:
        ...         raise httpx.ConnectError("Connection refused") from exc
        ... except httpx.ConnectError as exc:
        ...     error = exc
        ...
        >>> extract_error_code(error)
        'ECONNREFUSED'

        ```
    """
    chain = _iter_chain(exc)
    for item in chain:
        if isinstance(item, OSError) and isinstance(item.errno, int):
            code = _code_from_errno(item.errno, gai=isinstance(item, socket.gaierror))
            if code is not None:
                return code
    for item in chain:
        match = _ERRNO_PATTERN.search(str(item))
        if match is not None:
            code = _code_from_errno(int(match.group(1)))
            if code is not None:
                return code
    for exc_type, code in _FALLBACK_CODES:
        if isinstance(exc, exc_type):
            return code
    return UNKNOWN_ERROR_CODE


def to_transport_error(
    exc: httpx.RequestError,
    *,
    timeout: float,
    elapsed_time: float,
) -> RequestTimeoutError | NetworkError:
    r"""Convert an httpx request exception of one attempt.

    Transport failures and bodies that cannot be decoded (e.g. a
    corrupt gzip stream) both become a ``NetworkError``.

    Args:
        exc: The exception raised by httpx.
        timeout: The per-attempt budget, in milliseconds.
        elapsed_time: The duration of the attempt, in milliseconds.

    Returns:
        A ``RequestTimeoutError`` if the per-attempt timeout fired,
        otherwise a ``NetworkError`` tagged with the OS-level error code.
    """
    error: RequestTimeoutError | NetworkError
    if isinstance(exc, httpx.TimeoutException):
        error = RequestTimeoutError(
            f"Request timeout after {timeout}ms",
            timeout=timeout,
            elapsed_time=elapsed_time,
            scope="request",
        )
    else:
        code = extract_error_code(exc)
        logger.debug(f"Transport failure {type(exc).__name__} mapped to {code}: {exc}")
        error = NetworkError(f"Network error: {exc}", code=code, original_error=exc)
    error.__cause__ = exc
    return error


def http_error_from_response(method: str, url: str, response: Response) -> HttpError:
    r"""Create the error describing an error response.

    Args:
        method: The HTTP method of the request.
        url: The requested URL.
        response: The error response, with its body fully read.

    Returns:
        The ``HttpError``.
    """
    return HttpError(
        method=method,
        url=url,
        status=response.status,
        status_text=response.status_text,
        headers=response.headers,
        body=response.text(),
    )
