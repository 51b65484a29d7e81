r"""Contains the module-level HTTP request functions with automatic
retry logic.

These functions share one default ``HttpClient`` without
construction-time configuration, so they follow the process-wide
configuration set with ``set_global_config``.
"""

from __future__ import annotations

__all__ = ["default_client", "request", "request_stream"]

from typing import TYPE_CHECKING, Any

from retrywire.client import HttpClient

if TYPE_CHECKING:
    from retrywire.response import Response
    from retrywire.stream import ChunkCallback

_DEFAULT_CLIENT = HttpClient()


def default_client() -> HttpClient:
    r"""Return the client used by the module-level functions.

    Returns:
        The default client.
    """
    return _DEFAULT_CLIENT


async def request(method: str, url: str, **kwargs: Any) -> Response:
    r"""Send an HTTP request with automatic retry logic.

    Transient failures (timeouts, transient network errors, and status
    500) are retried with exponential backoff. Other error statuses are
    raised immediately.

    Args:
        method: The HTTP method (``"GET"``, ``"POST"`` or ``"PUT"``).
        url: The URL to send the request to.
        **kwargs: The options accepted by ``HttpClient.request`` (headers,
            params, body, timeout, max_retries, global_timeout, backoff,
            logging).

    Returns:
        The first response with a status below 400.

    Raises:
        HttpError: If the server answered with a non-retryable status.
        NetworkError: If the transport failed with a non-retryable code.
        RequestTimeoutError: If the global timeout was exceeded.
        RetryExhaustedError: If the retry budget was exhausted.

    Example:
        ```pycon
        >>> import asyncio
        >>> from retrywire import request
        >>> asyncio.run(
        ...     request("GET", "https://api.example.com/data", max_retries=1)
        ... )  # doctest: +SKIP

        ```
    """
    return await _DEFAULT_CLIENT.request(method, url, **kwargs)


async def request_stream(method: str, url: str, on_chunk: ChunkCallback, **kwargs: Any) -> None:
    r"""Send an HTTP request and stream its body, without retry.

    Args:
        method: The HTTP method (``"GET"``, ``"POST"`` or ``"PUT"``).
        url: The URL to send the request to.
        on_chunk: Called with every chunk of the body, decoded as text, in
            arrival order.
        **kwargs: The options accepted by ``HttpClient.request_stream``.

    Raises:
        HttpError: If the server answered with a status >= 400.
        NetworkError: If the transport failed.
        RequestTimeoutError: If the request timeout fired before the
            response started.
    """
    await _DEFAULT_CLIENT.request_stream(method, url, on_chunk, **kwargs)
