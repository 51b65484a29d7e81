r"""Contains the HTTP GET request with automatic retry logic."""

from __future__ import annotations

__all__ = ["get"]

from typing import TYPE_CHECKING, Any

from retrywire.request import default_client

if TYPE_CHECKING:
    from retrywire.response import Response


async def get(url: str, **kwargs: Any) -> Response:
    r"""Send an HTTP GET request with automatic retry logic.

    Args:
        url: The URL to send the GET request to.
        **kwargs: The options accepted by ``HttpClient.request`` (headers,
            params, timeout, max_retries, global_timeout, backoff,
            logging).

    Returns:
        The first response with a status below 400.

    Example:
        ```pycon
        >>> import asyncio
        >>> from retrywire import get
        >>> asyncio.run(get("https://api.example.com/data", params={"page": 1}))  # doctest: +SKIP

        ```
    """
    return await default_client().get(url, **kwargs)
