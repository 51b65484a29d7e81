r"""Contains the HTTP POST request with automatic retry logic."""

from __future__ import annotations

__all__ = ["post"]

from typing import TYPE_CHECKING, Any

from retrywire.request import default_client

if TYPE_CHECKING:
    from retrywire.response import Response


async def post(url: str, body: Any = None, **kwargs: Any) -> Response:
    r"""Send an HTTP POST request with automatic retry logic.

    Args:
        url: The URL to send the POST request to.
        body: The request body, sent as JSON unless it is a string or
            another content type is set.
        **kwargs: The options accepted by ``HttpClient.request``.

    Returns:
        The first response with a status below 400.

    Example:
        ```pycon
        >>> import asyncio
        >>> from retrywire import post
        >>> asyncio.run(post("https://api.example.com/items", {"name": "item"}))  # doctest: +SKIP

        ```
    """
    return await default_client().post(url, body, **kwargs)
