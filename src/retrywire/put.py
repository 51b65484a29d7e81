r"""Contains the HTTP PUT request with automatic retry logic."""

from __future__ import annotations

__all__ = ["put"]

from typing import TYPE_CHECKING, Any

from retrywire.request import default_client

if TYPE_CHECKING:
    from retrywire.response import Response


async def put(url: str, body: Any = None, **kwargs: Any) -> Response:
    r"""Send an HTTP PUT request with automatic retry logic.

    Args:
        url: The URL to send the PUT request to.
        body: The request body, sent as JSON unless it is a string or
            another content type is set.
        **kwargs: The options accepted by ``HttpClient.request``.

    Returns:
        The first response with a status below 400.

    Example:
        ```pycon
        >>> import asyncio
        >>> from retrywire import put
        >>> asyncio.run(
        ...     put("https://api.example.com/items/1", {"name": "updated"})
        ... )  # doctest: +SKIP

        ```
    """
    return await default_client().put(url, body, **kwargs)
