r"""Shared test helpers for the unit tests.

This module builds ``httpx.MockTransport`` objects that replay a
sequence of responses or transport failures, one per attempt.
"""

from __future__ import annotations

__all__ = [
    "TEST_URL",
    "RecordingTransport",
    "connection_refused",
    "sequence_transport",
    "streaming_body",
]

import errno
from typing import TYPE_CHECKING, Union

import httpx

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Sequence

TEST_URL = "https://api.example.com/data"

ReplayItem = Union[int, httpx.Response, Exception]


class RecordingTransport(httpx.MockTransport):
    """Mock transport replaying one item per request and recording the
    requests it received.

    Args:
        items: The responses to replay. An ``int`` is a status code with
            an empty body, an exception is raised instead of answering.
            The last item is repeated once the sequence is exhausted.
    """

    def __init__(self, items: Sequence[ReplayItem]) -> None:
        super().__init__(self._handle)
        self.items = list(items)
        self.requests: list[httpx.Request] = []

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        item = self.items[min(len(self.requests), len(self.items)) - 1]
        if isinstance(item, Exception):
            raise item
        if isinstance(item, int):
            return httpx.Response(item)
        return item


def sequence_transport(*items: ReplayItem) -> RecordingTransport:
    """Create a transport replaying the given items in order."""
    return RecordingTransport(items)


def connection_refused() -> httpx.ConnectError:
    """Create the exception httpx raises for a refused connection."""
    try:
        try:
            raise ConnectionRefusedError(errno.ECONNREFUSED, "Connection refused")
        except OSError as exc:
            raise httpx.ConnectError("All connection attempts failed") from exc
    except httpx.ConnectError as exc:
        return exc


async def streaming_body(*chunks: bytes, error: Exception | None = None) -> AsyncIterator[bytes]:
    """Yield body chunks, then optionally fail mid-stream."""
    for chunk in chunks:
        yield chunk
    if error is not None:
        raise error
