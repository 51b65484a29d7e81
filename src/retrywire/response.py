r"""Define the response object returned by resilient requests."""

from __future__ import annotations

__all__ = ["Response", "ResponseParseError"]

import json
from dataclasses import dataclass, field
from typing import Any

import httpx


class ResponseParseError(ValueError):
    r"""Raised when a response body cannot be parsed as JSON."""


@dataclass(frozen=True)
class Response:
    r"""Immutable HTTP response with a fully buffered body.

    Args:
        status: The HTTP status code.
        status_text: The reason phrase sent by the server.
        headers: The response headers.
        content: The raw body bytes.
        encoding: The encoding used to decode the body.

    Example:
        ```pycon
        >>> from retrywire import Response
        >>> response = Response(status=200, status_text="OK", content=b'{"key": "value"}')
        >>> response.text()
        '{"key": "value"}'
        >>> response.json()
        {'key': 'value'}

        ```
    """

    status: int
    status_text: str = ""
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    content: bytes = b""
    encoding: str = "utf-8"

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> Response:
        r"""Capture a response whose body was already read.

        Args:
            response: The httpx response.

        Returns:
            The captured response.
        """
        return cls(
            status=response.status_code,
            status_text=response.reason_phrase,
            headers=httpx.Headers(response.headers),
            content=response.content,
            encoding=response.encoding or "utf-8",
        )

    @property
    def body(self) -> str:
        r"""The response body as text."""
        return self.text()

    def text(self) -> str:
        r"""Return the body decoded as text.

        Returns:
            The decoded body.
        """
        return self.content.decode(self.encoding, errors="replace")

    def json(self) -> Any:
        r"""Parse the body as JSON.

        Returns:
            The parsed JSON document.

        Raises:
            ResponseParseError: If the body is not valid JSON.
        """
        try:
            return json.loads(self.text())
        except json.JSONDecodeError as exc:
            msg = f"Failed to parse response as JSON: {exc}"
            raise ResponseParseError(msg) from exc
