r"""Shared HTTP request building logic.

This module contains the logic shared by the retrying path and the
streaming path to turn a ``RequestSpec`` and a resolved configuration
into an ``httpx.Request``.
"""

from __future__ import annotations

__all__ = [
    "build_request",
    "build_url",
    "get_content_type",
    "prepare_headers",
    "serialize_body",
]

import json
from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from collections.abc import Mapping

    from retrywire.core.config import ResolvedConfig
    from retrywire.core.request_spec import ParamValue, RequestSpec

JSON_CONTENT_TYPE = "application/json"


def _format_param(value: ParamValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_url(url: str, params: Mapping[str, ParamValue] | None = None) -> str:
    r"""Build a URL with query parameters.

    Each parameter replaces any existing parameter with the same name.

    Args:
        url: The base URL, possibly with a query string.
        params: The query parameters to set.

    Returns:
        The URL with the parameters applied.

    Example:
        ```pycon
        >>> from retrywire.core.http_logic import build_url
        >>> build_url("https://api.example.com/data", {"page": 2, "raw": True})
        'https://api.example.com/data?page=2&raw=true'

        ```
    """
    result = httpx.URL(url)
    for key, value in (params or {}).items():
        result = result.copy_set_param(key, _format_param(value))
    return str(result)


def get_content_type(headers: Mapping[str, str] | httpx.Headers) -> str:
    r"""Return the content type of a header map.

    Args:
        headers: The headers. The lookup is case-insensitive.

    Returns:
        The content type, or ``"text/plain"`` if none is set.
    """
    return httpx.Headers(headers).get("content-type", "text/plain")


def serialize_body(body: Any, content_type: str) -> str | bytes:
    r"""Serialize a request body according to its content type.

    Args:
        body: The body. ``str`` and ``bytes`` values are sent as-is.
        content_type: The content type of the request.

    Returns:
        The serialized body. ``None`` becomes an empty string.

    Example:
        ```pycon
        >>> from retrywire.core.http_logic import serialize_body
        >>> serialize_body({"key": "value"}, "application/json")
        '{"key": "value"}'
        >>> serialize_body(42, "text/plain")
        '42'

        ```
    """
    if body is None:
        return ""
    if isinstance(body, (str, bytes)):
        return body
    if JSON_CONTENT_TYPE in content_type:
        return json.dumps(body)
    return str(body)


def prepare_headers(spec: RequestSpec, config: ResolvedConfig) -> httpx.Headers:
    r"""Merge the default headers and the request headers.

    The request headers win over the defaults. A JSON content type is
    added for non-GET requests with a body if no content type is set.

    Args:
        spec: The request description.
        config: The resolved configuration.

    Returns:
        The headers to send.
    """
    headers = httpx.Headers(config.headers)
    headers.update(spec.headers)
    if spec.method != "GET" and spec.body is not None and "content-type" not in headers:
        headers["content-type"] = JSON_CONTENT_TYPE
    return headers


def build_request(
    client: httpx.AsyncClient, spec: RequestSpec, config: ResolvedConfig
) -> httpx.Request:
    r"""Build the ``httpx.Request`` of one attempt.

    Args:
        client: The client that will send the request.
        spec: The request description.
        config: The resolved configuration.

    Returns:
        The request ready to be sent.
    """
    headers = prepare_headers(spec, config)
    content = None
    if spec.method != "GET" and spec.body is not None:
        content = serialize_body(spec.body, get_content_type(headers))
    return client.build_request(
        spec.method,
        build_url(spec.url, spec.params),
        headers=headers,
        content=content,
    )
