r"""Unit tests for the shared request building logic."""

from __future__ import annotations

import httpx
import pytest

from retrywire.core.config import ClientConfig, resolve_config
from retrywire.core.http_logic import (
    build_request,
    build_url,
    get_content_type,
    prepare_headers,
    serialize_body,
)
from retrywire.core.request_spec import RequestSpec

TEST_URL = "https://api.example.com/data"

###############################
#     Tests for build_url     #
###############################


def test_build_url_without_params() -> None:
    assert build_url(TEST_URL) == TEST_URL


def test_build_url_with_params() -> None:
    """Test that parameters are appended to the query string."""
    assert build_url(TEST_URL, {"page": 2, "q": "term"}) == f"{TEST_URL}?page=2&q=term"


@pytest.mark.parametrize(("value", "expected"), [(True, "true"), (False, "false")])
def test_build_url_bool_params(value: bool, expected: str) -> None:
    """Test that booleans are rendered in lowercase."""
    assert build_url(TEST_URL, {"raw": value}) == f"{TEST_URL}?raw={expected}"


def test_build_url_float_param() -> None:
    assert build_url(TEST_URL, {"ratio": 0.5}) == f"{TEST_URL}?ratio=0.5"


def test_build_url_replaces_existing_param() -> None:
    """Test that a parameter replaces the one already in the URL."""
    assert build_url(f"{TEST_URL}?page=1&sort=asc", {"page": 3}) == f"{TEST_URL}?page=3&sort=asc"


def test_build_url_escapes_values() -> None:
    """Test that parameter values are percent-encoded."""
    assert build_url(TEST_URL, {"q": "a b&c"}) == f"{TEST_URL}?q=a+b%26c"


######################################
#     Tests for get_content_type     #
######################################


def test_get_content_type_default() -> None:
    assert get_content_type({}) == "text/plain"


def test_get_content_type_case_insensitive() -> None:
    """Test that the header lookup ignores the case."""
    assert get_content_type({"Content-Type": "application/xml"}) == "application/xml"


####################################
#     Tests for serialize_body     #
####################################


def test_serialize_body_none() -> None:
    assert serialize_body(None, "application/json") == ""


def test_serialize_body_str_passthrough() -> None:
    """Test that a string body is sent as-is, even for JSON."""
    assert serialize_body('{"raw": 1}', "application/json") == '{"raw": 1}'


def test_serialize_body_bytes_passthrough() -> None:
    assert serialize_body(b"\x00\x01", "application/octet-stream") == b"\x00\x01"


def test_serialize_body_json() -> None:
    """Test that structured bodies are encoded as JSON."""
    assert serialize_body({"items": [1, 2]}, "application/json") == '{"items": [1, 2]}'


def test_serialize_body_json_with_charset() -> None:
    assert serialize_body([1], "application/json; charset=utf-8") == "[1]"


def test_serialize_body_other_content_type() -> None:
    """Test that other content types use the string form of the body."""
    assert serialize_body(42, "text/plain") == "42"


#####################################
#     Tests for prepare_headers     #
#####################################


def test_prepare_headers_request_wins_over_defaults() -> None:
    """Test that request headers override the default headers."""
    config = resolve_config(client=ClientConfig(headers={"Accept": "text/plain", "x-id": "1"}))
    spec = RequestSpec("GET", TEST_URL, headers={"accept": "application/json"})
    headers = prepare_headers(spec, config)
    assert headers["accept"] == "application/json"
    assert headers["x-id"] == "1"


def test_prepare_headers_adds_json_content_type() -> None:
    """Test that a JSON content type is added for requests with a body."""
    headers = prepare_headers(RequestSpec("POST", TEST_URL, body={"a": 1}), resolve_config())
    assert headers["content-type"] == "application/json"


def test_prepare_headers_keeps_explicit_content_type() -> None:
    spec = RequestSpec("PUT", TEST_URL, headers={"Content-Type": "text/csv"}, body="a,b")
    assert prepare_headers(spec, resolve_config())["content-type"] == "text/csv"


def test_prepare_headers_no_content_type_for_get() -> None:
    """Test that GET requests never get an implicit content type."""
    headers = prepare_headers(RequestSpec("GET", TEST_URL, body={"a": 1}), resolve_config())
    assert "content-type" not in headers


def test_prepare_headers_no_content_type_without_body() -> None:
    headers = prepare_headers(RequestSpec("POST", TEST_URL), resolve_config())
    assert "content-type" not in headers


###################################
#     Tests for build_request     #
###################################


@pytest.mark.asyncio
async def test_build_request_post_json() -> None:
    """Test building a POST request with a JSON body."""
    spec = RequestSpec("POST", TEST_URL, params={"v": 1}, body={"key": "value"})
    async with httpx.AsyncClient() as client:
        request = build_request(client, spec, resolve_config())
    assert request.method == "POST"
    assert str(request.url) == f"{TEST_URL}?v=1"
    assert request.headers["content-type"] == "application/json"
    assert request.content == b'{"key": "value"}'


@pytest.mark.asyncio
async def test_build_request_get_ignores_body() -> None:
    """Test that GET requests never carry a body."""
    spec = RequestSpec("GET", TEST_URL, body={"key": "value"})
    async with httpx.AsyncClient() as client:
        request = build_request(client, spec, resolve_config())
    assert request.content == b""


@pytest.mark.asyncio
async def test_build_request_text_body() -> None:
    """Test that a non-JSON content type sends the string form."""
    spec = RequestSpec("PUT", TEST_URL, headers={"content-type": "text/plain"}, body=123)
    async with httpx.AsyncClient() as client:
        request = build_request(client, spec, resolve_config())
    assert request.content == b"123"
