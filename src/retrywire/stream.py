r"""Contains the streaming request path.

A streaming request performs exactly one attempt and forwards the body
to a callback as it arrives. It never retries: part of the body may
already have been delivered when a failure happens.
"""

from __future__ import annotations

__all__ = ["ChunkCallback", "stream_request"]

import inspect
import logging
import time
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Union

import httpx

from retrywire.core.http_logic import build_request
from retrywire.exceptions import NetworkError
from retrywire.response import Response
from retrywire.utils.exceptions import (
    extract_error_code,
    http_error_from_response,
    to_transport_error,
)
from retrywire.utils.structured_logging import log_structured

if TYPE_CHECKING:
    from retrywire.core.config import ResolvedConfig
    from retrywire.core.request_spec import RequestSpec

ChunkCallback = Callable[[str], Union[Awaitable[None], None]]

logger: logging.Logger = logging.getLogger(__name__)


async def stream_request(
    spec: RequestSpec,
    config: ResolvedConfig,
    on_chunk: ChunkCallback,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    log: logging.Logger = logger,
) -> None:
    r"""Send a request and forward its body to a callback as it arrives.

    The request timeout bounds the connect and response phase. Once the
    body started streaming, any transport failure surfaces as a
    ``NetworkError``, without retry.

    Args:
        spec: The request description. Its retry and backoff overrides
            are ignored.
        config: The resolved configuration.
        on_chunk: Called with every chunk of the body, decoded as text, in
            arrival order. It may be a coroutine function.
        transport: Optional httpx transport, mostly useful for testing.
        log: The logger receiving the request messages.

    Raises:
        HttpError: If the server answered with a status >= 400. No chunk
            is delivered in that case.
        RequestTimeoutError: If the request timeout fired before the
            response started.
        NetworkError: If the transport failed or the body could not be
            decoded.

    Example:
        ```pycon
        >>> import asyncio
        >>> from retrywire import request_stream
        >>> async def main():
        ...     chunks = []
        ...     await request_stream("GET", "https://api.example.com/events", chunks.append)
        ...     return "".join(chunks)
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """
    threshold = config.logging.level
    log_structured(
        log,
        "debug",
        "Starting HTTP stream",
        threshold=threshold,
        method=spec.method,
        url=spec.url,
    )
    start_time = time.time()
    async with httpx.AsyncClient(
        transport=transport, timeout=httpx.Timeout(config.request_timeout / 1000)
    ) as client:
        request = build_request(client, spec, config)
        try:
            http_response = await client.send(request, stream=True)
        except httpx.TransportError as exc:
            elapsed_time = (time.time() - start_time) * 1000
            raise to_transport_error(
                exc, timeout=config.request_timeout, elapsed_time=elapsed_time
            ) from exc

        chunk_count = 0
        try:
            if http_response.status_code >= 400:
                await http_response.aread()
                raise http_error_from_response(
                    spec.method, str(request.url), Response.from_httpx(http_response)
                )
            async for chunk in http_response.aiter_text():
                result = on_chunk(chunk)
                if inspect.isawaitable(result):
                    await result
                chunk_count += 1
        except (httpx.TransportError, httpx.DecodingError) as exc:
            code = extract_error_code(exc)
            msg = f"Network error while streaming: {exc}"
            raise NetworkError(msg, code=code, original_error=exc) from exc
        finally:
            await http_response.aclose()

    log_structured(
        log,
        "debug",
        "HTTP stream completed",
        threshold=threshold,
        method=spec.method,
        url=spec.url,
        status=http_response.status_code,
        chunks=chunk_count,
        elapsed_time=(time.time() - start_time) * 1000,
    )
