r"""Execution of a single request attempt.

Every attempt opens a fresh ``httpx.AsyncClient`` that owns its
connection and is closed when the attempt completes, so nothing is
reused across attempts or calls.
"""

from __future__ import annotations

__all__ = ["execute_attempt"]

import logging
import time
from typing import TYPE_CHECKING

import httpx

from retrywire.core.http_logic import build_request
from retrywire.response import Response
from retrywire.retry.decider import classify_failure
from retrywire.retry.outcome import Success
from retrywire.utils.exceptions import http_error_from_response, to_transport_error
from retrywire.utils.structured_logging import log_structured

if TYPE_CHECKING:
    from retrywire.core.config import ResolvedConfig
    from retrywire.core.request_spec import RequestSpec
    from retrywire.retry.outcome import AttemptOutcome

logger: logging.Logger = logging.getLogger(__name__)


def _elapsed_ms(start_time: float) -> float:
    return (time.time() - start_time) * 1000


async def execute_attempt(
    spec: RequestSpec,
    config: ResolvedConfig,
    attempt: int,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    log: logging.Logger = logger,
) -> AttemptOutcome:
    """Perform exactly one network attempt.

    The request timeout of the resolved configuration bounds the attempt
    (connect, send and receive), independently of the global timeout.
    The body of the response is fully buffered.

    Args:
        spec: The request description.
        config: The configuration resolved for this attempt.
        attempt: The 0-indexed attempt number.
        transport: Optional httpx transport, mostly useful for testing.
        log: The logger receiving the attempt messages.

    Returns:
        ``Success`` with the response if the status is below 400,
        otherwise the classified failure (``HttpError``,
        ``RequestTimeoutError`` or ``NetworkError``).
    """
    threshold = config.logging.level
    log_structured(
        log,
        "debug",
        "Starting HTTP attempt",
        threshold=threshold,
        method=spec.method,
        url=spec.url,
        attempt=attempt + 1,
        max_attempts=config.max_retries + 1,
    )
    start_time = time.time()
    async with httpx.AsyncClient(
        transport=transport, timeout=httpx.Timeout(config.request_timeout / 1000)
    ) as client:
        request = build_request(client, spec, config)
        try:
            http_response = await client.send(request)
        except (httpx.TransportError, httpx.DecodingError) as exc:
            error = to_transport_error(
                exc, timeout=config.request_timeout, elapsed_time=_elapsed_ms(start_time)
            )
            return classify_failure(error)

    response = Response.from_httpx(http_response)
    if response.status >= 400:
        return classify_failure(http_error_from_response(spec.method, str(request.url), response))

    log_structured(
        log,
        "debug",
        "HTTP attempt succeeded",
        threshold=threshold,
        method=spec.method,
        url=spec.url,
        status=response.status,
        attempt=attempt + 1,
        elapsed_time=_elapsed_ms(start_time),
    )
    return Success(response)
