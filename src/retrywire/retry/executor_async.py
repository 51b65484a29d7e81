r"""Asynchronous retry executor for HTTP requests.

This module provides the ``AsyncRetryExecutor`` class that drives the
attempts of a call until it succeeds, fails with a non-retryable error,
exhausts its retry budget, or runs out of its global time budget.
"""

from __future__ import annotations

__all__ = ["AsyncRetryExecutor"]

import asyncio
import logging
import time
from typing import TYPE_CHECKING

from retrywire.core.config import ClientConfig, resolve_config
from retrywire.core.global_config import default_store
from retrywire.exceptions import RequestTimeoutError, RetryExhaustedError
from retrywire.retry.attempt import execute_attempt
from retrywire.retry.outcome import AttemptRecord, FatalFailure, Success
from retrywire.utils.backoff import calculate_backoff_delay
from retrywire.utils.structured_logging import log_structured

if TYPE_CHECKING:
    from collections.abc import Callable

    import httpx

    from retrywire.core.config import ResolvedConfig
    from retrywire.core.request_spec import RequestSpec
    from retrywire.response import Response

logger: logging.Logger = logging.getLogger(__name__)


class AsyncRetryExecutor:
    """Executes async HTTP requests with automatic retry logic.

    The executor runs the following state machine for every call:

    - ``Attempting``: resolve the configuration, check the global time
      budget, then perform one attempt
    - ``Succeeded``: the attempt returned a response, which is returned
    - ``FatalFailed``: the failure is not retryable, the original error
      is raised unwrapped
    - ``BackingOff``: the failure is retryable and the budget allows
      another attempt, wait the backoff delay then go back to
      ``Attempting``
    - otherwise the retry budget is exhausted and ``RetryExhaustedError``
      is raised

    The configuration is resolved again on every iteration, so a change
    of the process-wide configuration affects the remaining iterations
    of an in-flight call. The global time budget is only checked when
    entering ``Attempting``; an attempt or a backoff sleep in progress is
    never interrupted.

    Args:
        client_config: The configuration captured when the client was
            created.
        config_provider: Callable returning the current process-wide
            configuration layer. Defaults to the layer of the process-wide
            store set with ``set_global_config``.
        transport: Optional httpx transport used by every attempt.
        log: The logger receiving the request messages.
        clock: Source of wall-clock time in seconds.

    Example:
        ```pycon
        >>> import asyncio
        >>> from retrywire.core.request_spec import RequestSpec
        >>> from retrywire.retry import AsyncRetryExecutor
        >>> async def main():
        ...     executor = AsyncRetryExecutor()
        ...     spec = RequestSpec("GET", "https://api.example.com/data", max_retries=2)
        ...     return await executor.execute(spec)
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        client_config: ClientConfig | None = None,
        config_provider: Callable[[], ClientConfig] | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        log: logging.Logger | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.client_config = client_config if client_config is not None else ClientConfig()
        self.config_provider = (
            config_provider if config_provider is not None else default_store.layer
        )
        self.transport = transport
        self.log = log if log is not None else logger
        self.clock = clock

    def resolve(self, spec: RequestSpec) -> ResolvedConfig:
        """Resolve the configuration of one iteration of a call.

        Args:
            spec: The request description.

        Returns:
            The construction-time configuration, overridden by the current
            process-wide configuration, overridden by the request.
        """
        return resolve_config(self.client_config, self.config_provider(), spec.overrides())

    def _elapsed_ms(self, start_time: float) -> float:
        return (self.clock() - start_time) * 1000

    def _exhausted(
        self, config: ResolvedConfig, start_time: float, history: list[AttemptRecord]
    ) -> RetryExhaustedError:
        elapsed_time = self._elapsed_ms(start_time)
        msg = f"Maximum retries ({config.max_retries}) exceeded after {elapsed_time:.0f}ms"
        return RetryExhaustedError(
            msg,
            attempts=len(history),
            elapsed_time=elapsed_time,
            last_error=history[-1].outcome.error if history else None,
        )

    async def execute(self, spec: RequestSpec) -> Response:
        """Execute a request with automatic retry logic.

        Args:
            spec: The request description.

        Returns:
            The first response with a status below 400.

        Raises:
            HttpError: If the server answered with a non-retryable status
                (4xx or 501-511).
            NetworkError: If the transport failed with a non-retryable
                error code.
            RequestTimeoutError: If the global timeout was exceeded when
                starting an attempt.
            RetryExhaustedError: If a retryable failure recurred past the
                retry budget, or if the budget allows no attempt at all.
        """
        start_time = self.clock()
        history: list[AttemptRecord] = []
        attempt = 0

        while True:
            config = self.resolve(spec)

            # The budget may be negative or have shrunk since the last attempt
            max_attempts = 1 + config.max_retries
            if attempt >= max_attempts:
                error = self._exhausted(config, start_time, history)
                raise error from error.last_error

            elapsed_time = self._elapsed_ms(start_time)
            if elapsed_time >= config.global_timeout:
                msg = f"Global timeout exceeded after {elapsed_time:.0f}ms"
                raise RequestTimeoutError(
                    msg,
                    timeout=config.global_timeout,
                    elapsed_time=elapsed_time,
                    scope="global",
                )

            attempt_start = self.clock()
            outcome = await execute_attempt(
                spec, config, attempt, transport=self.transport, log=self.log
            )
            history.append(AttemptRecord(index=attempt, started_at=attempt_start, outcome=outcome))

            if isinstance(outcome, Success):
                return outcome.response
            if isinstance(outcome, FatalFailure):
                raise outcome.error

            if attempt + 1 >= max_attempts:
                raise self._exhausted(config, start_time, history) from outcome.error

            delay = calculate_backoff_delay(attempt, config.backoff)
            if config.logging.log_retries:
                log_structured(
                    self.log,
                    "warn",
                    "HTTP request failed, retrying",
                    threshold=config.logging.level,
                    method=spec.method,
                    url=spec.url,
                    attempt=attempt + 1,
                    max_attempts=max_attempts,
                    delay=delay,
                    error=str(outcome.error),
                )
            await asyncio.sleep(delay / 1000)
            attempt += 1
