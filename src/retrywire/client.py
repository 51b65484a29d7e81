r"""Client for resilient HTTP requests bound to fixed defaults.

An ``HttpClient`` captures a construction-time configuration that sits
below the process-wide configuration and the per-call overrides. It
holds no connection: every attempt opens and closes its own.
"""

from __future__ import annotations

__all__ = ["HttpClient", "create_client"]

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from retrywire.core.config import ClientConfig
from retrywire.core.global_config import default_store
from retrywire.core.request_spec import RequestSpec
from retrywire.core.validation import validate_method
from retrywire.retry import AsyncRetryExecutor
from retrywire.stream import stream_request

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    import httpx

    from retrywire.core.config import BackoffConfig, LoggingConfig, ResolvedConfig
    from retrywire.core.request_spec import ParamValue
    from retrywire.response import Response
    from retrywire.stream import ChunkCallback

logger: logging.Logger = logging.getLogger(__name__)


def _normalize(spec: RequestSpec) -> RequestSpec:
    method = validate_method(spec.method)
    return spec if method == spec.method else replace(spec, method=method)


class HttpClient:
    r"""Client sending HTTP requests with automatic retry logic.

    Args:
        config: The construction-time configuration. If ``None``, only
            the process-wide configuration and the defaults apply.
        config_provider: Callable returning the current process-wide
            configuration layer. Defaults to the layer of the process-wide
            store set with ``set_global_config``.
        transport: Optional httpx transport used by every attempt, mostly
            useful for testing.
        log: Optional logger receiving the request messages.

    Example:
        ```pycon
        >>> import asyncio
        >>> from retrywire import BackoffConfig, ClientConfig, HttpClient
        >>> client = HttpClient(
        ...     ClientConfig(max_retries=5, backoff=BackoffConfig(initial_delay=200))
        ... )
        >>> async def main():
        ...     response = await client.get("https://api.example.com/data", params={"page": 1})
        ...     return response.json()
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        config_provider: Callable[[], ClientConfig] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self._config = config if config is not None else ClientConfig()
        self._config_provider = (
            config_provider if config_provider is not None else default_store.layer
        )
        self._transport = transport
        self._logger = log if log is not None else logger
        self._executor = AsyncRetryExecutor(
            self._config,
            self._config_provider,
            transport=transport,
            log=self._logger,
        )

    @property
    def config(self) -> ClientConfig:
        r"""The construction-time configuration."""
        return self._config

    def resolve(self, spec: RequestSpec) -> ResolvedConfig:
        r"""Resolve the configuration a request would use right now.

        Args:
            spec: The request description.

        Returns:
            The resolved configuration.
        """
        return self._executor.resolve(spec)

    async def execute(self, spec: RequestSpec) -> Response:
        r"""Send a request described by a ``RequestSpec``.

        Args:
            spec: The request description.

        Returns:
            The first response with a status below 400.

        Raises:
            HttpError: If the server answered with a non-retryable status.
            NetworkError: If the transport failed with a non-retryable code.
            RequestTimeoutError: If the global timeout was exceeded.
            RetryExhaustedError: If the retry budget was exhausted.
            ValueError: If the method is not supported.
        """
        return await self._executor.execute(_normalize(spec))

    async def stream(self, spec: RequestSpec, on_chunk: ChunkCallback) -> None:
        r"""Send a request described by a ``RequestSpec`` and stream its body.

        Args:
            spec: The request description.
            on_chunk: Called with every chunk of the body, decoded as text.

        Raises:
            HttpError: If the server answered with a status >= 400.
            NetworkError: If the transport failed.
            RequestTimeoutError: If the request timeout fired before the
                response started.
            ValueError: If the method is not supported.
        """
        spec = _normalize(spec)
        await stream_request(
            spec,
            self.resolve(spec),
            on_chunk,
            transport=self._transport,
            log=self._logger,
        )

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, ParamValue] | None = None,
        body: Any = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        global_timeout: float | None = None,
        backoff: BackoffConfig | None = None,
        logging: LoggingConfig | None = None,
    ) -> Response:
        r"""Send an HTTP request with automatic retry logic.

        Args:
            method: The HTTP method (``"GET"``, ``"POST"`` or ``"PUT"``).
            url: The URL to send the request to.
            headers: The request headers.
            params: The query parameters.
            body: The request body. Non-string bodies are sent as JSON
                unless another content type is set.
            timeout: Override of the per-attempt budget, in milliseconds.
            max_retries: Override of the retry budget.
            global_timeout: Override of the whole-call budget, in
                milliseconds.
            backoff: Partial override of the backoff parameters.
            logging: Partial override of the logging policy.

        Returns:
            The first response with a status below 400.

        Raises:
            HttpError: If the server answered with a non-retryable status.
            NetworkError: If the transport failed with a non-retryable code.
            RequestTimeoutError: If the global timeout was exceeded.
            RetryExhaustedError: If the retry budget was exhausted.
            ValueError: If the method is not supported.
        """
        spec = RequestSpec(
            method=validate_method(method),
            url=url,
            headers=headers or {},
            params=params or {},
            body=body,
            timeout=timeout,
            max_retries=max_retries,
            global_timeout=global_timeout,
            backoff=backoff,
            logging=logging,
        )
        return await self.execute(spec)

    async def get(self, url: str, **kwargs: Any) -> Response:
        r"""Send a GET request with automatic retry logic.

        Args:
            url: The URL to send the request to.
            **kwargs: The options accepted by ``request``.

        Returns:
            The first response with a status below 400.
        """
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, body: Any = None, **kwargs: Any) -> Response:
        r"""Send a POST request with automatic retry logic.

        Args:
            url: The URL to send the request to.
            body: The request body.
            **kwargs: The options accepted by ``request``.

        Returns:
            The first response with a status below 400.
        """
        return await self.request("POST", url, body=body, **kwargs)

    async def put(self, url: str, body: Any = None, **kwargs: Any) -> Response:
        r"""Send a PUT request with automatic retry logic.

        Args:
            url: The URL to send the request to.
            body: The request body.
            **kwargs: The options accepted by ``request``.

        Returns:
            The first response with a status below 400.
        """
        return await self.request("PUT", url, body=body, **kwargs)

    async def request_stream(
        self,
        method: str,
        url: str,
        on_chunk: ChunkCallback,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, ParamValue] | None = None,
        body: Any = None,
        timeout: float | None = None,
        logging: LoggingConfig | None = None,
    ) -> None:
        r"""Send an HTTP request and stream its body, without retry.

        Args:
            method: The HTTP method (``"GET"``, ``"POST"`` or ``"PUT"``).
            url: The URL to send the request to.
            on_chunk: Called with every chunk of the body, decoded as text,
                in arrival order.
            headers: The request headers.
            params: The query parameters.
            body: The request body.
            timeout: Override of the budget of the connect and response
                phase, in milliseconds.
            logging: Partial override of the logging policy.
        """
        spec = RequestSpec(
            method=validate_method(method),
            url=url,
            headers=headers or {},
            params=params or {},
            body=body,
            timeout=timeout,
            logging=logging,
        )
        await self.stream(spec, on_chunk)


def create_client(config: ClientConfig | None = None, **kwargs: Any) -> HttpClient:
    r"""Create a client bound to fixed construction-time defaults.

    Args:
        config: The construction-time configuration.
        **kwargs: Additional keyword arguments passed to ``HttpClient``.

    Returns:
        The client.

    Example:
        ```pycon
        >>> from retrywire import ClientConfig, create_client
        >>> client = create_client(ClientConfig(max_retries=1, headers={"x-api-key": "secret"}))
        >>> client.config.max_retries
        1

        ```
    """
    return HttpClient(config, **kwargs)
