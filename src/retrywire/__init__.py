r"""retrywire - Resilient asynchronous HTTP requests.

This package executes HTTP requests, automatically retries transient
failures with exponential backoff, and enforces two independent time
budgets: one per attempt and one for the whole call. Built on top of the
httpx library.

Key Features:
    - Automatic retry of timeouts, transient network errors
      (ECONNREFUSED, ECONNRESET, ...) and 500 responses
    - Exponential backoff with cap and optional jitter
    - Per-attempt and whole-call timeouts
    - Three-level configuration: client defaults, process-wide
      configuration, and per-call overrides
    - Structured errors: HttpError, RequestTimeoutError, NetworkError,
      RetryExhaustedError
    - Retry-free streaming of response bodies

Example:
    ```pycon
    >>> import asyncio
    >>> from retrywire import BackoffConfig, get, set_global_config
    >>> set_global_config(max_retries=5)
    >>> response = asyncio.run(
    ...     get("https://api.example.com/data", backoff=BackoffConfig(jitter=False))
    ... )  # doctest: +SKIP
    >>> from retrywire import reset_global_config
    >>> reset_global_config()

    ```
"""

from __future__ import annotations

__all__ = [
    "BackoffConfig",
    "ClientConfig",
    "ErrorKind",
    "HttpClient",
    "HttpClientError",
    "HttpError",
    "LoggingConfig",
    "NetworkError",
    "RequestSpec",
    "RequestTimeoutError",
    "ResolvedConfig",
    "Response",
    "ResponseParseError",
    "RetryExhaustedError",
    "__version__",
    "create_client",
    "get",
    "get_global_config",
    "is_retryable",
    "post",
    "put",
    "request",
    "request_stream",
    "reset_global_config",
    "set_global_config",
]

from importlib.metadata import PackageNotFoundError, version

from retrywire.client import HttpClient, create_client
from retrywire.core.config import BackoffConfig, ClientConfig, LoggingConfig, ResolvedConfig
from retrywire.core.global_config import (
    get_global_config,
    reset_global_config,
    set_global_config,
)
from retrywire.core.request_spec import RequestSpec
from retrywire.exceptions import (
    ErrorKind,
    HttpClientError,
    HttpError,
    NetworkError,
    RequestTimeoutError,
    RetryExhaustedError,
)
from retrywire.get import get
from retrywire.post import post
from retrywire.put import put
from retrywire.request import request, request_stream
from retrywire.response import Response, ResponseParseError
from retrywire.retry.decider import is_retryable

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
