r"""Core configuration and request building logic."""

from __future__ import annotations

__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_GLOBAL_TIMEOUT",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_REQUEST_TIMEOUT",
    "BackoffConfig",
    "BackoffPolicy",
    "ClientConfig",
    "GlobalConfigStore",
    "LoggingConfig",
    "LoggingPolicy",
    "RequestSpec",
    "ResolvedConfig",
    "build_request",
    "build_url",
    "resolve_config",
    "validate_method",
]

from retrywire.core.config import (
    DEFAULT_CONFIG,
    DEFAULT_GLOBAL_TIMEOUT,
    DEFAULT_MAX_RETRIES,
    DEFAULT_REQUEST_TIMEOUT,
    BackoffConfig,
    BackoffPolicy,
    ClientConfig,
    LoggingConfig,
    LoggingPolicy,
    ResolvedConfig,
    resolve_config,
)
from retrywire.core.global_config import GlobalConfigStore
from retrywire.core.http_logic import build_request, build_url
from retrywire.core.request_spec import RequestSpec
from retrywire.core.validation import validate_method
