r"""Configuration dataclasses and defaults for resilient requests.

Configuration comes in layers that are merged into one resolved
configuration for every iteration of the retry loop. A layer is a
``ClientConfig`` where ``None`` means "not set"; the ``backoff`` and
``logging`` sub-objects merge field-by-field, so a layer can override a
single field (e.g. ``jitter``) without losing the others.

All durations are expressed in milliseconds.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_GLOBAL_TIMEOUT",
    "DEFAULT_INITIAL_DELAY",
    "DEFAULT_JITTER",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_LOG_RETRIES",
    "DEFAULT_MAX_DELAY",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_MULTIPLIER",
    "DEFAULT_REQUEST_TIMEOUT",
    "BackoffConfig",
    "BackoffPolicy",
    "ClientConfig",
    "LogLevel",
    "LoggingConfig",
    "LoggingPolicy",
    "ResolvedConfig",
    "resolve_config",
]

from dataclasses import dataclass, field, fields, replace
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from collections.abc import Mapping

LogLevel = Literal["error", "warn", "info", "debug"]

# Default maximum number of retry attempts
# Total attempts = max_retries + 1 (initial attempt)
DEFAULT_MAX_RETRIES = 3

# Budget of a single attempt (30 seconds)
DEFAULT_REQUEST_TIMEOUT = 30000

# Budget of the whole call including backoff sleeps (2 minutes)
DEFAULT_GLOBAL_TIMEOUT = 120000

# Backoff delay = initial_delay * multiplier ** retry_number, capped at max_delay
# With the defaults: 1s, 2s, 4s, 8s, 16s, 30s, 30s, ...
DEFAULT_INITIAL_DELAY = 1000
DEFAULT_MULTIPLIER = 2
DEFAULT_MAX_DELAY = 30000
DEFAULT_JITTER = True

DEFAULT_LOG_LEVEL: LogLevel = "info"
DEFAULT_LOG_RETRIES = True


def _merge_dataclass(base: Any, other: Any) -> Any:
    if other is None:
        return base
    overrides = {f.name: getattr(other, f.name) for f in fields(other)}
    return replace(base, **{k: v for k, v in overrides.items() if v is not None})


@dataclass(frozen=True)
class BackoffConfig:
    r"""Partial backoff configuration.

    Args:
        initial_delay: Delay before the first retry, in milliseconds.
        multiplier: Growth factor applied for every further retry.
        max_delay: Cap of a single delay, in milliseconds.
        jitter: Whether to randomly scale delays into ``[50%, 100%)``.
    """

    initial_delay: float | None = None
    multiplier: float | None = None
    max_delay: float | None = None
    jitter: bool | None = None

    def merge(self, other: BackoffConfig | None) -> BackoffConfig:
        r"""Return a copy with the set fields of ``other`` applied."""
        return _merge_dataclass(self, other)


@dataclass(frozen=True)
class LoggingConfig:
    r"""Partial logging configuration.

    Args:
        level: Minimum level of the messages emitted by the request logic.
        log_retries: Whether to emit a warning before every retry.
    """

    level: LogLevel | None = None
    log_retries: bool | None = None

    def merge(self, other: LoggingConfig | None) -> LoggingConfig:
        r"""Return a copy with the set fields of ``other`` applied."""
        return _merge_dataclass(self, other)


@dataclass(frozen=True)
class BackoffPolicy:
    r"""Concrete backoff parameters used to compute retry delays."""

    initial_delay: float = DEFAULT_INITIAL_DELAY
    multiplier: float = DEFAULT_MULTIPLIER
    max_delay: float = DEFAULT_MAX_DELAY
    jitter: bool = DEFAULT_JITTER


@dataclass(frozen=True)
class LoggingPolicy:
    r"""Concrete logging policy of a call."""

    level: LogLevel = DEFAULT_LOG_LEVEL
    log_retries: bool = DEFAULT_LOG_RETRIES


@dataclass(frozen=True)
class ClientConfig:
    r"""One layer of configuration for resilient requests.

    The same type describes the configuration captured when a client is
    created, the process-wide configuration, and the overrides of a single
    call. Fields left to ``None`` are not set by the layer.

    Args:
        max_retries: Maximum number of retries after the initial attempt.
        request_timeout: Budget of a single attempt, in milliseconds.
        global_timeout: Budget of the whole call including backoff sleeps,
            in milliseconds.
        backoff: Partial backoff configuration.
        logging: Partial logging configuration.
        headers: Default headers sent with every request.

    Example:
        ```pycon
        >>> from retrywire.core.config import BackoffConfig, ClientConfig
        >>> config = ClientConfig(max_retries=5, backoff=BackoffConfig(initial_delay=200))
        >>> merged = config.merge(ClientConfig(backoff=BackoffConfig(jitter=False)))
        >>> merged.max_retries
        5
        >>> merged.backoff
        BackoffConfig(initial_delay=200, multiplier=None, max_delay=None, jitter=False)

        ```
    """

    max_retries: int | None = None
    request_timeout: float | None = None
    global_timeout: float | None = None
    backoff: BackoffConfig | None = None
    logging: LoggingConfig | None = None
    headers: Mapping[str, str] | None = None

    def merge(self, other: ClientConfig | None) -> ClientConfig:
        r"""Create a new layer with the set fields of ``other`` applied.

        ``backoff``, ``logging`` and ``headers`` are merged
        field-by-field instead of being replaced.

        Args:
            other: The layer with higher precedence.

        Returns:
            A new ``ClientConfig``. Neither input is modified.
        """
        if other is None:
            return self
        merged = _merge_dataclass(self, replace(other, backoff=None, logging=None, headers=None))
        return replace(
            merged,
            backoff=_merge_optional(self.backoff, other.backoff),
            logging=_merge_optional(self.logging, other.logging),
            headers=_merge_headers(self.headers, other.headers),
        )


def _merge_optional(base: Any, other: Any) -> Any:
    if base is None:
        return other
    return base.merge(other)


def _merge_headers(
    base: Mapping[str, str] | None, other: Mapping[str, str] | None
) -> dict[str, str] | None:
    if base is None and other is None:
        return None
    return {**(base or {}), **(other or {})}


@dataclass(frozen=True)
class ResolvedConfig:
    r"""Concrete configuration used for one iteration of the retry loop.

    Args:
        max_retries: Maximum number of retries after the initial attempt.
        request_timeout: Budget of a single attempt, in milliseconds.
        global_timeout: Budget of the whole call, in milliseconds.
        backoff: The backoff parameters.
        logging: The logging policy.
        headers: Default headers sent with the request.
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    global_timeout: float = DEFAULT_GLOBAL_TIMEOUT
    backoff: BackoffPolicy = field(default_factory=BackoffPolicy)
    logging: LoggingPolicy = field(default_factory=LoggingPolicy)
    headers: Mapping[str, str] = field(default_factory=dict)

    def apply(self, layer: ClientConfig | None) -> ResolvedConfig:
        r"""Return a copy with the set fields of ``layer`` applied.

        Args:
            layer: The layer to apply on top of this configuration.

        Returns:
            A new resolved configuration.
        """
        if layer is None:
            return self
        return replace(
            _merge_dataclass(self, replace(layer, backoff=None, logging=None, headers=None)),
            backoff=_merge_dataclass(self.backoff, layer.backoff),
            logging=_merge_dataclass(self.logging, layer.logging),
            headers={**self.headers, **(layer.headers or {})},
        )


DEFAULT_CONFIG = ResolvedConfig()


def resolve_config(
    client: ClientConfig | None = None,
    global_layer: ClientConfig | None = None,
    request: ClientConfig | None = None,
) -> ResolvedConfig:
    r"""Merge the configuration layers of a call.

    The layers are applied in increasing precedence: built-in defaults,
    then the configuration captured when the client was created, then the
    current process-wide configuration, then the per-call overrides. No
    range validation is performed.

    Args:
        client: The configuration captured when the client was created.
        global_layer: The current process-wide configuration.
        request: The overrides of the call.

    Returns:
        The resolved configuration.

    Example:
        ```pycon
        >>> from retrywire.core.config import BackoffConfig, ClientConfig, resolve_config
        >>> config = resolve_config(
        ...     client=ClientConfig(max_retries=5),
        ...     global_layer=ClientConfig(max_retries=2),
        ...     request=ClientConfig(backoff=BackoffConfig(jitter=False)),
        ... )
        >>> config.max_retries
        2
        >>> config.backoff.jitter, config.backoff.initial_delay
        (False, 1000)

        ```
    """
    return DEFAULT_CONFIG.apply(client).apply(global_layer).apply(request)
