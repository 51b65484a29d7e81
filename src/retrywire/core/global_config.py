r"""Process-wide configuration shared by all the calls of a process.

The process-wide configuration is a ``ClientConfig`` layer held by a
``GlobalConfigStore``. It is read, never written, by the retry loop:
every iteration of every call reads the layer that is current at that
moment, so a change becomes visible to the next configuration
resolution of any in-flight call.

Clients read the default store unless they are given another provider,
which lets tests use an isolated store instead of mutating the shared
one.
"""

from __future__ import annotations

__all__ = [
    "GlobalConfigStore",
    "default_store",
    "get_global_config",
    "reset_global_config",
    "set_global_config",
]

import logging
from typing import TYPE_CHECKING

from retrywire.core.config import ClientConfig, ResolvedConfig, resolve_config

if TYPE_CHECKING:
    from collections.abc import Mapping

    from retrywire.core.config import BackoffConfig, LoggingConfig

logger: logging.Logger = logging.getLogger(__name__)


class GlobalConfigStore:
    r"""Hold a process-wide configuration layer.

    Example:
        ```pycon
        >>> from retrywire.core.global_config import GlobalConfigStore
        >>> store = GlobalConfigStore()
        >>> store.get().max_retries
        3
        >>> store.set(max_retries=5)
        >>> store.get().max_retries
        5
        >>> store.layer()
        ClientConfig(max_retries=5, request_timeout=None, global_timeout=None, backoff=None, logging=None, headers=None)
        >>> store.reset()
        >>> store.get().max_retries
        3

        ```
    """

    def __init__(self, layer: ClientConfig | None = None) -> None:
        self._layer = layer if layer is not None else ClientConfig()

    def layer(self) -> ClientConfig:
        r"""Return the current process-wide layer.

        Returns:
            The layer. Only the fields that were set are not ``None``.
        """
        return self._layer

    def get(self) -> ResolvedConfig:
        r"""Return the process-wide layer applied on top of the defaults.

        Returns:
            The resolved process-wide configuration.
        """
        return resolve_config(global_layer=self._layer)

    def set(
        self,
        *,
        max_retries: int | None = None,
        request_timeout: float | None = None,
        global_timeout: float | None = None,
        backoff: BackoffConfig | None = None,
        logging: LoggingConfig | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        r"""Merge new values into the process-wide layer.

        The ``backoff`` and ``logging`` values are merged field-by-field
        with the values already set.

        Args:
            max_retries: Maximum number of retries after the initial attempt.
            request_timeout: Budget of a single attempt, in milliseconds.
            global_timeout: Budget of the whole call, in milliseconds.
            backoff: Partial backoff configuration.
            logging: Partial logging configuration.
            headers: Default headers sent with every request.
        """
        update = ClientConfig(
            max_retries=max_retries,
            request_timeout=request_timeout,
            global_timeout=global_timeout,
            backoff=backoff,
            logging=logging,
            headers=headers,
        )
        self._layer = self._layer.merge(update)
        logger.debug(f"Process-wide HTTP configuration updated: {self._layer}")

    def reset(self) -> None:
        r"""Clear the process-wide layer so only the defaults apply."""
        self._layer = ClientConfig()


default_store = GlobalConfigStore()


def set_global_config(
    *,
    max_retries: int | None = None,
    request_timeout: float | None = None,
    global_timeout: float | None = None,
    backoff: BackoffConfig | None = None,
    logging: LoggingConfig | None = None,
    headers: Mapping[str, str] | None = None,
) -> None:
    r"""Update the process-wide configuration.

    The update is visible to the next configuration resolution of every
    call, including calls that are already retrying.

    Args:
        max_retries: Maximum number of retries after the initial attempt.
        request_timeout: Budget of a single attempt, in milliseconds.
        global_timeout: Budget of the whole call, in milliseconds.
        backoff: Partial backoff configuration.
        logging: Partial logging configuration.
        headers: Default headers sent with every request.

    Example:
        ```pycon
        >>> from retrywire import get_global_config, reset_global_config, set_global_config
        >>> set_global_config(max_retries=2)
        >>> get_global_config().max_retries
        2
        >>> reset_global_config()

        ```
    """
    default_store.set(
        max_retries=max_retries,
        request_timeout=request_timeout,
        global_timeout=global_timeout,
        backoff=backoff,
        logging=logging,
        headers=headers,
    )


def get_global_config() -> ResolvedConfig:
    r"""Return the current process-wide configuration.

    Returns:
        The process-wide layer applied on top of the defaults.
    """
    return default_store.get()


def reset_global_config() -> None:
    r"""Reset the process-wide configuration to the defaults."""
    default_store.reset()
