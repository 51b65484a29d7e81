r"""Backoff delay calculation.

This module provides the function computing the delay to wait before a
retry with exponential backoff and optional jitter.
"""

from __future__ import annotations

__all__ = ["calculate_backoff_delay"]

import math
import random
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from retrywire.core.config import BackoffPolicy


def calculate_backoff_delay(
    retry_number: int,
    backoff: BackoffPolicy,
    *,
    random_func: Callable[[], float] = random.random,
) -> int:
    """Calculate the delay to wait before a retry.

    The delay is calculated as follows:
    1. Exponential growth: ``initial_delay * multiplier ** retry_number``
    2. Cap: ``min(delay, max_delay)``
    3. Jitter (if enabled): ``delay * (0.5 + random() * 0.5)``, applied
       after the cap so a jittered delay never exceeds ``max_delay``
    4. The result is floored to an integer number of milliseconds

    Args:
        retry_number: The 0-indexed retry number. For example,
            ``retry_number=0`` is the first retry, ``retry_number=1`` is
            the second retry, etc.
        backoff: The backoff parameters.
        random_func: Source of uniform random numbers in ``[0, 1)``.

    Returns:
        The delay in milliseconds.

    Example:
        ```pycon
        >>> from retrywire.core.config import BackoffPolicy
        >>> from retrywire.utils.backoff import calculate_backoff_delay
        >>> policy = BackoffPolicy(initial_delay=100, multiplier=2, max_delay=1000, jitter=False)
        >>> [calculate_backoff_delay(n, policy) for n in range(6)]
        [100, 200, 400, 800, 1000, 1000]

        ```
    """
    try:
        delay = min(backoff.initial_delay * backoff.multiplier**retry_number, backoff.max_delay)
    except OverflowError:
        delay = backoff.max_delay
    if backoff.jitter:
        delay *= 0.5 + random_func() * 0.5  # noqa: S311
    return math.floor(delay)
