r"""Retry logic: attempt outcomes, retry decisions, and the retry loop."""

from __future__ import annotations

__all__ = [
    "AsyncRetryExecutor",
    "AttemptRecord",
    "FatalFailure",
    "RetryableFailure",
    "Success",
    "classify_failure",
    "execute_attempt",
    "is_retryable",
]

from retrywire.retry.attempt import execute_attempt
from retrywire.retry.decider import classify_failure, is_retryable
from retrywire.retry.executor_async import AsyncRetryExecutor
from retrywire.retry.outcome import AttemptRecord, FatalFailure, RetryableFailure, Success
