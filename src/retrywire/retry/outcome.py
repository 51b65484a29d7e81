r"""Outcomes of a single request attempt.

An attempt ends in exactly one of three outcomes, consumed by the retry
loop:

- ``Success``: a response with a status below 400
- ``RetryableFailure``: a transient failure eligible for another attempt
- ``FatalFailure``: a failure that ends the call immediately
"""

from __future__ import annotations

__all__ = ["AttemptOutcome", "AttemptRecord", "FatalFailure", "RetryableFailure", "Success"]

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from retrywire.exceptions import HttpError, NetworkError, RequestTimeoutError
    from retrywire.response import Response


@dataclass(frozen=True)
class Success:
    r"""The attempt produced an acceptable response."""

    response: Response


@dataclass(frozen=True)
class RetryableFailure:
    r"""The attempt failed with a transient error."""

    error: HttpError | RequestTimeoutError | NetworkError


@dataclass(frozen=True)
class FatalFailure:
    r"""The attempt failed with an error that must not be retried."""

    error: HttpError | RequestTimeoutError | NetworkError


AttemptOutcome = Union[Success, RetryableFailure, FatalFailure]


@dataclass(frozen=True)
class AttemptRecord:
    r"""Trace of one attempt of a call.

    Attributes:
        index: The 0-indexed attempt number.
        started_at: The wall-clock time the attempt started (seconds since
            the epoch).
        outcome: The outcome of the attempt.
    """

    index: int
    started_at: float
    outcome: AttemptOutcome
