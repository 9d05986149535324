"""Success/Failure values for operations whose failure is an expected outcome.

Validation helpers return these instead of raising so callers decide whether
a mismatch is fatal.
"""

from __future__ import annotations

import dataclasses
import typing

TSuccess = typing.TypeVar("TSuccess")
TFailure = typing.TypeVar("TFailure", bound=Exception)


@dataclasses.dataclass(frozen=True, slots=True)
class Success[TSuccess]:
    """The operation produced a value."""

    value: TSuccess


@dataclasses.dataclass(frozen=True, slots=True)
class Failure[TFailure]:
    """The operation failed with an error the caller may raise."""

    error: TFailure


Result = Success[TSuccess] | Failure[TFailure]
