"""Exception hierarchy for Castor."""

from __future__ import annotations

from typing import Any


class CastorError(Exception):
    """Base exception for all Castor errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(CastorError):
    """A prompt specification, setting, or schema description is invalid."""


class ResolutionError(ConfigurationError):
    """A registry key did not resolve to a registered action."""

    def __init__(self, key: str, *, hint: str | None = None) -> None:
        super().__init__(f"No action registered under {key!r}", hint=hint)
        self.key = key


class OutputValidationError(CastorError):
    """Structured output was requested but the model did not deliver it.

    ``errors`` holds one readable entry per mismatch; ``value`` is the value
    extracted from the response text, when there was one.
    """

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        errors: tuple[str, ...] = (),
        value: Any = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.errors = errors
        self.value = value
