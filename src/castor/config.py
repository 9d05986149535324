"""Settings: frozen, environment-backed library configuration."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os

from dotenv import load_dotenv

from castor.errors import ConfigurationError

load_dotenv()

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_TRUTHY = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Immutable settings for Castor.

    Unset fields are auto-resolved from the environment (``.env`` files are
    loaded at import time).

    Example:
        settings = Settings(default_model="vertex-ai/gemini-pro")
        # CASTOR_LOG_LEVEL and CASTOR_TELEMETRY still come from the environment
    """

    #: Model name used when ``generate`` is called without ``model``.
    #: Auto-resolved from ``CASTOR_DEFAULT_MODEL`` when *None*.
    default_model: str | None = None
    #: Registry namespace for model names. ``CASTOR_MODEL_NAMESPACE``.
    model_namespace: str | None = None
    #: Level for the ``castor`` logger. ``CASTOR_LOG_LEVEL``.
    log_level: str | None = None
    #: Emit telemetry scopes. ``CASTOR_TELEMETRY=1``.
    telemetry: bool | None = None

    def __post_init__(self) -> None:
        """Auto-resolve unset fields and validate."""
        if self.default_model is None:
            object.__setattr__(
                self, "default_model", os.environ.get("CASTOR_DEFAULT_MODEL") or None
            )
        if self.model_namespace is None:
            object.__setattr__(
                self,
                "model_namespace",
                os.environ.get("CASTOR_MODEL_NAMESPACE", "models"),
            )
        if self.log_level is None:
            object.__setattr__(
                self, "log_level", os.environ.get("CASTOR_LOG_LEVEL", "WARNING")
            )
        if self.telemetry is None:
            raw = os.environ.get("CASTOR_TELEMETRY", "")
            object.__setattr__(self, "telemetry", raw.strip().lower() in _TRUTHY)

        level = str(self.log_level).upper()
        if level not in _LOG_LEVELS:
            raise ConfigurationError(
                f"Unknown log level: {self.log_level!r}",
                hint=f"Use one of: {', '.join(_LOG_LEVELS)}.",
            )
        object.__setattr__(self, "log_level", level)

        namespace = self.model_namespace
        if not isinstance(namespace, str) or not namespace.strip() or "/" in namespace:
            raise ConfigurationError(
                "model_namespace must be a non-empty name without '/', "
                f"got {namespace!r}",
                hint="The default namespace is 'models'.",
            )

    def apply_logging(self) -> None:
        """Set the ``castor`` logger to ``log_level``."""
        logging.getLogger("castor").setLevel(self.log_level or "WARNING")

    def __str__(self) -> str:
        """Return a readable representation."""
        return (
            f"Settings(default_model={self.default_model!r}, "
            f"model_namespace={self.model_namespace!r}, "
            f"log_level={self.log_level!r}, telemetry={self.telemetry})"
        )

    __repr__ = __str__
