from __future__ import annotations

import logging

import pytest

from castor.config import Settings
from castor.errors import ConfigurationError

pytestmark = pytest.mark.unit


def test_defaults_without_environment() -> None:
    settings = Settings()

    assert settings.default_model is None
    assert settings.model_namespace == "models"
    assert settings.log_level == "WARNING"
    assert settings.telemetry is False


def test_fields_resolve_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("CASTOR_DEFAULT_MODEL", "vertex-ai/gemini-pro")
    monkeypatch.setenv("CASTOR_MODEL_NAMESPACE", "staging")
    monkeypatch.setenv("CASTOR_LOG_LEVEL", "debug")
    monkeypatch.setenv("CASTOR_TELEMETRY", "yes")

    settings = Settings()

    assert settings.default_model == "vertex-ai/gemini-pro"
    assert settings.model_namespace == "staging"
    assert settings.log_level == "DEBUG"
    assert settings.telemetry is True


def test_explicit_values_win_over_environment(monkeypatch) -> None:
    monkeypatch.setenv("CASTOR_DEFAULT_MODEL", "from-env")
    monkeypatch.setenv("CASTOR_TELEMETRY", "1")

    settings = Settings(default_model="explicit", telemetry=False)

    assert settings.default_model == "explicit"
    assert settings.telemetry is False


def test_empty_default_model_env_reads_as_unset(monkeypatch) -> None:
    monkeypatch.setenv("CASTOR_DEFAULT_MODEL", "")
    assert Settings().default_model is None


def test_unknown_log_level_is_rejected() -> None:
    with pytest.raises(ConfigurationError, match="log level") as exc_info:
        Settings(log_level="LOUD")
    assert "DEBUG" in (exc_info.value.hint or "")


@pytest.mark.parametrize("namespace", ["", "  ", "a/b"])
def test_invalid_namespace_is_rejected(namespace: str) -> None:
    with pytest.raises(ConfigurationError, match="model_namespace"):
        Settings(model_namespace=namespace)


def test_settings_are_frozen() -> None:
    settings = Settings()
    with pytest.raises(AttributeError):
        settings.log_level = "DEBUG"  # type: ignore[misc]


def test_apply_logging_sets_package_level() -> None:
    logger = logging.getLogger("castor")
    previous = logger.level
    try:
        Settings(log_level="info").apply_logging()
        assert logger.level == logging.INFO
    finally:
        logger.setLevel(previous)


def test_str_is_readable() -> None:
    text = str(Settings(default_model="m"))
    assert text.startswith("Settings(default_model='m'")
    assert repr(Settings(default_model="m")) == text
