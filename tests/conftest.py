"""Pytest configuration and fixtures.

Provides the fake model backend, environment isolation, and logging setup.
Environment fixtures are autouse.
"""

from __future__ import annotations

from contextlib import suppress
from dataclasses import dataclass, field
import logging
import os
from typing import Any

import pytest

from castor.models import GenerationRequest
from castor.registry import Registry

# =============================================================================
# Test Doubles
# =============================================================================


def text_response(*texts: str, **extra: Any) -> dict[str, Any]:
    """Build a wire-format response with one model candidate per text."""
    return {
        "candidates": [
            {
                "index": i,
                "finishReason": "stop",
                "message": {"role": "model", "content": [{"text": t}]},
            }
            for i, t in enumerate(texts)
        ],
        **extra,
    }


@dataclass
class FakeModel:
    """Model backend test double.

    Records every request and returns ``response`` (or raises ``error``).
    Async by default, like real backends; set ``sync=True`` to return
    directly.
    """

    response: Any = field(default_factory=lambda: text_response("ok"))
    error: Exception | None = None
    sync: bool = False
    requests: list[GenerationRequest] = field(default_factory=list)

    def __call__(self, request: GenerationRequest) -> Any:
        self.requests.append(request)
        if self.sync:
            return self._respond()
        return self._respond_async()

    async def _respond_async(self) -> Any:
        return self._respond()

    def _respond(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.response

    @property
    def last_request(self) -> GenerationRequest:
        assert self.requests, "model was never invoked"
        return self.requests[-1]


@pytest.fixture
def fake_model() -> FakeModel:
    return FakeModel()


@pytest.fixture
def registry() -> Registry:
    """A fresh registry so tests never share registrations."""
    return Registry()


# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests."""
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_castor_env(monkeypatch):
    """Clear CASTOR_* variables so settings resolve to their defaults."""
    for key in list(os.environ.keys()):
        if key.startswith("CASTOR_"):
            monkeypatch.delenv(key, raising=False)


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Suppress noisy third-party loggers."""
    logging.getLogger("asyncio").setLevel(logging.WARNING)
