"""Keyed lookup of registered actions.

This is the lookup capability the orchestrator consumes: models are stored
under ``<namespace>/<name>``, with ``models`` as the default namespace.
Registration is explicit; there is no plugin discovery.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

from castor.backend import ModelAction, ModelInfo
from castor.config import Settings
from castor.errors import ResolutionError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from castor.backend import ResponseLike
    from castor.models import GenerationRequest

logger = logging.getLogger(__name__)

MODEL_NAMESPACE = "models"


class Lookup(Protocol):
    """Anything that resolves a namespaced key or raises."""

    def lookup(self, key: str) -> Any: ...


def model_key(name: str, *, namespace: str = MODEL_NAMESPACE) -> str:
    """Return the registry key for model *name*."""
    return f"{namespace}/{name}"


class Registry:
    """In-memory mapping from namespaced keys to actions."""

    def __init__(self) -> None:
        self._entries: dict[str, Any] = {}

    def register(self, key: str, value: Any) -> None:
        """Register *value* under *key*, replacing any previous entry."""
        if key in self._entries:
            logger.debug("Replacing registry entry %s", key)
        self._entries[key] = value

    def register_model(
        self, model: ModelAction, *, namespace: str = MODEL_NAMESPACE
    ) -> str:
        """Register a model action and return its key."""
        key = model_key(model.name, namespace=namespace)
        self.register(key, model)
        return key

    def lookup(self, key: str) -> Any:
        """Return the entry for *key*.

        Raises:
            ResolutionError: If nothing is registered under *key*.
        """
        try:
            return self._entries[key]
        except KeyError:
            namespace = key.split("/", 1)[0]
            known = [k for k in self.keys() if k.startswith(f"{namespace}/")]
            if known:
                hint = f"Registered under {namespace}/: {', '.join(known)}."
            else:
                hint = (
                    f"Nothing is registered under {namespace}/; "
                    "call define_model() first."
                )
            raise ResolutionError(key, hint=hint) from None

    def keys(self) -> list[str]:
        """Registered keys in sorted order."""
        return sorted(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries


_default_registry = Registry()


def default_registry() -> Registry:
    """Return the process-wide registry used when none is passed."""
    return _default_registry


def define_model(
    name: str,
    fn: Callable[[GenerationRequest], ResponseLike | Awaitable[ResponseLike]],
    *,
    info: ModelInfo | None = None,
    registry: Registry | None = None,
    namespace: str | None = None,
) -> ModelAction:
    """Create a ``ModelAction`` and register it under ``<namespace>/<name>``.

    *namespace* defaults to ``Settings().model_namespace``, the namespace
    ``generate`` resolves names in.

    Example:
        async def echo(request: GenerationRequest) -> dict[str, Any]:
            ...

        define_model("local/echo", echo)
        response = await generate("Hi", model="local/echo")
    """
    model = ModelAction(name=name, fn=fn, info=info or ModelInfo())
    if namespace is None:
        namespace = Settings().model_namespace or MODEL_NAMESPACE
    (registry or _default_registry).register_model(model, namespace=namespace)
    return model
