"""Model backend contract: the single seam where providers plug in."""

from __future__ import annotations

from dataclasses import dataclass, field
import inspect
import logging
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from castor.errors import ConfigurationError
from castor.parts import MediaPart

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

    from castor.models import GenerationRequest, GenerationResponseData

logger = logging.getLogger(__name__)

type ResponseLike = GenerationResponseData | Mapping[str, Any]


@runtime_checkable
class ModelBackend(Protocol):
    """Callable executing a ``GenerationRequest`` against a provider.

    Backends own wire serialization, network retries, and timeouts. They may
    return the response directly or as an awaitable.
    """

    def __call__(
        self, request: GenerationRequest
    ) -> ResponseLike | Awaitable[ResponseLike]: ...


@dataclass(frozen=True)
class ModelSupports:
    """Capabilities a model declares; requests needing more are rejected."""

    multiturn: bool = True
    media: bool = True
    tools: bool = True
    system_role: bool = True
    #: Output formats the model can produce.
    output: tuple[str, ...] = ("text", "json")


@dataclass(frozen=True)
class ModelInfo:
    """Descriptive metadata for a model backend."""

    label: str | None = None
    supports: ModelSupports = field(default_factory=ModelSupports)


@dataclass(frozen=True)
class ModelAction:
    """A named model backend with capability metadata."""

    name: str
    fn: Callable[[GenerationRequest], ResponseLike | Awaitable[ResponseLike]]
    info: ModelInfo = field(default_factory=ModelInfo)

    def __post_init__(self) -> None:
        """Validate model shape early for clear errors."""
        if not isinstance(self.name, str) or not self.name.strip():
            raise ConfigurationError(
                "Model name must be a non-empty string",
                hint="Use a provider-qualified name such as 'vertex-ai/imagen2'.",
            )
        if not callable(self.fn):
            raise ConfigurationError(
                f"Model {self.name!r}: fn must be callable",
                hint="Pass a function taking a GenerationRequest.",
            )

    async def __call__(self, request: GenerationRequest) -> ResponseLike:
        """Run the backend function, awaiting it when needed."""
        result = self.fn(request)
        if inspect.isawaitable(result):
            result = await result
        return result

    def check_request(self, request: GenerationRequest) -> None:
        """Reject requests needing a capability this model does not declare.

        Raises:
            ConfigurationError: Naming the first unsupported feature.
        """
        supports = self.info.supports
        if request.tools and not supports.tools:
            self._unsupported("tools", "Remove tools from the prompt.")
        if len(request.messages) > 1 and not supports.multiturn:
            self._unsupported(
                "multi-turn history", "Send only the prompt, without history."
            )
        if not supports.system_role and any(
            m.role == "system" for m in request.messages
        ):
            self._unsupported(
                "system messages", "Fold system instructions into the user prompt."
            )
        if not supports.media and any(
            isinstance(p, MediaPart) for m in request.messages for p in m.content
        ):
            self._unsupported("media input", "Send text-only content.")
        if request.output.format not in supports.output:
            self._unsupported(
                f"{request.output.format!r} output",
                f"Supported output formats: {', '.join(supports.output)}.",
            )

    def _unsupported(self, feature: str, hint: str) -> None:
        logger.debug("Model %s rejected request: %s unsupported", self.name, feature)
        raise ConfigurationError(
            f"Model {self.name!r} does not support {feature}", hint=hint
        )


def model_action(
    name: str,
    fn: Callable[[GenerationRequest], ResponseLike | Awaitable[ResponseLike]],
    *,
    info: ModelInfo | None = None,
) -> ModelAction:
    """Wrap a backend function as a named ``ModelAction``."""
    return ModelAction(name=name, fn=fn, info=info or ModelInfo())
