"""Request and response data shapes exchanged with model backends."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

from castor._validation import _require
from castor.parts import MessageData

if TYPE_CHECKING:
    from collections.abc import Mapping

OutputFormat = Literal["text", "json"]
OUTPUT_FORMATS: frozenset[str] = frozenset({"text", "json"})
FinishReason = Literal["stop", "length", "blocked", "other", "unknown"]
JSONSchema = dict[str, Any]
#: Opaque accounting record (token and sample counts). Never validated.
GenerationUsage = dict[str, Any]


@dataclass(frozen=True)
class GenerationConfig:
    """Backend-agnostic generation parameters.

    ``custom`` carries provider-specific tuning (aspect ratio, seed, ...) and is
    forwarded without interpretation.
    """

    temperature: float | None = None
    max_output_tokens: int | None = None
    top_k: int | None = None
    top_p: float | None = None
    stop_sequences: tuple[str, ...] | None = None
    custom: Mapping[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Render the config, omitting fields that were not set."""
        out: dict[str, Any] = {}
        if self.temperature is not None:
            out["temperature"] = self.temperature
        if self.max_output_tokens is not None:
            out["maxOutputTokens"] = self.max_output_tokens
        if self.top_k is not None:
            out["topK"] = self.top_k
        if self.top_p is not None:
            out["topP"] = self.top_p
        if self.stop_sequences is not None:
            out["stopSequences"] = list(self.stop_sequences)
        if self.custom is not None:
            out["custom"] = dict(self.custom)
        return out


@dataclass(frozen=True)
class ToolDefinition:
    """A tool the model may call, described by JSON schemas.

    An empty ``output_schema`` accepts any value: the tool has no output
    contract.
    """

    name: str
    input_schema: JSONSchema
    output_schema: JSONSchema = field(default_factory=dict)
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "name": self.name,
            "inputSchema": self.input_schema,
            "outputSchema": self.output_schema,
        }
        if self.description is not None:
            out["description"] = self.description
        return out


@dataclass(frozen=True)
class OutputConfig:
    """Requested output format and optional JSON schema."""

    format: OutputFormat = "text"
    schema: JSONSchema | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"format": self.format}
        if self.schema is not None:
            out["schema"] = self.schema
        return out


@dataclass(frozen=True)
class GenerationRequest:
    """Normalized, provider-agnostic request handed to a model backend.

    ``messages`` always ends with the prompt message; any history precedes it
    in its original order.
    """

    messages: list[MessageData]
    tools: list[ToolDefinition] = field(default_factory=list)
    output: OutputConfig = field(default_factory=OutputConfig)
    candidates: int | None = None
    config: GenerationConfig | None = None

    @property
    def prompt_message(self) -> MessageData:
        """The freshly built prompt message (last entry of ``messages``)."""
        return self.messages[-1]

    def to_dict(self) -> dict[str, Any]:
        """Render the request in the camelCase wire format."""
        out: dict[str, Any] = {
            "messages": [m.to_dict() for m in self.messages],
            "tools": [t.to_dict() for t in self.tools],
            "output": self.output.to_dict(),
        }
        if self.candidates is not None:
            out["candidates"] = self.candidates
        if self.config is not None:
            out["config"] = self.config.to_dict()
        return out


@dataclass(frozen=True)
class CandidateData:
    """One generated alternative as returned by a backend."""

    message: MessageData
    index: int
    usage: GenerationUsage | None = None
    finish_reason: FinishReason | None = None
    finish_message: str | None = None
    custom: Any = None

    @classmethod
    def from_dict(
        cls, raw: Mapping[str, Any] | CandidateData, *, position: int = 0
    ) -> CandidateData:
        """Build from the wire form; a missing ``index`` takes *position*."""
        if isinstance(raw, CandidateData):
            return raw
        message = raw.get("message")
        _require(
            condition=message is not None,
            message="candidate has no message",
            field_name="candidate",
        )
        index = raw.get("index")
        return cls(
            message=MessageData.from_dict(message),
            index=position if index is None else index,
            usage=raw.get("usage"),
            finish_reason=raw.get("finishReason", raw.get("finish_reason")),
            finish_message=raw.get("finishMessage", raw.get("finish_message")),
            custom=raw.get("custom"),
        )


@dataclass(frozen=True)
class GenerationResponseData:
    """Raw backend result: candidates plus response-level accounting."""

    candidates: list[CandidateData] | None = None
    usage: GenerationUsage | None = None
    custom: Any = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> GenerationResponseData:
        """Build from the wire form."""
        raw_candidates = raw.get("candidates")
        candidates = (
            None
            if raw_candidates is None
            else [
                CandidateData.from_dict(c, position=i)
                for i, c in enumerate(raw_candidates)
            ]
        )
        return cls(
            candidates=candidates,
            usage=raw.get("usage"),
            custom=raw.get("custom"),
        )


def coerce_response_data(
    raw: GenerationResponseData | Mapping[str, Any],
) -> GenerationResponseData:
    """Accept either a response dataclass or its wire mapping."""
    if isinstance(raw, GenerationResponseData):
        return raw
    _require(
        condition=hasattr(raw, "get"),
        message=f"expected a response mapping, got {type(raw).__name__}",
        exc=TypeError,
    )
    return GenerationResponseData.from_dict(raw)
