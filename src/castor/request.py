"""Prompt specification and request building.

A ``PromptSpec`` is what callers describe; ``to_generation_request`` turns it
into the provider-agnostic ``GenerationRequest`` every backend accepts.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
import json
import logging
from typing import TYPE_CHECKING, Any

from castor.actions import Action
from castor.errors import ConfigurationError
from castor.models import (
    OUTPUT_FORMATS,
    GenerationConfig,
    GenerationRequest,
    OutputConfig,
    OutputFormat,
)
from castor.parts import MessageData, Part, TextPart, is_part, part_from_dict
from castor.schema import to_json_schema
from castor.tools import to_tool_definition

if TYPE_CHECKING:
    from castor.backend import ModelBackend
    from castor.schema import SchemaInput

logger = logging.getLogger(__name__)

SCHEMA_INSTRUCTION = (
    "Output should be JSON formatted and conform to the following schema:"
)


@dataclass(frozen=True)
class ByName:
    """A model referenced by registered name."""

    name: str


@dataclass(frozen=True)
class Direct:
    """A model referenced by its backend callable."""

    backend: ModelBackend


type ModelRef = ByName | Direct


def as_model_ref(model: ModelRef | str | ModelBackend) -> ModelRef:
    """Normalize a string name or backend callable into a ``ModelRef``."""
    if isinstance(model, ByName | Direct):
        return model
    if isinstance(model, str):
        if not model.strip():
            raise ConfigurationError(
                "model name is empty",
                hint="Pass model='provider/model-name' or a backend callable.",
            )
        return ByName(model)
    if callable(model):
        return Direct(model)
    raise ConfigurationError(
        f"model must be a name or a backend callable, got {type(model).__name__}",
        hint="Pass model='provider/model-name' or a ModelAction.",
    )


@dataclass(frozen=True)
class OutputSpec:
    """Requested output contract.

    ``format`` defaults to ``"json"`` when a schema is given, else ``"text"``.
    """

    format: OutputFormat | None = None
    #: Pydantic ``BaseModel`` subclass, typed annotation, or JSON Schema dict.
    schema: SchemaInput | None = None

    def __post_init__(self) -> None:
        """Validate the output format."""
        if self.format is not None and self.format not in OUTPUT_FORMATS:
            raise ConfigurationError(
                f"Unknown output format: {self.format!r}",
                hint="Supported formats: 'text', 'json'.",
            )


type PromptInput = str | Part | Sequence[Part]


@dataclass(frozen=True)
class PromptSpec:
    """Everything a caller specifies for one generation."""

    model: ModelRef
    prompt: PromptInput
    history: Sequence[MessageData] | None = None
    tools: Sequence[Action[Any, Any]] | None = None
    candidates: int | None = None
    config: GenerationConfig | None = None
    output: OutputSpec | None = None

    def __post_init__(self) -> None:
        """Normalize loose inputs and validate shapes early for clear errors."""
        object.__setattr__(self, "model", as_model_ref(self.model))
        object.__setattr__(self, "prompt", _normalize_prompt(self.prompt))

        if self.history is not None:
            object.__setattr__(self, "history", _normalize_history(self.history))

        if self.tools is not None:
            for i, tool in enumerate(self.tools):
                if not isinstance(tool, Action):
                    raise ConfigurationError(
                        f"tools[{i}] must be an Action, got {type(tool).__name__}",
                        hint="Decorate tool functions with @action(...).",
                    )

        if self.candidates is not None and (
            isinstance(self.candidates, bool)
            or not isinstance(self.candidates, int)
            or self.candidates < 1
        ):
            raise ConfigurationError(
                f"candidates must be a positive integer, got {self.candidates!r}",
                hint="Omit candidates to let the backend choose.",
            )

        if self.config is not None and not isinstance(self.config, GenerationConfig):
            raise ConfigurationError(
                "config must be a GenerationConfig",
                hint="Pass config=GenerationConfig(temperature=0.2).",
            )

        if isinstance(self.output, Mapping):
            object.__setattr__(self, "output", OutputSpec(**self.output))
        elif self.output is not None and not isinstance(self.output, OutputSpec):
            raise ConfigurationError(
                "output must be an OutputSpec",
                hint="Pass output=OutputSpec(schema=MyModel).",
            )

    @property
    def output_schema(self) -> SchemaInput | None:
        """The caller's schema description, before conversion."""
        return self.output.schema if self.output is not None else None


def _normalize_prompt(prompt: Any) -> PromptInput:
    if isinstance(prompt, str) or is_part(prompt):
        return prompt
    if isinstance(prompt, Mapping):
        return part_from_dict(prompt)
    if isinstance(prompt, Sequence):
        try:
            return [part_from_dict(p) for p in prompt]
        except (TypeError, ValueError, KeyError) as exc:
            raise ConfigurationError(
                f"prompt contains an invalid part: {exc}",
                hint="Use TextPart(...), MediaPart(...), or wire-format part dicts.",
            ) from exc
    raise ConfigurationError(
        "prompt must be text, a part, or a list of parts; "
        f"got {type(prompt).__name__}",
        hint="Pass prompt='Tell me a joke' or [TextPart('...'), MediaPart(...)].",
    )


def _normalize_history(history: Any) -> list[MessageData]:
    if isinstance(history, str | Mapping) or not isinstance(history, Sequence):
        raise ConfigurationError(
            "history must be a list of messages",
            hint="Pass history=[MessageData(role='user', content=[...]), ...].",
        )
    messages: list[MessageData] = []
    for i, item in enumerate(history):
        try:
            messages.append(MessageData.from_dict(item))
        except (AttributeError, TypeError, ValueError, KeyError) as exc:
            raise ConfigurationError(
                f"history[{i}] is not a valid message: {exc}",
                hint=(
                    "Each item needs a role in user/model/system/tool "
                    "and a content list."
                ),
            ) from exc
    return messages


def schema_instruction_part(json_schema: Mapping[str, Any]) -> TextPart:
    """Build the text part asking the model for schema-conforming JSON."""
    return TextPart(
        text=(
            f"\n\n{SCHEMA_INSTRUCTION}\n\n"
            f"```\n{json.dumps(json_schema)}\n```"
        )
    )


def to_generation_request(spec: PromptSpec) -> GenerationRequest:
    """Assemble a ``GenerationRequest`` from *spec*.

    The prompt becomes a ``user`` message that follows any history. When a
    schema is given, its JSON rendering is both sent as ``output.schema`` and
    appended as a trailing instruction part of the prompt message.
    """
    content: list[Part] = []
    if isinstance(spec.prompt, str):
        content.append(TextPart(text=spec.prompt))
    elif is_part(spec.prompt):
        content.append(spec.prompt)  # type: ignore[arg-type]
    else:
        content.extend(spec.prompt)  # type: ignore[arg-type]

    schema = spec.output_schema
    json_schema = to_json_schema(schema) if schema is not None else None
    if json_schema is not None:
        content.append(schema_instruction_part(json_schema))

    prompt_message = MessageData(role="user", content=content)
    messages = [*(spec.history or ()), prompt_message]

    tools = [to_tool_definition(tool) for tool in spec.tools or ()]

    explicit_format = spec.output.format if spec.output is not None else None
    output_format: OutputFormat = explicit_format or (
        "json" if json_schema is not None else "text"
    )

    logger.debug(
        "Built request: messages=%d tools=%d format=%s",
        len(messages),
        len(tools),
        output_format,
    )
    return GenerationRequest(
        messages=messages,
        tools=tools,
        output=OutputConfig(format=output_format, schema=json_schema),
        candidates=spec.candidates,
        config=spec.config,
    )
