"""Generation orchestration: resolve, build, invoke, wrap, validate.

Each call builds its own request and response objects; nothing is shared
between concurrent calls. The backend invocation is the only await. There is
no retry or timeout here: backends own transport concerns, and their errors
propagate unchanged.
"""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Any

from castor.backend import ModelAction
from castor.config import Settings
from castor.errors import ConfigurationError, OutputValidationError
from castor.registry import default_registry, model_key
from castor.request import (
    ByName,
    PromptSpec,
    as_model_ref,
    to_generation_request,
)
from castor.response import GenerationResponse
from castor.result import Failure
from castor.schema import validate_value
from castor.telemetry import TelemetryContext

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from castor.actions import Action
    from castor.backend import ModelBackend
    from castor.models import GenerationConfig
    from castor.parts import MessageData
    from castor.registry import Lookup
    from castor.request import ModelRef, OutputSpec, PromptInput
    from castor.schema import SchemaInput
    from castor.telemetry import TelemetryContextProtocol

logger = logging.getLogger(__name__)


async def generate(
    prompt: PromptInput,
    *,
    model: ModelRef | str | ModelBackend | None = None,
    history: Sequence[MessageData | Mapping[str, Any]] | None = None,
    tools: Sequence[Action[Any, Any]] | None = None,
    candidates: int | None = None,
    config: GenerationConfig | None = None,
    output: OutputSpec | Mapping[str, Any] | None = None,
    registry: Lookup | None = None,
    settings: Settings | None = None,
) -> GenerationResponse[Any]:
    """Generate a response for *prompt*.

    Args:
        prompt: Text, a single part, or an ordered list of parts.
        model: Registered model name or backend callable. Defaults to
            ``Settings.default_model``.
        history: Prior messages, sent before the prompt in the given order.
        tools: Actions the model may request.
        candidates: Number of alternatives to ask the backend for.
        config: Generation parameters forwarded to the backend.
        output: Output format and optional schema. With a schema, the first
            candidate's output must validate or the call fails.
        registry: Lookup used to resolve model names.
        settings: Library settings; resolved from the environment when omitted.

    Returns:
        The wrapped backend response.

    Raises:
        ConfigurationError: If the prompt specification is invalid or no model
            was given.
        ResolutionError: If a model name is not registered.
        OutputValidationError: If a schema was requested and the output does
            not conform.

    Example:
        response = await generate(
            "List 3 colors",
            model="local/echo",
            output=OutputSpec(schema=Colors),
        )
        colors = response.output()
    """
    settings = settings or Settings()
    if model is None:
        if settings.default_model is None:
            raise ConfigurationError(
                "No model given and no default model configured",
                hint="Pass model=... or set CASTOR_DEFAULT_MODEL.",
            )
        model = settings.default_model

    spec = PromptSpec(
        model=as_model_ref(model),
        prompt=prompt,
        history=history,  # type: ignore[arg-type]
        tools=tools,
        candidates=candidates,
        config=config,
        output=output,  # type: ignore[arg-type]
    )
    return await generate_from_spec(spec, registry=registry, settings=settings)


async def generate_from_spec(
    spec: PromptSpec,
    *,
    registry: Lookup | None = None,
    settings: Settings | None = None,
    telemetry: TelemetryContextProtocol | None = None,
) -> GenerationResponse[Any]:
    """Run one generation for an already-built ``PromptSpec``."""
    settings = settings or Settings()
    tele = telemetry or TelemetryContext(enabled=settings.telemetry)

    with tele("castor.generate"):
        with tele("resolve"):
            backend = resolve_model(
                spec.model,
                registry=registry,
                namespace=settings.model_namespace or "models",
            )

        with tele("build"):
            request = to_generation_request(spec)
            if isinstance(backend, ModelAction):
                backend.check_request(request)

        logger.debug(
            "Invoking %s with %d message(s), format=%s",
            _backend_label(backend),
            len(request.messages),
            request.output.format,
        )
        with tele("invoke"):
            raw = backend(request)
            if inspect.isawaitable(raw):
                raw = await raw

        response: GenerationResponse[Any] = GenerationResponse(raw)
        tele.count("candidates", len(response.candidates))

        schema = spec.output_schema
        if schema is not None:
            with tele("validate"):
                validate_output(response, schema)

    return response


def resolve_model(
    model: ModelRef | str | ModelBackend,
    *,
    registry: Lookup | None = None,
    namespace: str = "models",
) -> ModelBackend:
    """Return the backend for *model*, looking names up in *registry*.

    Lookup failures propagate from the registry unchanged.
    """
    ref = as_model_ref(model)
    if isinstance(ref, ByName):
        lookup = registry or default_registry()
        backend = lookup.lookup(model_key(ref.name, namespace=namespace))
        logger.debug("Resolved model %s", ref.name)
        return backend
    return ref.backend


def validate_output(response: GenerationResponse[Any], schema: SchemaInput) -> Any:
    """Enforce the structured-output contract on the first candidate.

    Returns:
        The validated value (a model instance for Pydantic schemas).

    Raises:
        OutputValidationError: If there is no candidate, no JSON in its text,
            or the value does not match *schema*.
    """
    if not response.candidates:
        raise OutputValidationError(
            "response had no candidates",
            hint="The backend returned nothing to validate.",
        )

    value = response.output()
    if value is None:
        logger.debug("No JSON found in candidate text")
        raise OutputValidationError(
            "candidate did not have valid JSON",
            hint="The model did not return a parseable JSON value.",
        )

    result = validate_value(schema, value)
    if isinstance(result, Failure):
        logger.debug(
            "Structured output rejected: %s", "; ".join(result.error.errors)
        )
        raise result.error
    return result.value


def _backend_label(backend: Any) -> str:
    if isinstance(backend, ModelAction):
        return backend.name
    return getattr(backend, "__name__", type(backend).__name__)
