"""Schema conversion and validation as pure functions.

A schema description is a Pydantic ``BaseModel`` subclass, any type Pydantic
can adapt (``list[str]``, ``TypedDict``, dataclasses, ...), or a plain JSON
Schema dict. Conversion renders the portable JSON Schema sent to backends;
validation checks a value against the *original* description, strictly:
values are never coerced across JSON types.
"""

from __future__ import annotations

from copy import deepcopy
import json
import logging
from typing import Any

import jsonschema
from jsonschema.exceptions import SchemaError
from pydantic import (
    BaseModel,
    PydanticSchemaGenerationError,
    PydanticUserError,
    TypeAdapter,
)
from pydantic import ValidationError as PydanticValidationError

from castor.errors import ConfigurationError, OutputValidationError
from castor.result import Failure, Result, Success

logger = logging.getLogger(__name__)

type SchemaInput = type[BaseModel] | dict[str, Any] | Any

_SCHEMA_HINT = (
    "Pass a Pydantic BaseModel subclass, a typed annotation, or a JSON Schema dict."
)


def _is_model_class(schema: Any) -> bool:
    return isinstance(schema, type) and issubclass(schema, BaseModel)


def any_schema() -> dict[str, Any]:
    """Return a JSON Schema that matches any value."""
    return {}


def to_json_schema(schema: SchemaInput) -> dict[str, Any]:
    """Render *schema* as a JSON Schema document.

    Raises:
        ConfigurationError: If Pydantic cannot build a schema for the type.
    """
    if isinstance(schema, dict):
        return deepcopy(schema)
    try:
        if _is_model_class(schema):
            return schema.model_json_schema()
        return TypeAdapter(schema).json_schema()
    except (PydanticSchemaGenerationError, PydanticUserError) as exc:
        raise ConfigurationError(
            f"Cannot build a JSON schema for {schema!r}",
            hint=_SCHEMA_HINT,
        ) from exc


def validate_value(
    schema: SchemaInput, value: Any
) -> Result[Any, OutputValidationError]:
    """Check *value* against *schema*.

    Returns ``Success`` holding the validated value (a model instance for
    Pydantic schemas, the value itself for JSON Schema dicts) or ``Failure``
    holding an ``OutputValidationError``.
    """
    if isinstance(schema, dict):
        return _validate_json_schema(schema, value)
    return _validate_pydantic(schema, value)


def _validate_json_schema(
    schema: dict[str, Any], value: Any
) -> Result[Any, OutputValidationError]:
    validator_cls = jsonschema.validators.validator_for(
        schema, default=jsonschema.Draft202012Validator
    )
    try:
        validator_cls.check_schema(schema)
    except SchemaError as exc:
        logger.debug("Expected schema is invalid: %s", exc.message)
        return Failure(
            OutputValidationError(
                "failed to validate data against expected schema",
                hint="The output schema itself is not valid JSON Schema.",
                errors=(exc.message,),
                value=value,
            )
        )

    validator = validator_cls(schema)
    errors = sorted(
        validator.iter_errors(value), key=lambda e: [str(p) for p in e.path]
    )
    if errors:
        return Failure(
            OutputValidationError(
                "data did not match expected schema",
                errors=tuple(_describe_jsonschema_error(e) for e in errors),
                value=value,
            )
        )
    return Success(value)


def _validate_pydantic(schema: Any, value: Any) -> Result[Any, OutputValidationError]:
    # Strict mode: "30" is not an int. JSON mode still accepts the
    # string forms JSON uses for dates, enums and the like.
    try:
        payload = json.dumps(value)
    except (TypeError, ValueError, RecursionError):
        payload = None
    try:
        if _is_model_class(schema):
            if payload is None:
                return Success(schema.model_validate(value, strict=True))
            return Success(schema.model_validate_json(payload, strict=True))
        adapter = TypeAdapter(schema)
        if payload is None:
            return Success(adapter.validate_python(value, strict=True))
        return Success(adapter.validate_json(payload, strict=True))
    except PydanticValidationError as exc:
        return Failure(
            OutputValidationError(
                "data did not match expected schema",
                errors=tuple(_describe_pydantic_error(e) for e in exc.errors()),
                value=value,
            )
        )
    except (PydanticSchemaGenerationError, PydanticUserError) as exc:
        raise ConfigurationError(
            f"Cannot validate against {schema!r}",
            hint=_SCHEMA_HINT,
        ) from exc


def _describe_jsonschema_error(error: jsonschema.ValidationError) -> str:
    location = "/".join(str(p) for p in error.absolute_path)
    return f"{location or '<root>'}: {error.message}"


def _describe_pydantic_error(error: Any) -> str:
    location = "/".join(str(p) for p in error.get("loc", ()))
    return f"{location or '<root>'}: {error.get('msg', 'invalid value')}"
