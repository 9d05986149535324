"""Named, invocable actions with input and output schemas.

Tools handed to ``generate`` are actions: the request builder only reads their
name, description and schemas, while callers run them with ``Action.run``
when a model asks for a tool.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import inspect
import logging
import time
import typing
from typing import TYPE_CHECKING, Any, Literal

from castor.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

    from castor.schema import SchemaInput

logger = logging.getLogger(__name__)

ActionType = Literal["tool", "model", "custom"]


@dataclass(frozen=True)
class Action[In, Out]:
    """A named operation with declared input and output schemas.

    ``output_schema`` of ``None`` means the action makes no promise about its
    output, not that it returns nothing.
    """

    name: str
    fn: Callable[[In], Out | Awaitable[Out]]
    input_schema: SchemaInput
    output_schema: SchemaInput | None = None
    description: str | None = None
    metadata: Mapping[str, Any] = field(default_factory=dict)
    action_type: ActionType = "tool"

    def __post_init__(self) -> None:
        """Validate action shape early for clear errors."""
        if not isinstance(self.name, str) or not self.name.strip():
            raise ConfigurationError(
                "Action name must be a non-empty string",
                hint="Pass name='lookupWeather' or decorate a named function.",
            )
        if not callable(self.fn):
            raise ConfigurationError(
                f"Action {self.name!r}: fn must be callable",
                hint="Pass a function or coroutine function.",
            )

    async def run(self, input: In) -> Out:  # noqa: A002
        """Invoke the action, awaiting the result when the function is async."""
        logger.debug("Action %s (%s) started", self.name, self.action_type)
        start = time.perf_counter()
        try:
            result = self.fn(input)
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            logger.debug(
                "Action %s failed after %.3fs: %s",
                self.name,
                time.perf_counter() - start,
                type(exc).__name__,
            )
            raise
        logger.debug(
            "Action %s finished in %.3fs", self.name, time.perf_counter() - start
        )
        return typing.cast("Out", result)


def _infer_schemas(fn: Callable[..., Any]) -> tuple[Any, Any]:
    """Infer (input, output) schemas from *fn*'s annotations."""
    hints = typing.get_type_hints(fn)
    params = list(inspect.signature(fn).parameters.values())
    if params:
        input_schema = hints.get(params[0].name, Any)
    else:
        input_schema = type(None)
    output_schema = hints.get("return")
    return input_schema, output_schema


def action(
    name: str | None = None,
    *,
    description: str | None = None,
    action_type: ActionType = "tool",
    metadata: Mapping[str, Any] | None = None,
) -> Callable[[Callable[..., Any]], Action[Any, Any]]:
    """Decorate a function as an ``Action``.

    The first parameter's annotation becomes the input schema and the return
    annotation the output schema. A function without parameters takes
    ``None``; an unannotated return leaves the output unconstrained.

    Example:
        @action(description="Look up the weather for a city")
        async def weather(query: WeatherQuery) -> Forecast:
            ...
    """

    def decorate(fn: Callable[..., Any]) -> Action[Any, Any]:
        input_schema, output_schema = _infer_schemas(fn)
        takes_input = bool(inspect.signature(fn).parameters)
        return Action(
            name=name or fn.__name__,
            fn=fn if takes_input else (lambda _input: fn()),
            input_schema=input_schema,
            output_schema=output_schema,
            description=description if description is not None else inspect.getdoc(fn),
            metadata=dict(metadata or {}),
            action_type=action_type,
        )

    return decorate
