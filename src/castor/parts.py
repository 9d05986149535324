"""Neutral multi-part message content.

Parts are provider-agnostic shapes shared by requests and responses. Backends
translate them into their own wire types; the core only reads and
concatenates them. Exactly one variant is held per part, so readers check the
variant instead of assuming a field is present.
"""

from __future__ import annotations

import base64
import binascii
import dataclasses
from typing import TYPE_CHECKING, Any, Literal

from castor._validation import _require, _require_str

if TYPE_CHECKING:
    from collections.abc import Mapping

Role = Literal["user", "model", "system", "tool"]
ROLES: frozenset[str] = frozenset({"user", "model", "system", "tool"})


@dataclasses.dataclass(frozen=True, slots=True)
class TextPart:
    """A run of plain text."""

    text: str

    def __post_init__(self) -> None:
        """Validate TextPart invariants."""
        _require_str(self.text, "text")


@dataclasses.dataclass(frozen=True, slots=True)
class Media:
    """Reference to media content; ``url`` may be a ``data:`` URL."""

    url: str
    content_type: str | None = None

    def __post_init__(self) -> None:
        """Validate Media invariants."""
        _require_str(self.url, "url")
        _require_str(self.content_type, "content_type", optional=True)

    @property
    def is_data_url(self) -> bool:
        """Whether the media is carried inline as a ``data:`` URL."""
        return self.url.startswith("data:")

    def decode(self) -> bytes | None:
        """Return the payload of a base64 ``data:`` URL.

        Remote URLs and non-base64 data URLs yield ``None``.
        """
        if not self.is_data_url:
            return None
        header, sep, payload = self.url.partition(",")
        if not sep or not header.endswith(";base64"):
            return None
        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError):
            return None


@dataclasses.dataclass(frozen=True, slots=True)
class MediaPart:
    """A media reference."""

    media: Media


@dataclasses.dataclass(frozen=True, slots=True)
class ToolRequest:
    """A tool invocation requested by the model."""

    name: str
    input: Any = None
    ref: str | None = None

    def __post_init__(self) -> None:
        """Validate ToolRequest invariants."""
        _require_str(self.name, "name")
        _require_str(self.ref, "ref", optional=True)


@dataclasses.dataclass(frozen=True, slots=True)
class ToolRequestPart:
    """Content asking the caller to run a tool."""

    tool_request: ToolRequest


@dataclasses.dataclass(frozen=True, slots=True)
class ToolResponse:
    """The result of running a requested tool."""

    name: str
    output: Any = None
    ref: str | None = None

    def __post_init__(self) -> None:
        """Validate ToolResponse invariants."""
        _require_str(self.name, "name")
        _require_str(self.ref, "ref", optional=True)


@dataclasses.dataclass(frozen=True, slots=True)
class ToolResponsePart:
    """Content returning a tool result to the model."""

    tool_response: ToolResponse


@dataclasses.dataclass(frozen=True, slots=True)
class DataPart:
    """Any other typed payload, forwarded without interpretation."""

    data: Any


type Part = TextPart | MediaPart | ToolRequestPart | ToolResponsePart | DataPart

PART_TYPES: tuple[type, ...] = (
    TextPart,
    MediaPart,
    ToolRequestPart,
    ToolResponsePart,
    DataPart,
)


def is_part(value: object) -> bool:
    """Whether *value* is one of the Part variants."""
    return isinstance(value, PART_TYPES)


def part_text(part: Part) -> str:
    """Return the text carried by *part*, or ``""`` for non-text parts."""
    if isinstance(part, TextPart):
        return part.text
    return ""


def part_from_dict(raw: Mapping[str, Any] | Part) -> Part:
    """Convert a wire-format part mapping into a Part.

    Part instances pass through unchanged. Mappings with none of the known
    keys become a ``DataPart`` holding the raw mapping.
    """
    if is_part(raw):
        return raw  # type: ignore[return-value]
    _require(
        condition=hasattr(raw, "get"),
        message=f"expected a part mapping, got {type(raw).__name__}",
        exc=TypeError,
    )
    if isinstance(raw.get("text"), str):
        return TextPart(text=raw["text"])
    media = raw.get("media")
    if isinstance(media, dict):
        return MediaPart(
            media=Media(url=media["url"], content_type=media.get("contentType"))
        )
    request = raw.get("toolRequest")
    if isinstance(request, dict):
        return ToolRequestPart(
            tool_request=ToolRequest(
                name=request["name"], input=request.get("input"), ref=request.get("ref")
            )
        )
    response = raw.get("toolResponse")
    if isinstance(response, dict):
        return ToolResponsePart(
            tool_response=ToolResponse(
                name=response["name"],
                output=response.get("output"),
                ref=response.get("ref"),
            )
        )
    if "data" in raw:
        return DataPart(data=raw["data"])
    return DataPart(data=dict(raw))


def part_to_dict(part: Part) -> dict[str, Any]:
    """Render a Part in the camelCase wire format."""
    if isinstance(part, TextPart):
        return {"text": part.text}
    if isinstance(part, MediaPart):
        media: dict[str, Any] = {"url": part.media.url}
        if part.media.content_type is not None:
            media["contentType"] = part.media.content_type
        return {"media": media}
    if isinstance(part, ToolRequestPart):
        req = part.tool_request
        out: dict[str, Any] = {"name": req.name, "input": req.input}
        if req.ref is not None:
            out["ref"] = req.ref
        return {"toolRequest": out}
    if isinstance(part, ToolResponsePart):
        resp = part.tool_response
        out = {"name": resp.name, "output": resp.output}
        if resp.ref is not None:
            out["ref"] = resp.ref
        return {"toolResponse": out}
    return {"data": part.data}


@dataclasses.dataclass(frozen=True, slots=True)
class MessageData:
    """A role-tagged, ordered sequence of parts.

    Content order is the concatenation order for text reconstruction. Empty
    content is legal.
    """

    role: Role
    content: list[Part] = dataclasses.field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any] | MessageData) -> MessageData:
        """Build a message from its wire mapping; messages pass through."""
        if isinstance(raw, MessageData):
            return raw
        role = raw.get("role")
        _require(
            condition=role in ROLES,
            message=f"unknown role {role!r}; expected one of {sorted(ROLES)}",
            field_name="role",
        )
        return cls(
            role=role,  # type: ignore[arg-type]
            content=[part_from_dict(p) for p in raw.get("content") or ()],
        )

    def to_dict(self) -> dict[str, Any]:
        """Render the message in the wire format."""
        return {
            "role": self.role,
            "content": [part_to_dict(p) for p in self.content],
        }
