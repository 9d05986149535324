"""Read-only views over backend responses.

``GenerationResponse`` wraps raw response data with convenience accessors for
text, structured output and media. Missing pieces (no candidates, no usage,
no JSON in the text) read as empty values rather than errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from castor.extract import extract_json
from castor.models import CandidateData, GenerationResponseData, coerce_response_data
from castor.parts import (
    MediaPart,
    MessageData,
    ToolRequestPart,
    part_text,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from castor.models import FinishReason, GenerationUsage
    from castor.parts import Media, Part, Role, ToolRequest


class Message[O]:
    """A message with text and structured-output accessors."""

    __slots__ = ("content", "role")

    def __init__(self, message: MessageData | Mapping[str, Any]) -> None:
        data = MessageData.from_dict(message)
        self.role: Role = data.role
        self.content: list[Part] = data.content

    def text(self) -> str:
        """Concatenate the text of every part, in order."""
        return "".join(part_text(part) for part in self.content)

    def output(self) -> O | None:
        """Parse the first JSON value embedded in ``text()``, or ``None``."""
        return extract_json(self.text())

    def media(self) -> Media | None:
        """Return the first media reference, if any."""
        for part in self.content:
            if isinstance(part, MediaPart):
                return part.media
        return None

    def tool_requests(self) -> list[ToolRequest]:
        """Tool invocations requested in this message, in order."""
        return [
            p.tool_request for p in self.content if isinstance(p, ToolRequestPart)
        ]

    def to_data(self) -> MessageData:
        """Return the plain message data, e.g. to extend a history."""
        return MessageData(role=self.role, content=self.content)

    def __repr__(self) -> str:
        return f"Message(role={self.role!r}, parts={len(self.content)})"


class Candidate[O]:
    """One generated alternative."""

    __slots__ = (
        "custom",
        "finish_message",
        "finish_reason",
        "index",
        "message",
        "usage",
    )

    def __init__(self, candidate: CandidateData | Mapping[str, Any]) -> None:
        data = CandidateData.from_dict(candidate)
        self.message: Message[O] = Message(data.message)
        self.index: int = data.index
        self.usage: GenerationUsage = dict(data.usage or {})
        self.finish_reason: FinishReason | None = data.finish_reason
        self.finish_message: str = data.finish_message or ""
        self.custom: Any = data.custom

    def output(self) -> O | None:
        """Structured output of the candidate's message."""
        return self.message.output()

    def text(self) -> str:
        """Text of the candidate's message."""
        return self.message.text()

    def media(self) -> Media | None:
        return self.message.media()

    def tool_requests(self) -> list[ToolRequest]:
        return self.message.tool_requests()

    def to_data(self) -> CandidateData:
        return CandidateData(
            message=self.message.to_data(),
            index=self.index,
            usage=dict(self.usage),
            finish_reason=self.finish_reason,
            finish_message=self.finish_message,
            custom=self.custom,
        )

    def __repr__(self) -> str:
        return (
            f"Candidate(index={self.index}, finish_reason={self.finish_reason!r}, "
            f"message={self.message!r})"
        )


class GenerationResponse[O]:
    """The result of ``generate``: candidates plus accounting.

    ``output()`` and ``text()`` read the first candidate; with no candidates
    they return ``None`` and ``""``.
    """

    __slots__ = ("candidates", "custom", "usage")

    def __init__(self, response: GenerationResponseData | Mapping[str, Any]) -> None:
        data = coerce_response_data(response)
        self.candidates: list[Candidate[O]] = [
            Candidate(c) for c in data.candidates or ()
        ]
        self.usage: GenerationUsage = dict(data.usage or {})
        self.custom: Any = data.custom if data.custom is not None else {}

    def output(self) -> O | None:
        """Structured output of the first candidate, or ``None``."""
        if not self.candidates:
            return None
        return self.candidates[0].output()

    def text(self) -> str:
        """Text of the first candidate, or ``""``."""
        if not self.candidates:
            return ""
        return self.candidates[0].text()

    def media(self) -> Media | None:
        """First media reference of the first candidate, or ``None``."""
        if not self.candidates:
            return None
        return self.candidates[0].media()

    def tool_requests(self) -> list[ToolRequest]:
        if not self.candidates:
            return []
        return self.candidates[0].tool_requests()

    def to_data(self) -> GenerationResponseData:
        return GenerationResponseData(
            candidates=[c.to_data() for c in self.candidates],
            usage=dict(self.usage),
            custom=self.custom,
        )

    def __repr__(self) -> str:
        return (
            f"GenerationResponse(candidates={len(self.candidates)}, "
            f"usage={self.usage!r})"
        )
