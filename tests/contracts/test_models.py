from __future__ import annotations

import pytest

from castor.models import (
    CandidateData,
    GenerationConfig,
    GenerationRequest,
    GenerationResponseData,
    OutputConfig,
    ToolDefinition,
    coerce_response_data,
)
from castor.parts import MessageData, TextPart

pytestmark = pytest.mark.contract


def test_generation_config_omits_unset_fields() -> None:
    assert GenerationConfig().to_dict() == {}
    assert GenerationConfig(temperature=0.0, custom={"seed": 7}).to_dict() == {
        "temperature": 0.0,
        "custom": {"seed": 7},
    }


def test_generation_config_uses_camel_case_keys() -> None:
    config = GenerationConfig(
        max_output_tokens=256, top_k=40, top_p=0.9, stop_sequences=("END",)
    )

    assert config.to_dict() == {
        "maxOutputTokens": 256,
        "topK": 40,
        "topP": 0.9,
        "stopSequences": ["END"],
    }


def test_tool_definition_wire_shape() -> None:
    tool = ToolDefinition(
        name="weather",
        input_schema={"type": "string"},
        description="Look up the weather",
    )

    assert tool.to_dict() == {
        "name": "weather",
        "inputSchema": {"type": "string"},
        "outputSchema": {},
        "description": "Look up the weather",
    }


def test_output_config_omits_absent_schema() -> None:
    assert OutputConfig().to_dict() == {"format": "text"}
    assert OutputConfig(format="json", schema={"type": "object"}).to_dict() == {
        "format": "json",
        "schema": {"type": "object"},
    }


def test_generation_request_wire_shape_omits_unset_optionals() -> None:
    request = GenerationRequest(
        messages=[MessageData(role="user", content=[TextPart("hi")])]
    )

    assert request.to_dict() == {
        "messages": [{"role": "user", "content": [{"text": "hi"}]}],
        "tools": [],
        "output": {"format": "text"},
    }
    assert request.prompt_message.content == [TextPart("hi")]


def test_generation_request_wire_shape_includes_candidates_and_config() -> None:
    request = GenerationRequest(
        messages=[MessageData(role="user")],
        candidates=2,
        config=GenerationConfig(temperature=0.5),
    )

    wire = request.to_dict()

    assert wire["candidates"] == 2
    assert wire["config"] == {"temperature": 0.5}


def test_candidate_from_dict_reads_camel_case_fields() -> None:
    candidate = CandidateData.from_dict(
        {
            "index": 3,
            "message": {"role": "model", "content": []},
            "finishReason": "length",
            "finishMessage": "truncated",
            "usage": {"outputTokens": 9},
            "custom": {"raw": True},
        }
    )

    assert candidate.index == 3
    assert candidate.finish_reason == "length"
    assert candidate.finish_message == "truncated"
    assert candidate.usage == {"outputTokens": 9}
    assert candidate.custom == {"raw": True}


def test_candidate_without_index_takes_its_position() -> None:
    data = GenerationResponseData.from_dict(
        {
            "candidates": [
                {"message": {"role": "model", "content": []}},
                {"message": {"role": "model", "content": []}},
            ]
        }
    )

    assert [c.index for c in data.candidates or ()] == [0, 1]


def test_candidate_without_message_is_rejected() -> None:
    with pytest.raises(ValueError, match="no message"):
        CandidateData.from_dict({"index": 0})


def test_response_data_keeps_absent_candidates_absent() -> None:
    data = GenerationResponseData.from_dict({"usage": {"totalTokens": 1}})

    assert data.candidates is None
    assert data.usage == {"totalTokens": 1}


def test_coerce_response_data_passes_dataclasses_through() -> None:
    data = GenerationResponseData(candidates=[])
    assert coerce_response_data(data) is data


def test_coerce_response_data_rejects_non_mappings() -> None:
    with pytest.raises(TypeError, match="response mapping"):
        coerce_response_data("oops")  # type: ignore[arg-type]
