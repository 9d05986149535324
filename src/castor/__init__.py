"""Castor: provider-agnostic generation orchestration.

Public API:
    - generate(): Build a request, invoke a model backend, wrap the response
    - GenerationResponse / Candidate / Message: Read-only response views
    - define_model() / Registry: Register backends under ``models/<name>``
    - action(): Describe tool functions with input/output schemas
    - OutputSpec: Request text or schema-validated JSON output
"""

from __future__ import annotations

import logging

from castor.actions import Action, action
from castor.backend import ModelAction, ModelInfo, ModelSupports, model_action
from castor.config import Settings
from castor.errors import (
    CastorError,
    ConfigurationError,
    OutputValidationError,
    ResolutionError,
)
from castor.extract import extract_json
from castor.generate import generate, generate_from_spec, resolve_model
from castor.models import (
    CandidateData,
    GenerationConfig,
    GenerationRequest,
    GenerationResponseData,
    OutputConfig,
    ToolDefinition,
)
from castor.parts import (
    DataPart,
    Media,
    MediaPart,
    MessageData,
    TextPart,
    ToolRequest,
    ToolRequestPart,
    ToolResponse,
    ToolResponsePart,
)
from castor.registry import Registry, default_registry, define_model
from castor.request import (
    ByName,
    Direct,
    OutputSpec,
    PromptSpec,
    to_generation_request,
)
from castor.response import Candidate, GenerationResponse, Message
from castor.tools import to_tool_definition

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("castor-ai")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("castor").addHandler(logging.NullHandler())

__all__ = [
    "Action",
    "ByName",
    "Candidate",
    "CandidateData",
    "CastorError",
    "ConfigurationError",
    "DataPart",
    "Direct",
    "GenerationConfig",
    "GenerationRequest",
    "GenerationResponse",
    "GenerationResponseData",
    "Media",
    "MediaPart",
    "Message",
    "MessageData",
    "ModelAction",
    "ModelInfo",
    "ModelSupports",
    "OutputConfig",
    "OutputSpec",
    "OutputValidationError",
    "PromptSpec",
    "Registry",
    "ResolutionError",
    "Settings",
    "TextPart",
    "ToolDefinition",
    "ToolRequest",
    "ToolRequestPart",
    "ToolResponse",
    "ToolResponsePart",
    "action",
    "default_registry",
    "define_model",
    "extract_json",
    "generate",
    "generate_from_spec",
    "model_action",
    "resolve_model",
    "to_generation_request",
    "to_tool_definition",
]
