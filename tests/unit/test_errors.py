from __future__ import annotations

import pytest

from castor.errors import (
    CastorError,
    ConfigurationError,
    OutputValidationError,
    ResolutionError,
)

pytestmark = pytest.mark.unit


def test_hint_is_optional() -> None:
    err = CastorError("boom")
    assert str(err) == "boom"
    assert err.hint is None


def test_resolution_error_names_the_key() -> None:
    err = ResolutionError("models/missing", hint="define it")

    assert str(err) == "No action registered under 'models/missing'"
    assert err.key == "models/missing"
    assert err.hint == "define it"


def test_output_validation_error_carries_details() -> None:
    err = OutputValidationError(
        "data did not match expected schema",
        errors=("age: '30' is not of type 'integer'",),
        value={"age": "30"},
    )

    assert err.errors == ("age: '30' is not of type 'integer'",)
    assert err.value == {"age": "30"}
    assert OutputValidationError("x").errors == ()


def test_subclass_hierarchy() -> None:
    """Resolution failures are configuration errors; all are CastorErrors."""
    assert issubclass(ResolutionError, ConfigurationError)
    assert issubclass(ConfigurationError, CastorError)
    assert issubclass(OutputValidationError, CastorError)
    assert not issubclass(OutputValidationError, ConfigurationError)
