"""Small guards shared by the data-model constructors."""

from __future__ import annotations


def _require(
    *,
    condition: bool,
    message: str,
    exc: type[Exception] = ValueError,
    field_name: str | None = None,
) -> None:
    """Raise *exc* with an optional field prefix when *condition* is false."""
    if not condition:
        if field_name:
            raise exc(f"{field_name}: {message}")
        raise exc(message)


def _require_str(value: object, field_name: str, *, optional: bool = False) -> None:
    """Type-check a scalar string field."""
    _require(
        condition=isinstance(value, str) or (optional and value is None),
        message="must be a str or None" if optional else "must be a str",
        exc=TypeError,
        field_name=field_name,
    )
