"""Tolerant extraction of JSON values embedded in model text."""

from __future__ import annotations

import json
import re
from typing import Any

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)
_OPENER = re.compile(r"[\[{]")
_OPENER_RUN = re.compile(r"[\[{\s]+")
_DECODER = json.JSONDecoder()

# Nesting deeper than the interpreter's recursion limit surfaces as
# RecursionError from the C scanner rather than as a ValueError.
_PARSE_ERRORS = (ValueError, RecursionError)


def extract_json(text: str) -> Any | None:
    """Return the first well-formed JSON value found in *text*.

    Tries a strict parse of the whole text first. Otherwise the value that
    starts earliest wins: either one decoded from a ``{`` or ``[`` position,
    or the body of a fenced code block (which may hold a scalar). Surrounding
    prose is ignored. Returns ``None`` when nothing parses; never raises.
    """
    if not text or not text.strip():
        return None

    try:
        return json.loads(text.strip())
    except _PARSE_ERRORS:
        pass

    fenced = _first_fenced_value(text)
    limit = fenced[0] if fenced is not None else len(text)
    found, value = _first_embedded_value(text, limit)
    if found:
        return value
    return fenced[1] if fenced is not None else None


def _first_fenced_value(text: str) -> tuple[int, Any] | None:
    for match in _FENCED_BLOCK.finditer(text):
        try:
            return match.start(), json.loads(match.group(1))
        except _PARSE_ERRORS:
            continue
    return None


def _first_embedded_value(text: str, limit: int) -> tuple[bool, Any]:
    """Decode from each ``{``/``[`` before *limit*, in order."""
    pos = 0
    while (match := _OPENER.search(text, pos, limit)) is not None:
        idx = match.start()
        try:
            value, _end = _DECODER.raw_decode(text, idx)
        except RecursionError:
            # Skip the rest of this run of openers.
            run = _OPENER_RUN.match(text, idx)
            pos = run.end() if run is not None else idx + 1
            continue
        except ValueError:
            pos = idx + 1
            continue
        return True, value
    return False, None
