"""Strict RFC 8259 parsing.

Every other strategy funnels into this module. There is no leniency here:
anything that is not standard JSON raises json.JSONDecodeError.
"""

from __future__ import annotations

import json
from typing import Any

_WHITESPACE = " \t\n\r"


def _reject_constant(name: str) -> Any:
    # json accepts NaN / Infinity / -Infinity by default; RFC 8259 does not.
    raise ValueError(f"non-standard constant {name!r}")


_DECODER = json.JSONDecoder(parse_constant=_reject_constant)


def parse_strict_prefix(text: str) -> tuple[Any, int]:
    """Decode one JSON value at the start of `text`.

    Leading JSON whitespace is skipped. Returns (value, end) where `end` is
    the index just past the value; whatever follows is left for the caller.
    """
    start = len(text) - len(text.lstrip(_WHITESPACE))
    try:
        return _DECODER.raw_decode(text, start)
    except json.JSONDecodeError:
        raise
    except (ValueError, RecursionError) as e:
        raise json.JSONDecodeError(str(e) or "nesting too deep", text, start) from e


def parse_strict(text: str) -> Any:
    """Parse `text` as exactly one JSON value surrounded by optional whitespace."""
    value, end = parse_strict_prefix(text)
    if text[end:].strip(_WHITESPACE):
        raise json.JSONDecodeError("Extra data", text, end)
    return value
