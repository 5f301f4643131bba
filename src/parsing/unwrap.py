"""Resolve JSON documents that were serialized into string values."""

from __future__ import annotations

import logging
from typing import Any

from .normalizer import normalize

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 3


def _reparse(text: str) -> Any | None:
    """Return the object/array `text` encodes as a whole, or None."""
    if normalize(text)[:1] not in ("{", "["):
        return None

    from src.models.recovery import ParseOptions, Strategy
    from .orchestrator import recover

    result = recover(text, ParseOptions(unwrap_depth=0))
    if not result.succeeded or result.strategy_used not in (Strategy.DIRECT, Strategy.FIXED):
        return None
    if not isinstance(result.data, (dict, list)):
        return None
    return result.data


def _walk(value: Any, max_depth: int) -> Any:
    if isinstance(value, str):
        nested = _reparse(value)
        if nested is None:
            return value
        return _walk(nested, max_depth - 1) if max_depth > 1 else nested
    if isinstance(value, dict):
        return {k: _walk(v, max_depth) for k, v in value.items()}
    if isinstance(value, list):
        return [_walk(v, max_depth) for v in value]
    return value


def unwrap(value: Any, max_depth: int = DEFAULT_MAX_DEPTH) -> Any:
    """Replace double-encoded JSON strings with the structures they encode.

    Objects and arrays are walked and rebuilt; the input is not modified.
    Each string re-parse uses one level of `max_depth`, so self-similar
    strings stop after at most `max_depth` rounds. Strings that do not
    re-parse are returned unchanged.

    A structure nested too deeply to walk is returned as it was given.
    """
    if max_depth <= 0:
        return value
    try:
        return _walk(value, max_depth)
    except RecursionError:
        logger.warning("Value nested too deeply to unwrap, keeping it as parsed")
        return value
