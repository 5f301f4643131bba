"""Recovery pipeline: normalize → direct → fixed → extracted → extracted+fixed.

Single entry point for turning an agent reply into a JSON value. The order
of attempts is an explicit plan (see plan_attempts) walked by one loop that
stops at the first success. recover() never raises; callers check
RecoveryResult.succeeded.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from typing import NamedTuple

from src.config import MAX_INPUT_CHARS
from src.models.recovery import ParseOptions, RecoveredValue, RecoveryResult, Strategy

from .extractor import extract_candidates
from .fixer import attempt_fix
from .normalizer import normalize
from .strict import parse_strict_prefix
from .unwrap import unwrap

logger = logging.getLogger(__name__)

_EXTRACTED = (Strategy.EXTRACTED, Strategy.EXTRACTED_FIXED)


class Attempt(NamedTuple):
    """One step of the pipeline: parse text[start:end], optionally fixed first."""
    strategy: Strategy
    start: int
    end: int
    fix: bool


def plan_attempts(text: str, options: ParseOptions) -> Iterator[Attempt]:
    """Yield the attempts for normalized `text` in the order they are tried.

    Candidate blocks are only searched for once the whole-text attempts
    have been consumed.
    """
    yield Attempt(Strategy.DIRECT, 0, len(text), False)
    if options.attempt_fix:
        yield Attempt(Strategy.FIXED, 0, len(text), True)

    for start, end in extract_candidates(text, options.max_blocks, options.prefer_first):
        yield Attempt(Strategy.EXTRACTED, start, end, False)
        if options.attempt_fix:
            yield Attempt(Strategy.EXTRACTED_FIXED, start, end, True)


def _run_attempt(text: str, attempt: Attempt, options: ParseOptions) -> RecoveredValue | None:
    """Try a single attempt. Returns None when it does not produce an acceptable value."""
    segment = text[attempt.start:attempt.end]
    source = attempt_fix(segment) if attempt.fix else segment

    try:
        data, end = parse_strict_prefix(source)
    except json.JSONDecodeError as e:
        logger.debug("%s attempt at %d:%d failed: %s",
                     attempt.strategy.value, attempt.start, attempt.end, e.msg)
        return None

    # Rewriting or cutting text can turn prose into a bare scalar; only
    # structures count as recovered there.
    if attempt.strategy is not Strategy.DIRECT and not isinstance(data, (dict, list)):
        logger.debug("%s attempt produced a scalar, ignoring", attempt.strategy.value)
        return None

    tail = source[end:]
    trailing = tail + text[attempt.end:] if attempt.strategy in _EXTRACTED else tail
    # Partial acceptance covers objects and arrays only: a scalar followed by
    # text is the start of a sentence ("3 ideas below: {...}").
    partial_ok = options.allow_partial and isinstance(data, (dict, list))
    if trailing.strip() and not partial_ok:
        logger.debug("%s attempt rejected: %d chars of trailing text",
                     attempt.strategy.value, len(trailing.strip()))
        return None

    begin = len(source) - len(source.lstrip())
    if attempt.fix:
        # Offsets in rewritten text do not map back, except for an untouched tail.
        span_end = attempt.end - len(tail) if segment.endswith(tail) else attempt.end
        span = (attempt.start, span_end)
    else:
        span = (attempt.start + begin, attempt.start + end)

    return RecoveredValue(
        data=data,
        strategy=attempt.strategy,
        consumed=source[begin:end],
        span=span,
    )


def recover(raw_text: str, options: ParseOptions | None = None) -> RecoveryResult:
    """Recover a JSON value from free-form agent output.

    Args:
        raw_text: The untouched reply text. Bytes are decoded as UTF-8.
        options: ParseOptions; defaults are used when omitted.

    Returns:
        RecoveryResult. On failure `succeeded` is False, `value` is None and
        `original_text` still holds the input so it can be shown as plain text.
    """
    options = options or ParseOptions()
    if isinstance(raw_text, bytes):
        raw_text = raw_text.decode("utf-8", errors="replace")
    original = raw_text if isinstance(raw_text, str) else ""

    if len(original) > MAX_INPUT_CHARS:
        logger.warning("Input of %d chars exceeds limit of %d, not parsing",
                       len(original), MAX_INPUT_CHARS)
        return RecoveryResult(original_text=original)

    text = normalize(original)
    if not text:
        return RecoveryResult(original_text=original)

    for attempt in plan_attempts(text, options):
        value = _run_attempt(text, attempt, options)
        if value is None:
            continue

        logger.info("Recovered JSON via %s strategy", value.strategy.value)
        if options.unwrap_depth:
            value = value.model_copy(update={"data": unwrap(value.data, options.unwrap_depth)})
        return RecoveryResult(
            value=value,
            succeeded=True,
            strategy_used=value.strategy,
            original_text=original,
        )

    logger.debug("All strategies failed for %d chars of text", len(text))
    return RecoveryResult(original_text=original)
