"""Models for the JSON recovery pipeline.

ParseOptions → recover() → RecoveryResult (wrapping a RecoveredValue).

The recovered data itself stays a plain JSON value (dict, list, str, int,
float, bool or None); these models only carry it together with provenance.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, field_validator


class Strategy(str, Enum):
    """Which pipeline attempt produced the value."""
    DIRECT = "direct"
    FIXED = "fixed"
    EXTRACTED = "extracted"
    EXTRACTED_FIXED = "extracted+fixed"
    NONE = "none"


class ParseOptions(BaseModel, frozen=True):
    """Per-call configuration. Out-of-range numbers are clamped, never rejected."""
    attempt_fix: bool = True     # run the grammar fixer pass
    max_blocks: int = 5          # candidate blocks tried by the extractor
    prefer_first: bool = True    # True: leftmost wins; False: longest wins
    allow_partial: bool = False  # accept values followed by trailing text
    unwrap_depth: int = 3        # double-encoding unwrap levels, 0 disables

    @field_validator("max_blocks")
    @classmethod
    def _clamp_max_blocks(cls, v: int) -> int:
        return max(1, v)

    @field_validator("unwrap_depth")
    @classmethod
    def _clamp_unwrap_depth(cls, v: int) -> int:
        return max(0, v)


class RecoveredValue(BaseModel, frozen=True):
    """A successfully parsed value plus where it came from."""
    data: Any = None
    strategy: Strategy
    consumed: str = ""                 # exact text the strict parser consumed
    span: tuple[int, int] = (0, 0)     # offsets in the normalized text, end exclusive


class RecoveryResult(BaseModel, frozen=True):
    """Outcome of one recover() call.

    Callers must check `succeeded`; failure is never raised.
    """
    value: RecoveredValue | None = None
    succeeded: bool = False
    strategy_used: Strategy = Strategy.NONE
    original_text: str = ""

    @property
    def data(self) -> Any:
        return self.value.data if self.value is not None else None
