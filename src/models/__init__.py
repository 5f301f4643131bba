from .recovery import (
    ParseOptions,
    RecoveredValue,
    RecoveryResult,
    Strategy,
)

__all__ = [
    "ParseOptions",
    "RecoveredValue",
    "RecoveryResult",
    "Strategy",
]
