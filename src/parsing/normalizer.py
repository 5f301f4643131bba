"""Lexical clean-up applied before any structural parsing."""

from __future__ import annotations

import re

_BOM = "\ufeff"

# Fences are only stripped at the very start / end of the blob.
_LEADING_FENCE_RE = re.compile(r"\A\s*```(?:json)?[ \t]*\r?\n?", re.IGNORECASE)
_TRAILING_FENCE_RE = re.compile(r"\r?\n?```\s*\Z")

# Authors sometimes emit the two characters "\" "n" where a newline was meant.
# Applied to the whole blob, including string literals: a value that really
# wanted a literal backslash-n comes out with a control character instead.
_LITERAL_ESCAPES = (("\\n", "\n"), ("\\r", "\r"), ("\\t", "\t"))


def normalize(text: str) -> str:
    """Strip BOM, expand literal escapes, drop markdown fences and trim.

    Never fails; non-string input is treated as empty text.
    """
    if not isinstance(text, str):
        return ""

    if text.startswith(_BOM):
        text = text[len(_BOM):]

    for literal, real in _LITERAL_ESCAPES:
        text = text.replace(literal, real)

    text = _LEADING_FENCE_RE.sub("", text, count=1)
    text = _TRAILING_FENCE_RE.sub("", text, count=1)
    return text.strip()
