"""Find balanced {...} / [...] blocks embedded in free text."""

from __future__ import annotations

from collections.abc import Iterator

_OPENERS = {"{": "}", "[": "]"}
_CLOSERS = {"}": "{", "]": "["}

# A quote only starts a string literal right after one of these.
_STRING_CONTEXT = frozenset("{[,:")


def _closed_spans(text: str) -> list[tuple[int, int]]:
    """All spans where a bracket family returns to depth zero, in closing order."""
    depth = {"{": 0, "[": 0}
    opened_at = {"{": -1, "[": -1}
    spans = []
    quote = ""
    escaped = False
    last = ""

    for i, ch in enumerate(text):
        if quote:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                quote = ""
                last = ch
            continue

        if ch in _OPENERS:
            if depth[ch] == 0:
                opened_at[ch] = i
            depth[ch] += 1
        elif ch in _CLOSERS:
            opener = _CLOSERS[ch]
            if depth[opener] > 0:
                depth[opener] -= 1
                if depth[opener] == 0:
                    spans.append((opened_at[opener], i + 1))
        elif ch in "\"'" and last in _STRING_CONTEXT and (depth["{"] or depth["["]):
            quote = ch
            continue

        if not ch.isspace():
            last = ch

    return spans


def find_balanced_blocks(text: str) -> Iterator[tuple[int, int]]:
    """Yield (start, end) spans of balanced blocks, left to right by start.

    `end` is exclusive. Curly and square depths are counted separately; a
    span is produced each time one family returns to zero, so an opener that
    never closes does not hide later blocks. Spans lying inside an earlier
    span are dropped, leaving the outermost block only.

    Inside an open block, a quote following `{`, `[`, `,` or `:` starts a
    string literal (backslash escapes honoured) whose brackets never count.
    Elsewhere quotes are prose: the apostrophe in "Here's" opens nothing.

    A block still open at end of text is never yielded.
    """
    outer_end = -1
    for start, end in sorted(_closed_spans(text), key=lambda s: (s[0], -s[1])):
        if end <= outer_end:
            continue
        outer_end = end
        yield start, end


def extract_candidates(
    text: str,
    max_blocks: int,
    prefer_first: bool = True,
) -> list[tuple[int, int]]:
    """Pick at most `max_blocks` candidate spans in the order they should be tried.

    prefer_first=True keeps discovery order. Otherwise spans are ordered by
    descending length, ties in discovery order.
    """
    limit = max(1, max_blocks)
    if prefer_first:
        spans = []
        for span in find_balanced_blocks(text):
            spans.append(span)
            if len(spans) == limit:
                break
        return spans

    spans = list(find_balanced_blocks(text))
    spans.sort(key=lambda s: s[0] - s[1])  # stable: ties keep discovery order
    return spans[:limit]
