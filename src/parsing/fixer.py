"""Grammar fixer: rewrite JSON-ish text into strict JSON.

One left-to-right scan. String literals and comments are recognised first,
so the rewrite rules below only ever see structural text:

- unquoted object keys are double-quoted
- single-quoted strings become double-quoted strings
- bare True / False / None in value position become true / false / null
- trailing commas before } or ] are dropped
- // and /* */ comments are dropped
- raw control characters inside string literals are escaped

The fixer never fails. Anything it cannot make sense of (an unterminated
string or block comment, an unknown bare word) is copied through and left
for the strict parser to reject.
"""

from __future__ import annotations

import string

_IDENT_START = frozenset(string.ascii_letters + "_$")
_IDENT_CHARS = _IDENT_START | frozenset(string.digits)
_WHITESPACE = frozenset(" \t\r\n")

_PY_LITERALS = {"True": "true", "False": "false", "None": "null"}

# Last structural character that puts the next token in key / value position.
# "" means start of input. Keys are only quoted after "{" or ",": candidates
# always begin at a bracket, so a bare top-level `a: 1` is left as is.
_KEY_CONTEXT = ("{", ",")
_VALUE_CONTEXT = ("", ":", "[", ",")

_CONTROL_ESCAPES = {"\n": "\\n", "\r": "\\r", "\t": "\\t", "\b": "\\b", "\f": "\\f"}


def _scan_string(text: str, start: int) -> int:
    """Return the index just past the closing quote, or -1 if unterminated."""
    quote = text[start]
    i = start + 1
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        i += 1
    return -1


def _skip_trivia(text: str, i: int) -> int:
    """Skip whitespace and complete comments, returning the next significant index."""
    n = len(text)
    while i < n:
        if text[i] in _WHITESPACE:
            i += 1
        elif text.startswith("//", i):
            newline = text.find("\n", i)
            i = n if newline == -1 else newline + 1
        elif text.startswith("/*", i):
            close = text.find("*/", i + 2)
            if close == -1:
                return i
            i = close + 2
        else:
            break
    return i


def _requote(body: str, quote: str) -> str:
    """Render a string literal body (without its quotes) as a JSON string."""
    out = ['"']
    i = 0
    n = len(body)
    while i < n:
        ch = body[i]
        if ch == "\\" and i + 1 < n:
            nxt = body[i + 1]
            if nxt == "'":
                out.append("'")
            elif nxt < " ":
                # Backslash before a raw control char: keep both as characters.
                out.append("\\\\" + (_CONTROL_ESCAPES.get(nxt) or f"\\u{ord(nxt):04x}"))
            else:
                out.append(ch + nxt)
            i += 2
            continue
        if ch == '"' and quote == "'":
            out.append('\\"')
        elif ch < " ":
            out.append(_CONTROL_ESCAPES.get(ch) or f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
        i += 1
    out.append('"')
    return "".join(out)


def attempt_fix(text: str) -> str:
    """Best-effort rewrite of `text` into strict JSON. Never raises."""
    out: list[str] = []
    last = ""
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]

        if ch == '"' or ch == "'":
            end = _scan_string(text, i)
            if end == -1:
                out.append(text[i:])
                break
            out.append(_requote(text[i + 1:end - 1], ch))
            last = '"'
            i = end
            continue

        if text.startswith("//", i):
            newline = text.find("\n", i)
            if newline == -1:
                break
            i = newline
            continue

        if text.startswith("/*", i):
            close = text.find("*/", i + 2)
            if close == -1:
                out.append(text[i:])
                break
            out.append(" ")
            i = close + 2
            continue

        if ch == ",":
            nxt = _skip_trivia(text, i + 1)
            if nxt < n and text[nxt] in "}]":
                i += 1
                continue
            out.append(ch)
            last = ch
            i += 1
            continue

        if ch in _IDENT_CHARS:
            j = i + 1
            while j < n and text[j] in _IDENT_CHARS:
                j += 1
            word = text[i:j]
            if ch in _IDENT_START:
                nxt = _skip_trivia(text, j)
                if last in _KEY_CONTEXT and nxt < n and text[nxt] == ":":
                    out.append(f'"{word}"')
                    last = '"'
                    i = j
                    continue
                if word in _PY_LITERALS and last in _VALUE_CONTEXT:
                    word = _PY_LITERALS[word]
            out.append(word)
            last = word[-1]
            i = j
            continue

        out.append(ch)
        if ch not in _WHITESPACE:
            last = ch
        i += 1

    return "".join(out)
