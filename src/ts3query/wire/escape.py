"""ServerQuery escape codec.

Every reserved character is sent as a two-character sequence starting with
a backslash. ``unescape`` scans left to right and consumes pairs atomically,
so ``unescape(escape(x)) == x`` for every string, and sequences it does not
recognise are passed through untouched.

Usage:
    from ts3query.wire.escape import escape, unescape

    escape("Server #1")          # 'Server\\s#1'
    unescape("Server\\s#1")      # 'Server #1'
"""

from __future__ import annotations

from typing import Final


ESCAPE_CHAR: Final = "\\"

# char -> escape letter
_ESCAPES: Final[dict[str, str]] = {
    "\\": "\\",
    "/": "/",
    " ": "s",
    "|": "p",
    "\a": "a",
    "\b": "b",
    "\f": "f",
    "\n": "n",
    "\r": "r",
    "\t": "t",
    "\v": "v",
}

_UNESCAPES: Final[dict[str, str]] = {letter: char for char, letter in _ESCAPES.items()}

RESERVED_CHARS: Final = frozenset(_ESCAPES)


def escape(raw: str) -> str:
    """Escape every reserved character in ``raw``."""
    if not any(ch in RESERVED_CHARS for ch in raw):
        return raw
    return "".join(
        ESCAPE_CHAR + _ESCAPES[ch] if ch in _ESCAPES else ch
        for ch in raw
    )


def unescape(text: str) -> str:
    """Reverse :func:`escape`.

    Unknown pairs such as ``\\x`` and a trailing lone backslash are kept
    verbatim.
    """
    if ESCAPE_CHAR not in text:
        return text

    out: list[str] = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == ESCAPE_CHAR and i + 1 < n:
            letter = text[i + 1]
            out.append(_UNESCAPES.get(letter, ch + letter))
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)
