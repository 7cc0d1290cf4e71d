"""Map Latin letters and digits onto Unicode Mathematical Alphanumeric glyphs.

LinkedIn has no rich-text markup, so emphasis is faked with code points that
render as bold, italic or monospace letters. Every mapping is one code point
to one code point, so encoded text keeps its length.
"""

from __future__ import annotations

import string
from enum import StrEnum


class TextStyle(StrEnum):
    BOLD = "bold"
    ITALIC = "italic"
    MONOSPACE = "monospace"


# First code point of each contiguous block (A-Z, a-z, 0-9).
_STYLE_OFFSETS: dict[TextStyle, tuple[int, int, int | None]] = {
    TextStyle.BOLD: (0x1D5D4, 0x1D5EE, 0x1D7EC),  # sans-serif bold
    TextStyle.ITALIC: (0x1D608, 0x1D622, None),  # sans-serif italic, no digits
    TextStyle.MONOSPACE: (0x1D670, 0x1D68A, 0x1D7F6),
}


def _build_table(upper: int, lower: int, digits: int | None) -> dict[int, str]:
    table: dict[int, str] = {}
    for i, ch in enumerate(string.ascii_uppercase):
        table[ord(ch)] = chr(upper + i)
    for i, ch in enumerate(string.ascii_lowercase):
        table[ord(ch)] = chr(lower + i)
    if digits is not None:
        for i, ch in enumerate(string.digits):
            table[ord(ch)] = chr(digits + i)
    return table


_TABLES: dict[TextStyle, dict[int, str]] = {
    style: _build_table(*offsets) for style, offsets in _STYLE_OFFSETS.items()
}


def encode(style: TextStyle | str, text: str) -> str:
    """Replace mapped characters in ``text`` with glyphs of ``style``."""
    return text.translate(_TABLES[TextStyle(style)])


def to_bold(text: str) -> str:
    return encode(TextStyle.BOLD, text)


def to_italic(text: str) -> str:
    return encode(TextStyle.ITALIC, text)


def to_mono(text: str) -> str:
    return encode(TextStyle.MONOSPACE, text)
