"""Unicode to printer code page translation.

The printer runs in WPC1252 (see ``config.CODEPAGE_ID``), a single byte
Western European code page. Text is cleaned while it is still Unicode
(pictographs removed, typographic punctuation folded to ASCII) and only then
mapped to bytes, one byte per character.
"""

from __future__ import annotations

import re

# German letters are the ones the tickets actually carry; their WPC1252
# positions are listed explicitly so the mapping does not depend on a codec.
CODEPAGE_MAP: dict[str, int] = {
    "ä": 0xE4,
    "ö": 0xF6,
    "ü": 0xFC,
    "Ä": 0xC4,
    "Ö": 0xD6,
    "Ü": 0xDC,
    "ß": 0xDF,
}

PICTOGRAPHIC_RANGES: tuple[tuple[int, int], ...] = (
    (0x1F300, 0x1F9FF),  # pictographs, emoticons, transport, supplemental
    (0x2600, 0x26FF),  # misc symbols
    (0x2700, 0x27BF),  # dingbats
    (0xFE00, 0xFE0F),  # variation selectors
    (0x1F000, 0x1F02F),  # mahjong
    (0x1F0A0, 0x1F0FF),  # playing cards
    (0x200D, 0x200D),  # zero width joiner
    (0xE0000, 0xE007F),  # tags
)

_PICTOGRAPHIC_RE = re.compile(
    "[" + "".join(f"{chr(lo)}-{chr(hi)}" for lo, hi in PICTOGRAPHIC_RANGES) + "]"
)
_WHITESPACE_RE = re.compile(r"\s+")

_PUNCTUATION = str.maketrans(
    {
        "–": "-",
        "—": "-",
        "―": "-",
        "‘": "'",
        "’": "'",
        "“": '"',
        "”": '"',
    }
)


def translate(text: str) -> bytes:
    """Map text to code page bytes; unmapped characters keep their low byte."""
    return bytes(CODEPAGE_MAP.get(ch, ord(ch) & 0xFF) for ch in text)


def strip_pictographic(text: str) -> str:
    """Drop emoji and friends, then collapse whitespace runs and trim."""
    stripped = _PICTOGRAPHIC_RE.sub("", text)
    return _WHITESPACE_RE.sub(" ", stripped).strip()


def normalize_punctuation(text: str) -> str:
    """Fold dashes and curly quotes to their ASCII look-alikes."""
    return text.translate(_PUNCTUATION)
