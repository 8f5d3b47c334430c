"""ESC/POS command bytes for the ticket builders.

Every function returns a fresh ``bytes`` object and never raises; numeric
arguments are clamped to the range the printer accepts.
"""

from __future__ import annotations

from escpos.constants import CODEPAGE_CHANGE, CTL_LF, ESC, GS, HW_INIT

import config

_ALIGN = {"left": 0, "center": 1, "right": 2}

# GS ( k <pL> <pH> cn=49 ... : 2D symbol functions for QR Code
_QR_FUNC = GS + b"(k"
_QR_ECC_M = _QR_FUNC + b"\x03\x00\x31\x45\x30"
_QR_PRINT = _QR_FUNC + b"\x03\x00\x31\x51\x30"

QR_FALLBACK_DATA = "NA"


def _clamp(value: int, low: int, high: int) -> int:
    return min(high, max(low, int(value)))


def init(codepage: int = config.CODEPAGE_ID) -> bytes:
    """ESC @ (reset) followed by ESC t <n> (select code page)."""
    return HW_INIT + CODEPAGE_CHANGE + bytes((codepage,))


def align(mode: str) -> bytes:
    """ESC a <n>; anything that is not center/right aligns left."""
    return ESC + b"a" + bytes((_ALIGN.get(mode, 0),))


def text_size(width: int, height: int) -> bytes:
    """GS ! <n>: width multiplier in the high nibble, height in the low."""
    w = _clamp(width, 1, 8) - 1
    h = _clamp(height, 1, 8) - 1
    return GS + b"!" + bytes(((w << 4) | h,))


def emphasis(on: bool) -> bytes:
    return ESC + b"E" + (b"\x01" if on else b"\x00")


def inverse(on: bool) -> bytes:
    return GS + b"B" + (b"\x01" if on else b"\x00")


def feed(lines: int = 1) -> bytes:
    """ESC d <n>: print buffer and feed n lines."""
    return ESC + b"d" + bytes((_clamp(lines, 0, 255),))


def cut() -> bytes:
    """GS V 66 0: feed to the cutter and do a full cut."""
    return GS + b"VB\x00"


def hr(char: str = "-", length: int = config.PAPER_WIDTH) -> bytes:
    """A plain text rule, not a device command."""
    return (char * length).encode("latin-1", errors="replace") + CTL_LF


def trailer() -> bytes:
    """Fixed end of every ticket: advance past the cutter, then cut."""
    return feed(3) + cut()


def qr_code(data: str, size: int = 6) -> bytes:
    """Native QR: error level M, module size, store data, print symbol."""
    payload = (str(data or "") or QR_FALLBACK_DATA).encode("latin-1", errors="replace")
    stored = len(payload) + 3
    set_size = _QR_FUNC + b"\x03\x00\x31\x43" + bytes((_clamp(size, 1, 16),))
    store = (
        _QR_FUNC
        + bytes((stored & 0xFF, (stored >> 8) & 0xFF))
        + b"\x31\x50\x30"
        + payload
    )
    return _QR_ECC_M + set_size + store + _QR_PRINT
