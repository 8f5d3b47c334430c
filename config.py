"""Configuration module - loads settings from .env file."""

import logging
import os

from dotenv import load_dotenv

# Must load .env before reading any variables; the printer address is
# usually passed per call, so a missing file only means defaults.
load_dotenv()

logger = logging.getLogger(__name__)


def _parse_bool(value: str | None) -> bool:
    """Parse string to bool; default False for missing/invalid."""
    if not value:
        return False
    return value.strip().lower() in ("true", "1", "yes", "on")


def _parse_int(key: str, default: int) -> int:
    """Read an integer env var; log warning and fall back on garbage."""
    raw = os.getenv(key, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid integer for %s in .env: %r (using %d)", key, raw, default)
        return default


# Printer target (callers may override per print)
PRINTER_HOST: str = os.getenv("PRINTER_IP", "").strip()
PRINTER_PORT: int = _parse_int("PRINTER_PORT", 9100)

# Socket timeouts in milliseconds
PRINT_TIMEOUT_MS: int = _parse_int("PRINT_TIMEOUT_MS", 4000)
PROBE_TIMEOUT_MS: int = _parse_int("PROBE_TIMEOUT_MS", 1500)

# Log payloads instead of opening a socket
MOCK_PRINTER: bool = _parse_bool(os.getenv("MOCK_PRINTER", "false"))

# ESC t <n>: 16 == WPC1252 (Western European)
CODEPAGE_ID: int = 16

# Characters per line in Font A: 32 for 58mm paper, 48 for 80mm
PAPER_WIDTH: int = 32

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").strip().upper()
LOG_FILE: str = os.getenv("LOG_FILE", "logs/app.log").strip()
