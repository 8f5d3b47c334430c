#!/usr/bin/env python3
"""Check a network receipt printer from the command line.

Usage examples (from project root, with venv activated):

  python printer_check.py ping
      → reports whether PRINTER_IP:PRINTER_PORT from .env accepts connections.

  python printer_check.py test --host 192.168.1.50
      → prints the single-task test ticket.

  python printer_check.py codepage
      → prints the upper half of the selected code page, to verify umlauts.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from escpos.constants import CTL_LF

import config
import printer
from codepage import translate
from commands import align, init, text_size, trailer
from errors import PrinterError

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """Rotating file log under logs/, plus warnings on stderr."""
    log_file = Path(config.LOG_FILE)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    console = logging.StreamHandler()
    console.setLevel(logging.WARNING)
    logging.basicConfig(
        handlers=[handler, console],
        level=getattr(logging, config.LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def codepage_table() -> bytes:
    """Ticket with bytes 0x80-0xFF laid out 16 per row."""
    parts = [init(), align("center"), text_size(2, 2), translate(f"Code page {config.CODEPAGE_ID}\n")]
    parts += [text_size(1, 1), align("left")]
    parts.append(translate("  " + "".join(f"{col:x}" for col in range(16)) + "\n"))
    for row in range(8, 16):
        line = bytearray(f"{row:x} ".encode("ascii"))
        line += bytes(row * 16 + col for col in range(16))
        parts.append(bytes(line) + CTL_LF)
    parts.append(translate("\nÄÖÜ äöü ß\n"))
    parts.append(trailer())
    return b"".join(parts)


async def run(command: str, host: str, port: int) -> int:
    logger.info("printer_check %s on %s:%s", command, host, port)
    if command == "ping":
        result = await printer.ping_printer(host, port)
        if result["reachable"]:
            print(f"{host}:{port} reachable")
            return 0
        print(f"{host}:{port} unreachable ({result['error']})")
        return 1

    try:
        if command == "test":
            await printer.print_test_page(host, port)
        else:
            await printer.send(host, port, codepage_table())
    except PrinterError as e:
        print(f"Print failed: {e}", file=sys.stderr)
        return 1
    print("Printed.")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Check the receipt printer")
    parser.add_argument("command", choices=("ping", "test", "codepage"))
    parser.add_argument("--host", default=config.PRINTER_HOST, help="printer IP (default: PRINTER_IP)")
    parser.add_argument("--port", type=int, default=config.PRINTER_PORT, help="printer port (default: 9100)")
    args = parser.parse_args(argv)

    setup_logging()
    if not args.host:
        parser.error("no printer host: pass --host or set PRINTER_IP in .env")
    return asyncio.run(run(args.command, args.host, args.port))


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        pass
