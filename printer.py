"""Async delivery of tickets to a network ESC/POS printer (raw TCP, port 9100)."""

import asyncio
import errno
import logging
import socket
from typing import Any, Iterable, Mapping, Optional, Union

import config
from errors import PrinterConnectionError, PrinterError, PrinterTimeoutError, PrinterValidationError
from print_tasks import Mode, PrintRequest, Task, WifiRequest
from tickets import build_ticket

logger = logging.getLogger(__name__)

TEST_TASK = Task(
    id="test",
    title="Test Print",
    description="Printer is working!",
    labels=("Test",),
    priority=3,
)


def _error_code(exc: OSError) -> str:
    """Short name for a socket failure, e.g. ECONNREFUSED."""
    if isinstance(exc, socket.gaierror):
        return "ENOTFOUND"
    if exc.errno is not None and exc.errno in errno.errorcode:
        return errno.errorcode[exc.errno]
    return exc.strerror or str(exc) or type(exc).__name__


async def _write_payload(host: str, port: int, payload: bytes) -> None:
    """Connect, write, wait for the flush, close. One connection per ticket."""
    _reader, writer = await asyncio.open_connection(host, port)
    try:
        writer.write(payload)
        await writer.drain()
    except BaseException:
        # Timeout cancellation or socket error: drop the connection at once
        writer.transport.abort()
        raise
    writer.close()
    try:
        await writer.wait_closed()
    except OSError as e:
        # Everything is flushed already; some printers reset instead of FIN.
        logger.debug("Printer %s:%s closed uncleanly: %s", host, port, e)


async def send(
    host: str,
    port: int,
    payload: bytes,
    timeout_ms: int = config.PRINT_TIMEOUT_MS,
) -> None:
    """Deliver one payload. Raises PrinterValidationError/ConnectionError/TimeoutError."""
    if not host:
        raise PrinterValidationError("Printer host is missing")
    if config.MOCK_PRINTER:
        logger.info("Printed (mock): %d bytes for %s:%s", len(payload), host, port)
        return
    try:
        await asyncio.wait_for(_write_payload(host, port, payload), timeout=timeout_ms / 1000)
    except asyncio.TimeoutError as e:
        raise PrinterTimeoutError("Printer connection timed out") from e
    except OSError as e:
        raise PrinterConnectionError(f"Printer error: {_error_code(e)}") from e
    except (ValueError, OverflowError) as e:
        # Host that fails IDNA encoding, port outside 0-65535
        raise PrinterValidationError(f"Invalid printer address {host}:{port}: {e}") from e
    logger.debug("Sent %d bytes to %s:%s", len(payload), host, port)


async def probe(
    host: str,
    port: int = config.PRINTER_PORT,
    timeout_ms: int = config.PROBE_TIMEOUT_MS,
) -> dict[str, object]:
    """Check that the printer accepts a connection. Never raises."""
    if not host:
        return {"reachable": False, "error": "Printer host is missing"}
    if config.MOCK_PRINTER:
        return {"reachable": True}
    try:
        _reader, writer = await asyncio.wait_for(
            asyncio.open_connection(host, port), timeout=timeout_ms / 1000
        )
    except asyncio.TimeoutError:
        return {"reachable": False, "error": "timeout"}
    except OSError as e:
        return {"reachable": False, "error": _error_code(e)}
    except (ValueError, OverflowError) as e:
        return {"reachable": False, "error": f"invalid address: {e}"}
    writer.close()
    try:
        await writer.wait_closed()
    except OSError as e:
        logger.debug("Probe connection to %s:%s closed uncleanly: %s", host, port, e)
    return {"reachable": True}


async def _deliver(request: Union[PrintRequest, WifiRequest], what: str) -> None:
    payload = build_ticket(request)
    try:
        await send(request.host, request.port, payload)
    except PrinterError as e:
        logger.error("Print failed (%s) on %s:%s: %s", what, request.host, request.port, e)
        raise
    logger.info("Printed %s on %s:%s (%d bytes)", what, request.host, request.port, len(payload))


async def print_tasks(
    host: str,
    tasks: Iterable[Union[Task, Mapping[str, Any]]],
    port: Optional[int] = None,
    mode: Optional[Union[Mode, str]] = None,
    week_range: Optional[str] = None,
    header_title: Optional[str] = None,
    compact: bool = False,
) -> None:
    """Print tasks as single tickets, a daily list or a weekly plan.

    Without ``mode`` one task prints as a single ticket and several as a daily
    list (``compact`` forces the daily list). Tasks may be ``Task`` objects or
    plain dicts in the task-source JSON shape.
    """
    request = PrintRequest(
        host=host,
        tasks=tuple(tasks or ()),
        port=config.PRINTER_PORT if port is None else port,
        mode=mode,
        week_range=week_range,
        header_title=header_title,
        compact=compact,
    )
    what = f"{request.resolved_mode.value} ticket, {len(request.tasks)} task(s)"
    await _deliver(request, what)


async def print_wifi_qr(
    host: str,
    ssid: str,
    port: Optional[int] = None,
    password: Optional[str] = None,
    type: str = "WPA",
    hidden: bool = False,
) -> None:
    """Print a join-network QR code for ``ssid``."""
    request = WifiRequest(
        host=host,
        ssid=ssid,
        port=config.PRINTER_PORT if port is None else port,
        password=password,
        type=type or "WPA",
        hidden=bool(hidden),
    )
    await _deliver(request, f"WiFi ticket for {ssid!r}")


async def print_test_page(host: str, port: Optional[int] = None) -> None:
    """Single ticket proving the printer is wired up."""
    await print_tasks(host, [TEST_TASK], port=port, mode=Mode.SINGLE)


async def ping_printer(host: str, port: Optional[int] = None) -> dict[str, object]:
    """Reachability check; returns ``{"reachable": bool[, "error": str]}``."""
    if port is None:
        port = config.PRINTER_PORT
    result = await probe(host, port)
    if not result["reachable"]:
        logger.warning("Printer %s:%s unreachable: %s", host, port, result["error"])
    return result
