"""Exceptions raised by the ticket engine."""


class PrinterError(Exception):
    """Base class for everything the engine raises."""


class PrinterValidationError(PrinterError, ValueError):
    """Request rejected before any I/O (missing host, no tasks, no SSID...)."""


class PrinterConnectionError(PrinterError, ConnectionError):
    """Socket failed: refused, reset, unresolvable host."""


class PrinterTimeoutError(PrinterError, TimeoutError):
    """Printer did not accept or flush the ticket in time."""
