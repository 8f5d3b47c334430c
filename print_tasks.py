"""Print request model: tasks, task tickets, WiFi tickets.

Requests validate their structure on construction, so a bad request fails
before a ticket is built or a socket is opened. Task content is never
validated: a blank title still prints a blank line.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Tuple, Union

import config
from errors import PrinterValidationError

TaskId = Union[str, int, None]

WIFI_TYPES = ("WPA", "WEP", "nopass")


class Mode(str, Enum):
    SINGLE = "single"
    DAILY = "daily"
    WEEKLY = "weekly"
    WIFI = "wifi"


@dataclass(frozen=True)
class Task:
    title: str
    id: TaskId = None
    description: Optional[str] = None
    due: Optional[str] = None
    labels: Tuple[str, ...] = ()
    priority: Optional[float] = None
    completed_this_morning: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Task":
        """Build a Task from the JSON shape used by the task sources."""
        completed = data.get("completed_this_morning", data.get("completedThisMorning", False))
        return cls(
            title=str(data.get("title") or ""),
            id=data.get("id"),
            description=data.get("description") or None,
            due=data.get("due") or None,
            labels=tuple(str(label) for label in (data.get("labels") or ())),
            priority=data.get("priority"),
            completed_this_morning=bool(completed),
        )


def _coerce_tasks(tasks: Iterable[Union[Task, Mapping[str, Any]]]) -> Tuple[Task, ...]:
    return tuple(t if isinstance(t, Task) else Task.from_dict(t) for t in tasks)


def _require_host(host: str) -> None:
    if not host:
        raise PrinterValidationError("Printer host is missing")


@dataclass(frozen=True)
class PrintRequest:
    host: str
    tasks: Tuple[Task, ...]
    port: int = config.PRINTER_PORT
    mode: Optional[Mode] = None
    week_range: Optional[str] = None
    header_title: Optional[str] = None
    compact: bool = False

    def __post_init__(self) -> None:
        _require_host(self.host)
        tasks = _coerce_tasks(self.tasks or ())
        if not tasks:
            raise PrinterValidationError("No tasks to print")
        object.__setattr__(self, "tasks", tasks)
        if self.mode is not None:
            try:
                mode = Mode(self.mode)
            except ValueError:
                raise PrinterValidationError(f"Unknown print mode: {self.mode!r}") from None
            if mode is Mode.WIFI:
                raise PrinterValidationError("Use print_wifi_qr for WiFi tickets")
            object.__setattr__(self, "mode", mode)

    @property
    def resolved_mode(self) -> Mode:
        """Explicit mode, else daily when compact, else single for one task."""
        if self.mode is not None:
            return self.mode
        if self.compact or len(self.tasks) != 1:
            return Mode.DAILY
        return Mode.SINGLE


@dataclass(frozen=True)
class WifiRequest:
    host: str
    ssid: str
    port: int = config.PRINTER_PORT
    password: Optional[str] = None
    type: str = "WPA"
    hidden: bool = False

    def __post_init__(self) -> None:
        _require_host(self.host)
        if not self.ssid:
            raise PrinterValidationError("SSID is required")
        if self.type not in WIFI_TYPES:
            raise PrinterValidationError(
                f"Unknown WiFi type: {self.type!r} (expected one of {', '.join(WIFI_TYPES)})"
            )

    @property
    def resolved_mode(self) -> Mode:
        return Mode.WIFI
