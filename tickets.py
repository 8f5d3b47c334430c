"""Ticket layouts: single task, daily list, weekly plan, WiFi QR.

Each builder is a plain function from tasks and parameters to one ``bytes``
payload. They share nothing but the command encoder and the text helpers;
``build_ticket`` picks one by the request's mode. Every payload starts with
``init()`` and ends with ``trailer()``.
"""

from __future__ import annotations

import logging
import re
from collections import defaultdict
from datetime import date, datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

import config
from codepage import translate
from commands import align, emphasis, feed, hr, init, inverse, qr_code, text_size, trailer
from formatter import clean_text, clean_title, label_chips, wrap
from print_tasks import Mode, PrintRequest, Task, WifiRequest

logger = logging.getLogger(__name__)

PAPER_WIDTH = config.PAPER_WIDTH
# "- " bullet margin in list tickets
LIST_WIDTH = PAPER_WIDTH - 2

QR_PREFIX = "donotick:"
TASK_QR_SIZE = 8
WIFI_QR_SIZE = 10

SHORT_TITLE_MAX = 20
WEEKDAYS_DE = ("Mo", "Di", "Mi", "Do", "Fr", "Sa", "So")
DEFAULT_WEEK_RANGE = "Diese Woche"

_WIFI_SPECIAL_RE = re.compile(r'([\\;,:"])')
_WIFI_ESCAPED_RE = re.compile(r'\\([\\;,:"])')


def title_size(title: str) -> int:
    """3x for short titles, 2x once the title passes 20 characters."""
    return 3 if len(title) <= SHORT_TITLE_MAX else 2


def task_qr_data(task: Task) -> str:
    return f"{QR_PREFIX}{task.id or task.title}"


# --- single ---
def build_single_ticket(task: Task) -> bytes:
    """One large "do it" ticket with a scannable QR code for the task."""
    parts: List[bytes] = [init()]

    parts += [
        align("center"),
        inverse(True),
        text_size(2, 2),
        translate(" * DO IT! * \n"),
        text_size(1, 1),
        inverse(False),
        feed(1),
    ]

    title = clean_title(task.title)
    size = title_size(title)
    parts += [text_size(size, size), emphasis(True)]
    parts += [translate(line + "\n") for line in wrap(title, PAPER_WIDTH // size)]
    parts += [emphasis(False), text_size(1, 1), feed(1)]

    chips = label_chips(task.labels)
    if chips:
        parts += [translate(chips + "\n"), feed(1)]

    if task.description:
        parts += [hr("-"), align("center")]
        parts += [translate(line + "\n") for line in wrap(clean_text(task.description), PAPER_WIDTH)]
        parts.append(feed(1))

    parts += [hr("="), align("center"), qr_code(task_qr_data(task), size=TASK_QR_SIZE)]
    parts.append(trailer())
    return b"".join(parts)


def build_single(tasks: Sequence[Task]) -> bytes:
    """One complete ticket per task, back to back."""
    return b"".join(build_single_ticket(task) for task in tasks)


# --- daily / weekly list lines ---
def _task_lines(task: Task) -> bytes:
    """Emphasized bullet line, plain continuation lines, then label chips."""
    lines = wrap(clean_title(task.title), LIST_WIDTH) or [""]
    parts = [emphasis(True), translate(f"- {lines[0]}\n"), emphasis(False)]
    parts += [translate(f"  {line}\n") for line in lines[1:]]
    chips = label_chips(task.labels)
    if chips:
        parts.append(translate(f"  {chips}\n"))
    return b"".join(parts)


def format_day_month(day: date) -> str:
    return f"{day.day:02d}.{day.month:02d}"


def build_daily_ticket(
    tasks: Sequence[Task],
    header_title: Optional[str] = None,
    today: Optional[date] = None,
) -> bytes:
    """Dense list of everything due today."""
    heading = clean_text(header_title) if header_title else (
        f"HEUTE {format_day_month(today or date.today())}"
    )
    parts: List[bytes] = [init()]

    parts += [
        align("center"),
        inverse(True),
        text_size(2, 1),
        translate(f" {heading} "),
        text_size(1, 1),
        translate("\n"),
        inverse(False),
        feed(1),
    ]

    parts += [align("left"), translate(f"{len(tasks)} Aufgaben\n"), hr("-")]
    parts += [_task_lines(task) for task in tasks]

    parts += [hr("-"), trailer()]
    return b"".join(parts)


def due_date_key(due: Optional[str]) -> Optional[str]:
    """UTC calendar day (``YYYY-MM-DD``) of an ISO-8601 due value.

    Date-only values are taken as UTC midnight, naive date-times as local
    time. Returns None for missing or unparseable values.
    """
    if not due:
        return None
    raw = due.strip()
    try:
        if len(raw) == 10:
            return date.fromisoformat(raw).isoformat()
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        logger.warning("Unparseable due date %r, listing task as undated", due)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed.astimezone(timezone.utc).date().isoformat()


def group_by_day(tasks: Iterable[Task]) -> Tuple[Dict[str, List[Task]], List[Task]]:
    """Split tasks into ascending day buckets and an undated remainder.

    Input order is kept inside every bucket.
    """
    groups: Dict[str, List[Task]] = defaultdict(list)
    undated: List[Task] = []
    for task in tasks:
        key = due_date_key(task.due)
        if key is None:
            undated.append(task)
        else:
            groups[key].append(task)
    return {key: groups[key] for key in sorted(groups)}, undated


def _day_banner(key: str) -> str:
    day = date.fromisoformat(key)
    return f" {WEEKDAYS_DE[day.weekday()]} {day.day}.{day.month} "


def build_weekly_ticket(tasks: Sequence[Task], week_range: Optional[str] = None) -> bytes:
    """Week plan grouped by due day, undated tasks last, grand total at the end."""
    parts: List[bytes] = [init()]

    parts += [
        align("center"),
        inverse(True),
        text_size(1, 2),
        translate(" WOCHENPLAN \n"),
        text_size(1, 1),
        translate(f" {clean_text(week_range or DEFAULT_WEEK_RANGE)} \n"),
        inverse(False),
        feed(1),
    ]

    groups, undated = group_by_day(tasks)
    total = 0
    buckets: List[Tuple[str, List[Task]]] = [(_day_banner(key), day_tasks) for key, day_tasks in groups.items()]
    if undated:
        buckets.append((" OHNE DATUM ", undated))

    for banner, bucket in buckets:
        parts += [
            align("left"),
            inverse(True),
            translate(banner),
            inverse(False),
            translate(f" ({len(bucket)})\n"),
        ]
        parts += [_task_lines(task) for task in bucket]
        parts.append(feed(1))
        total += len(bucket)

    parts += [
        hr("="),
        align("center"),
        emphasis(True),
        translate(f"GESAMT: {total} Aufgaben\n"),
        emphasis(False),
        trailer(),
    ]
    return b"".join(parts)


# --- wifi ---
def escape_wifi(value: str) -> str:
    r"""Backslash-escape ``\ ; , : "`` for the WIFI: URI."""
    return _WIFI_SPECIAL_RE.sub(r"\\\1", value)


def unescape_wifi(value: str) -> str:
    return _WIFI_ESCAPED_RE.sub(r"\1", value)


def wifi_uri(ssid: str, password: Optional[str] = None, type: str = "WPA", hidden: bool = False) -> str:
    """``WIFI:T:<type>;S:<ssid>;[P:<password>;][H:true;];``"""
    uri = f"WIFI:T:{type};S:{escape_wifi(ssid)};"
    if type != "nopass" and password:
        uri += f"P:{escape_wifi(password)};"
    if hidden:
        uri += "H:true;"
    return uri + ";"


def build_wifi_ticket(ssid: str, password: Optional[str] = None, type: str = "WPA", hidden: bool = False) -> bytes:
    """Network name in large type above a join-network QR code."""
    parts: List[bytes] = [init()]

    parts += [
        align("center"),
        inverse(True),
        text_size(2, 1),
        translate(" WLAN "),
        text_size(1, 1),
        translate("\n"),
        inverse(False),
        feed(1),
    ]

    parts += [
        text_size(2, 2),
        emphasis(True),
        translate(ssid + "\n"),
        emphasis(False),
        text_size(1, 1),
        feed(1),
    ]

    parts += [hr("="), qr_code(wifi_uri(ssid, password, type, hidden), size=WIFI_QR_SIZE), feed(1), hr("=")]

    parts += [
        feed(1),
        align("center"),
        translate("QR-Code scannen\n"),
        translate("zum Verbinden\n"),
        trailer(),
    ]
    return b"".join(parts)


def build_ticket(request: Union[PrintRequest, WifiRequest]) -> bytes:
    """Build the payload for a request with the builder its mode selects."""
    mode = request.resolved_mode
    if mode is Mode.WIFI:
        payload = build_wifi_ticket(request.ssid, request.password, request.type, request.hidden)
    elif mode is Mode.SINGLE:
        payload = build_single(request.tasks)
    elif mode is Mode.WEEKLY:
        payload = build_weekly_ticket(request.tasks, request.week_range or request.header_title)
    else:
        payload = build_daily_ticket(request.tasks, request.header_title)
    logger.debug("Built %s ticket: %d bytes", mode.value, len(payload))
    return payload
