"""Text layout helpers shared by the ticket builders.

``wrap`` is a greedy word wrapper that never breaks a word: a word longer than
the column budget gets a line of its own and overflows. The ``clean_*``
helpers decide which Unicode cleaning a piece of ticket text gets before it is
translated to code page bytes.
"""

from __future__ import annotations

from typing import Iterable, List

from codepage import normalize_punctuation, strip_pictographic


def wrap(text: str, max_width: int) -> List[str]:
    """Split ``text`` on whitespace and fill lines up to ``max_width`` columns."""

    lines: List[str] = []
    line = ""
    for word in (text or "").split():
        if not line:
            # First word on a line is always placed, even if it overflows.
            line = word
        elif len(line) + 1 + len(word) <= max_width:
            line = f"{line} {word}"
        else:
            lines.append(line)
            line = word
    if line:
        lines.append(line)
    return lines


def clean_title(title: str | None) -> str:
    """Titles and labels: no pictographs, single spaces, trimmed."""
    return strip_pictographic(title or "")


def clean_text(text: str | None) -> str:
    """Body text: only typographic punctuation is folded."""
    return normalize_punctuation(text or "")


def label_chips(labels: Iterable[str]) -> str:
    """Render labels as ``[a] [b]``; empty string when there are none."""
    cleaned = [clean_title(label) for label in labels]
    if not cleaned:
        return ""
    return "[" + "] [".join(cleaned) + "]"
