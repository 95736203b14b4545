"""Date parsing and formatting utilities."""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import date, timedelta

from dateutil import parser as dateutil_parser
from dateutil.relativedelta import FR, MO, SA, SU, TH, TU, WE, relativedelta, weekday

# Weekday name to dateutil weekday constant
WEEKDAYS: dict[str, weekday] = {
    "monday": MO,
    "tuesday": TU,
    "wednesday": WE,
    "thursday": TH,
    "friday": FR,
    "saturday": SA,
    "sunday": SU,
    "mon": MO,
    "tue": TU,
    "wed": WE,
    "thu": TH,
    "fri": FR,
    "sat": SA,
    "sun": SU,
}

# Named date shortcuts
NAMED_DATES: dict[str, Callable[[], date]] = {
    "today": lambda: date.today(),
    "yesterday": lambda: date.today() - timedelta(days=1),
    "tomorrow": lambda: date.today() + timedelta(days=1),
}

DAILY_NOTE_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def parse_fuzzy_date(text: str) -> date | None:
    """Parse a fuzzy date expression into a date object.

    Supports:
    - Named dates: "today", "yesterday", "tomorrow"
    - Weekday names: "friday", "last monday" (most recent occurrence)
    - "N days ago"
    - ISO format: "2025-11-20", and anything else dateutil understands

    Returns None if parsing fails.
    """
    if not text:
        return None

    text = text.strip().lower()

    if text in NAMED_DATES:
        return NAMED_DATES[text]()

    ago_match = re.match(r"^(\d+)\s+days?\s+ago$", text)
    if ago_match:
        return date.today() - timedelta(days=int(ago_match.group(1)))

    last_match = re.match(r"^last\s+(\w+)$", text)
    if last_match:
        weekday_name = last_match.group(1)
        if weekday_name in WEEKDAYS:
            # Previous occurrence, never today
            return date.today() + relativedelta(days=-1, weekday=WEEKDAYS[weekday_name](-1))

    # Plain weekday name - most recent occurrence (past or today)
    if text in WEEKDAYS:
        return date.today() + relativedelta(weekday=WEEKDAYS[text](-1))

    try:
        parsed = dateutil_parser.parse(text, fuzzy=False, dayfirst=False)
        return parsed.date()
    except (ValueError, OverflowError, TypeError):
        pass

    return None


def parse_date_from_filename(filename: str) -> date | None:
    """Extract the date of a daily note from its file name.

    Only exact ``YYYY-MM-DD.md`` names are daily notes.

    Example: "2025-11-26.md" -> date(2025, 11, 26)
    """
    if not filename.endswith(".md"):
        return None
    match = DAILY_NOTE_DATE_PATTERN.match(filename[: -len(".md")])
    if match:
        try:
            return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
        except ValueError:
            pass
    return None


def format_date(dt: date, fmt: str | None = None) -> str:
    """Format a date using the given format string.

    Defaults to ISO format (YYYY-MM-DD) if no format specified.
    """
    if fmt is None:
        fmt = "%Y-%m-%d"
    return dt.strftime(fmt)


def get_relative_date_label(dt: date, today: date | None = None) -> str:
    """Get a human-readable label for a date relative to today.

    Returns "today", "yesterday", the weekday name within the past week,
    or the formatted date.
    """
    if today is None:
        today = date.today()

    if dt == today:
        return "today"
    elif dt == today - timedelta(days=1):
        return "yesterday"
    elif 0 < (today - dt).days < 7:
        return dt.strftime("%A")
    return format_date(dt)


def trailing_window(days: int, today: date | None = None) -> list[date]:
    """Return the ``days`` dates ending at ``today`` (inclusive), newest first."""
    if today is None:
        today = date.today()
    return [today - timedelta(days=offset) for offset in range(max(days, 0))]
