"""Date parsing and display-label helpers."""

from __future__ import annotations

import math
from datetime import UTC, date, datetime

from dateutil import parser as date_parser

WORDS_PER_MINUTE = 200
MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def parse_datetime(value: str | datetime | None) -> datetime | None:
    """Parse an ISO-ish date string into a timezone-aware UTC datetime.

    Args:
        value: Date string or datetime instance to parse.

    Returns:
        A UTC datetime, or None if the value is empty or unparseable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if not text:
            return None
        try:
            parsed = date_parser.parse(text)
        except (ValueError, OverflowError):
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def format_date_label(value: str | date | datetime | None) -> str:
    """Format a date as ``"Mar 4, 2025"``; falls back to today."""
    if isinstance(value, datetime):
        day = value.date()
    elif isinstance(value, date):
        day = value
    else:
        parsed = parse_datetime(value)
        day = parsed.date() if parsed else datetime.now(UTC).date()
    return f"{MONTHS[day.month - 1]} {day.day}, {day.year}"


def calculate_read_time(content: str | None) -> str:
    """Estimate reading time at 200 words per minute, never below one."""
    if not content or not content.strip():
        return "1 min read"
    words = len(content.split())
    minutes = max(1, math.ceil(words / WORDS_PER_MINUTE))
    return f"{minutes} min read"


def read_time_label(minutes: int | None) -> str:
    """Label for a reading time reported by the source platform."""
    if minutes:
        return f"{minutes} min read"
    return "1 min read"
