"""
Time expression parser for search windows.

Resolves a user-supplied bound into an absolute instant. Attempts, in order:

1. Literal timestamps: "2024-01-01T00:00:00Z", "2024-01-01", "2024-01-01 12:30"
2. Natural-language dates: "yesterday", "last friday", "3 days ago", "Jan 15"
3. Relative durations from now: "2 hours", "3d", "90s", "-1h30m"

Anything else resolves to None, which callers treat as "no bound".
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone

from relaylogs.core.durations import parse_duration

logger = logging.getLogger(__name__)

_LITERAL_FORMATS = (
    "%Y",
    "%Y-%m",
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%a %b %d %Y %H:%M:%S",
)

WEEKDAYS = {
    "monday": 0,
    "mon": 0,
    "tuesday": 1,
    "tue": 1,
    "tues": 1,
    "wednesday": 2,
    "wed": 2,
    "thursday": 3,
    "thu": 3,
    "thur": 3,
    "thurs": 3,
    "friday": 4,
    "fri": 4,
    "saturday": 5,
    "sat": 5,
    "sunday": 6,
    "sun": 6,
}

MONTH_MAP = {
    "january": 1,
    "jan": 1,
    "february": 2,
    "feb": 2,
    "march": 3,
    "mar": 3,
    "april": 4,
    "apr": 4,
    "may": 5,
    "june": 6,
    "jun": 6,
    "july": 7,
    "jul": 7,
    "august": 8,
    "aug": 8,
    "september": 9,
    "sep": 9,
    "sept": 9,
    "october": 10,
    "oct": 10,
    "november": 11,
    "nov": 11,
    "december": 12,
    "dec": 12,
}

_CALENDAR_UNITS = {
    "minute": timedelta(minutes=1),
    "hour": timedelta(hours=1),
    "day": timedelta(days=1),
    "week": timedelta(weeks=1),
    "month": timedelta(days=30),
    "year": timedelta(days=365),
}

_MONTH_NAMES = "|".join(sorted(MONTH_MAP, key=len, reverse=True))
_WEEKDAY_NAMES = "|".join(sorted(WEEKDAYS, key=len, reverse=True))
_UNIT_NAMES = "minute|hour|day|week|month|year"

PATTERNS = {
    "keyword": re.compile(r"^(now|today|yesterday|tomorrow)$", re.IGNORECASE),
    "weekday": re.compile(rf"^(?:(last|next|this)\s+)?({_WEEKDAY_NAMES})$", re.IGNORECASE),
    "relative_period": re.compile(rf"^(last|next|this)\s+({_UNIT_NAMES})$", re.IGNORECASE),
    "ago": re.compile(rf"^(\d+|an?)\s+({_UNIT_NAMES})s?\s+ago$", re.IGNORECASE),
    "in": re.compile(rf"^in\s+(\d+|an?)\s+({_UNIT_NAMES})s?$", re.IGNORECASE),
    # January 15, 2025 / Jan 15th / Jan 15 2025
    "month_day_year": re.compile(
        rf"^({_MONTH_NAMES})\.?\s+(\d{{1,2}})(?:st|nd|rd|th)?(?:,?\s*(\d{{4}}))?$",
        re.IGNORECASE,
    ),
    # 15 January 2025 / 15th Jan
    "day_month_year": re.compile(
        rf"^(\d{{1,2}})(?:st|nd|rd|th)?\s+({_MONTH_NAMES})\.?(?:,?\s*(\d{{4}}))?$",
        re.IGNORECASE,
    ),
    # January 2025
    "month_year": re.compile(rf"^({_MONTH_NAMES})\.?\s+(\d{{4}})$", re.IGNORECASE),
}


def _start_of_day(dt: datetime) -> datetime:
    """Get the start of a day."""
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def parse_literal_timestamp(text: str) -> datetime | None:
    """Parse an explicit timestamp; naive values are taken as UTC."""
    candidate = text.strip()
    if not candidate:
        return None

    iso = candidate[:-1] + "+00:00" if candidate.endswith(("Z", "z")) else candidate
    try:
        return _as_utc(datetime.fromisoformat(iso))
    except ValueError:
        pass

    for fmt in _LITERAL_FORMATS:
        try:
            return _as_utc(datetime.strptime(candidate, fmt))
        except ValueError:
            continue
    return None


def _count(token: str) -> int:
    return 1 if token.lower() in ("a", "an") else int(token)


def parse_natural_date(text: str, now: datetime) -> datetime | None:
    """
    Parse a natural-language date relative to ``now``.

    Relative phrases ("yesterday", "3 days ago") keep the time of day of
    ``now``; calendar dates ("last friday", "Jan 15") resolve to midnight.
    """
    query = " ".join(text.strip().lower().split())
    if not query:
        return None

    match = PATTERNS["keyword"].match(query)
    if match:
        word = match.group(1)
        offsets = {"now": 0, "today": 0, "yesterday": -1, "tomorrow": 1}
        return now + timedelta(days=offsets[word])

    match = PATTERNS["weekday"].match(query)
    if match:
        modifier, day_name = match.group(1), match.group(2)
        target = WEEKDAYS[day_name]
        delta = target - now.weekday()
        if modifier == "last":
            delta = delta - 7 if delta >= 0 else delta
        elif modifier == "next":
            delta = delta + 7 if delta <= 0 else delta
        elif modifier is None and delta > 0:
            # A bare weekday refers to the most recent one
            delta -= 7
        return _start_of_day(now + timedelta(days=delta))

    match = PATTERNS["relative_period"].match(query)
    if match:
        modifier, unit = match.group(1), match.group(2)
        step = {"last": -1, "next": 1, "this": 0}[modifier]
        return now + step * _CALENDAR_UNITS[unit]

    match = PATTERNS["ago"].match(query)
    if match:
        return now - _count(match.group(1)) * _CALENDAR_UNITS[match.group(2)]

    match = PATTERNS["in"].match(query)
    if match:
        return now + _count(match.group(1)) * _CALENDAR_UNITS[match.group(2)]

    for key, month_group, day_group in (("month_day_year", 1, 2), ("day_month_year", 2, 1)):
        match = PATTERNS[key].match(query)
        if match:
            month = MONTH_MAP[match.group(month_group)]
            day = int(match.group(day_group))
            year = int(match.group(3)) if match.group(3) else now.year
            try:
                return datetime(year, month, day, tzinfo=now.tzinfo)
            except ValueError:
                return None

    match = PATTERNS["month_year"].match(query)
    if match:
        return datetime(int(match.group(2)), MONTH_MAP[match.group(1)], 1, tzinfo=now.tzinfo)

    return None


def parse_time_expression(text: str | None, now: datetime | None = None) -> datetime | None:
    """
    Resolve a time bound to an absolute, timezone-aware instant.

    Args:
        text: User-supplied timestamp, date phrase or duration
        now: Reference time for relative expressions (default: current UTC time)

    Returns:
        The resolved instant, or None if the text could not be understood
    """
    if not text or not text.strip():
        return None

    literal = parse_literal_timestamp(text)
    if literal is not None:
        return literal

    if now is None:
        now = datetime.now(timezone.utc)
    now = _as_utc(now)

    natural = parse_natural_date(text, now)
    if natural is not None:
        return natural

    offset_ms = parse_duration(text)
    if offset_ms is not None:
        return now + timedelta(milliseconds=offset_ms)

    logger.debug("Unresolved time expression %r", text)
    return None
