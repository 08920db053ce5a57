"""Duration parsing and human-readable duration/timestamp rendering."""
from __future__ import annotations

import calendar
import re
from datetime import datetime, timedelta, timezone

_MS_PER_SECOND = 1000
_MS_PER_MINUTE = 60 * _MS_PER_SECOND
_MS_PER_HOUR = 60 * _MS_PER_MINUTE
_MS_PER_DAY = 24 * _MS_PER_HOUR

# Unit name -> milliseconds
DURATION_UNITS: dict[str, float] = {
    "ms": 1,
    "msec": 1,
    "msecs": 1,
    "millisecond": 1,
    "milliseconds": 1,
    "s": _MS_PER_SECOND,
    "sec": _MS_PER_SECOND,
    "secs": _MS_PER_SECOND,
    "second": _MS_PER_SECOND,
    "seconds": _MS_PER_SECOND,
    "m": _MS_PER_MINUTE,
    "min": _MS_PER_MINUTE,
    "mins": _MS_PER_MINUTE,
    "minute": _MS_PER_MINUTE,
    "minutes": _MS_PER_MINUTE,
    "h": _MS_PER_HOUR,
    "hr": _MS_PER_HOUR,
    "hrs": _MS_PER_HOUR,
    "hour": _MS_PER_HOUR,
    "hours": _MS_PER_HOUR,
    "d": _MS_PER_DAY,
    "day": _MS_PER_DAY,
    "days": _MS_PER_DAY,
    "w": 7 * _MS_PER_DAY,
    "wk": 7 * _MS_PER_DAY,
    "wks": 7 * _MS_PER_DAY,
    "week": 7 * _MS_PER_DAY,
    "weeks": 7 * _MS_PER_DAY,
    "mo": 30.4375 * _MS_PER_DAY,
    "month": 30.4375 * _MS_PER_DAY,
    "months": 30.4375 * _MS_PER_DAY,
    "y": 365.25 * _MS_PER_DAY,
    "yr": 365.25 * _MS_PER_DAY,
    "yrs": 365.25 * _MS_PER_DAY,
    "year": 365.25 * _MS_PER_DAY,
    "years": 365.25 * _MS_PER_DAY,
}

_DURATION_TOKEN = re.compile(
    r"(?:\s*(?:,|and\b))?\s*(\d+(?:\.\d+)?|\.\d+)\s*([a-z]*)",
    re.IGNORECASE,
)

# Units rendered by format_duration, coarsest first
_BASE_FORMAT_UNITS = ("years", "months", "weeks", "days", "hours", "minutes")


def parse_duration(text: str) -> float | None:
    """
    Parse a relative duration such as "2 hours", "3d", "90s" or "1h30m".

    A bare number is read as milliseconds. A leading "-" negates the whole
    expression.

    Returns:
        Duration in milliseconds, or None if the text is not a duration
    """
    if not text:
        return None
    text = text.strip()
    body = text[1:] if text[:1] in ("+", "-") else text

    # Tokens must tile the input exactly; each one consumes at least a digit
    total = 0.0
    pos = 0
    while pos < len(body):
        match = _DURATION_TOKEN.match(body, pos)
        if match is None:
            return None
        number, unit = match.groups()
        factor = DURATION_UNITS.get(unit.lower() or "ms")
        if factor is None:
            return None
        total += float(number) * factor
        pos = match.end()

    if pos == 0:
        return None
    return -total if text.startswith("-") else total


def _add_months(dt: datetime, months: int) -> datetime:
    month_index = dt.month - 1 + months
    year = dt.year + month_index // 12
    month = month_index % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


def interval_components(start: datetime, end: datetime) -> dict[str, int]:
    """Break the calendar interval between two instants into whole units."""
    if end < start:
        start, end = end, start

    years = end.year - start.year
    if years and _add_months(start, years * 12) > end:
        years -= 1
    cursor = _add_months(start, years * 12)

    months = (end.year - cursor.year) * 12 + (end.month - cursor.month)
    if months and _add_months(cursor, months) > end:
        months -= 1
    cursor = _add_months(cursor, months)

    remainder = end - cursor
    hours, rest = divmod(remainder.seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return {
        "years": years,
        "months": months,
        "weeks": 0,
        "days": remainder.days,
        "hours": hours,
        "minutes": minutes,
        "seconds": seconds,
    }


def _render(components: dict[str, int], units: list[str]) -> str:
    parts = []
    for unit in units:
        value = components.get(unit, 0)
        if value:
            parts.append(f"{value} {unit[:-1] if value == 1 else unit}")
    return " ".join(parts)


def format_duration(start: datetime, end: datetime | None = None, allow_seconds: bool = False) -> str:
    """
    Render the time between two instants, e.g. "2 hours 5 minutes".

    Seconds are used only when allowed or when nothing coarser is non-zero.
    Whenever the rendering mentions "days", the finest unit is dropped and
    the interval re-rendered.
    """
    if end is None:
        end = datetime.now(start.tzinfo)

    components = interval_components(start, end)
    units = list(_BASE_FORMAT_UNITS)
    if allow_seconds:
        units.append("seconds")

    rendered = _render(components, units)
    if not rendered:
        if "seconds" not in units:
            units.append("seconds")
        rendered = _render(components, units) or "0 seconds"

    if "days" in rendered:
        units.pop()
        rendered = _render(components, units)

    return rendered


def format_timestamp(timestamp_ms: float) -> str:
    """Render epoch milliseconds in local time, e.g. "Mon Jan 01 2024 09:30:00"."""
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%a %b %d %Y %H:%M:%S")


def to_epoch_ms(moment: datetime) -> int:
    """Convert an instant to epoch milliseconds; naive values are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp() * 1000)


def elapsed_ms(start: datetime, end: datetime) -> float:
    return (end - start) / timedelta(milliseconds=1)
