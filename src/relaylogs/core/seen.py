"""First-seen / last-seen: each channel's earliest or latest matching event."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from relaylogs.config.constants import TIMESTAMP_COLUMN
from relaylogs.core.durations import format_timestamp
from relaylogs.models import FilterSpec, SeenEntry

if TYPE_CHECKING:
    from relaylogs.core.search_engine import LogSearchEngine

logger = logging.getLogger(__name__)


def seen_spec(spec: FilterSpec, *, last: bool) -> FilterSpec:
    """Copy ``spec`` with OR-combined filters and a MAX/MIN timestamp projection.

    The time window is cleared: OR-combining a bound with the text filters
    would count every event inside the window as a sighting.
    """
    return spec.with_overrides(
        or_=True,
        from_time=None,
        to_time=None,
        max=TIMESTAMP_COLUMN if last else None,
        min=None if last else TIMESTAMP_COLUMN,
    )


def extract_extrema(search_results: dict[str, list[dict]], aggregate_key: str, *, last: bool) -> list[SeenEntry]:
    extrema: list[tuple[str, float]] = []
    for channel, rows in search_results.items():
        value = rows[0].get(aggregate_key) if rows else None
        if not value:
            continue
        extrema.append((channel, value))

    extrema.sort(key=lambda item: item[1], reverse=last)
    return [
        SeenEntry(channel=channel, timestamp_ms=int(value), timestamp_human=format_timestamp(value))
        for channel, value in extrema
    ]


async def user_seen(
    engine: LogSearchEngine,
    network: str,
    spec: FilterSpec,
    *,
    last: bool,
) -> list[SeenEntry] | None:
    """
    Find where (and when) the filters last/first matched on each channel.

    Returns:
        Entries sorted descending (last) or ascending (first) by timestamp;
        an empty list when nothing matched or discovery failed; None when
        channel archiving is disabled
    """
    query_spec = seen_spec(spec, last=last)
    outcome = await engine.search(network, query_spec)
    if outcome is None:
        return None

    if outcome.error is not None:
        logger.warning("Seen lookup on %s found no archive: %s", network, outcome.error.message)
        return []

    if outcome.total_lines <= 0:
        return []

    func, column = query_spec.aggregate
    return extract_extrema(outcome.search_results, f"{func}({column})", last=last)
