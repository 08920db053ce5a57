"""Read and format one channel's logs."""
from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from relaylogs.config import Config
from relaylogs.config.constants import TIMESTAMP_COLUMN
from relaylogs.core.errors import LogFormatError
from relaylogs.core.executor import PartitionQueryExecutor
from relaylogs.core.locator import ChannelStoreLocator
from relaylogs.core.matching import PatternCache
from relaylogs.core.query_builder import prepare_query
from relaylogs.models import FilterSpec, LogFormat

logger = logging.getLogger(__name__)

Row = dict[str, Any]


def _format_txt(row: Row) -> str:
    ts = datetime.fromtimestamp(row[TIMESTAMP_COLUMN] / 1000, tz=timezone.utc)
    iso = ts.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return f"[{iso}] <{row.get('nick')}> {row.get('message')}"


LOG_FORMATTERS: dict[LogFormat, Callable[[Row], Any]] = {
    LogFormat.JSON: lambda row: row,
    LogFormat.TXT: _format_txt,
}


def get_formatter(fmt: str | LogFormat) -> Callable[[Row], Any]:
    """
    Look up the row formatter for an output format name.

    Raises:
        LogFormatError: If the format is unknown
    """
    try:
        return LOG_FORMATTERS[LogFormat(fmt)]
    except ValueError as exc:
        raise LogFormatError(f"bad format {fmt}") from exc


class ChannelLogReader:
    def __init__(
        self,
        config: Config,
        *,
        locator: ChannelStoreLocator | None = None,
        executor: PartitionQueryExecutor | None = None,
        pattern_cache: PatternCache | None = None,
    ) -> None:
        self.config = config
        self.locator = locator or ChannelStoreLocator(config)
        self.executor = executor or PartitionQueryExecutor()
        self.pattern_cache = pattern_cache if pattern_cache is not None else PatternCache()

    def read(
        self,
        network: str,
        channel: str,
        spec: FilterSpec | None = None,
        fmt: str | LogFormat = "json",
        filter_by_nick: str | list[str] | None = None,
    ) -> list[Any] | None:
        """
        Return one channel's matching rows in the requested format.

        ``filter_by_nick`` is a comma-separated string or list of nick specs;
        each spec is a substring or ``/regex/flags``, and a row is kept when
        any spec matches its nick.

        Returns:
            Formatted rows, or None when channel archiving is disabled

        Raises:
            LogFormatError: If ``fmt`` is unknown
            sqlite3.Error: If the channel's partition cannot be read
        """
        if not self.locator.enabled:
            return None

        formatter = get_formatter(fmt)
        spec = spec or FilterSpec()

        if isinstance(filter_by_nick, str):
            filter_by_nick = [nick for nick in filter_by_nick.split(",") if nick]

        query = prepare_query(spec)
        partition = self.locator.partition_for(network, channel, spec)
        rows = self.executor.fetch_rows(partition.path, query)

        if filter_by_nick:
            rows = [
                row for row in rows
                if any(self.pattern_cache.matches(nick, str(row.get("nick") or "")) for nick in filter_by_nick)
            ]

        logger.debug("Read %d rows from %s/%s", len(rows), network, partition.name)
        return [formatter(row) for row in rows]
