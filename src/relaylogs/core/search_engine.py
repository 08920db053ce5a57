from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone

from relaylogs.config import Config
from relaylogs.core.durations import elapsed_ms, format_duration
from relaylogs.core.errors import PartitionDiscoveryError
from relaylogs.core.executor import PartitionQueryExecutor
from relaylogs.core.locator import ChannelStoreLocator
from relaylogs.core.query_builder import prepare_query
from relaylogs.models import (
    BuiltQuery,
    ErrorInfo,
    FilterSpec,
    Partition,
    PartitionResult,
    SearchOutcome,
    SeenEntry,
)

PartitionStrategy = Callable[[Partition, BuiltQuery], PartitionResult]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LogSearchEngine:
    """Fans a search out across every partition of a network.

    Each partition is queried in its own worker thread; results are folded
    together only once every partition has finished.
    """

    def __init__(
        self,
        config: Config | None = None,
        *,
        locator: ChannelStoreLocator | None = None,
        executor: PartitionQueryExecutor | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        if config is None:
            config = Config.load()
        self.config = config
        self.locator = locator or ChannelStoreLocator(config)
        self.executor = executor or PartitionQueryExecutor()
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def search(
        self,
        network: str,
        spec: FilterSpec,
        strategy: PartitionStrategy | None = None,
    ) -> SearchOutcome | None:
        """
        Search every eligible partition of ``network``.

        Args:
            network: Network whose archive to search
            spec: Search request
            strategy: Per-partition query function (default: the executor)

        Returns:
            SearchOutcome, or None when channel archiving is disabled. A
            discovery failure is reported through ``outcome.error``.

        Raises:
            QueryBuildError: If the request cannot be turned into a query
        """
        query = prepare_query(spec, now=self._clock())

        try:
            partitions = self.locator.locate(network, spec)
        except PartitionDiscoveryError as exc:
            self._logger.error("Search of %s failed: %s", network, exc)
            now = self._clock()
            return SearchOutcome(
                total_lines=0,
                search_results={},
                query_time_ms=0.0,
                query_time_human=format_duration(now, now, allow_seconds=True),
                error=ErrorInfo.from_exception(exc),
            )

        if partitions is None:
            return None

        self._logger.debug("Query for %s: %s %s", network, query.sql, query.params)

        start = self._clock()
        settled = await self._fan_out(partitions, query, strategy or self.executor.execute)
        end = self._clock()

        search_results = self._merge(partitions, settled)
        return SearchOutcome(
            total_lines=sum(len(rows) for rows in search_results.values()),
            search_results=search_results,
            query_time_ms=elapsed_ms(start, end),
            query_time_human=format_duration(start, end, allow_seconds=True),
        )

    async def _fan_out(
        self,
        partitions: list[Partition],
        query: BuiltQuery,
        strategy: PartitionStrategy,
    ) -> list[PartitionResult | BaseException]:
        return await asyncio.gather(
            *(asyncio.to_thread(strategy, partition, query) for partition in partitions),
            return_exceptions=True,
        )

    def _merge(
        self,
        partitions: list[Partition],
        settled: list[PartitionResult | BaseException],
    ) -> dict[str, list[dict]]:
        search_results: dict[str, list[dict]] = {}
        for partition, result in zip(partitions, settled):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                self._logger.error("Searching %s failed: %s", partition.name, result)
                continue
            if not result.ok or not result.rows:
                continue
            search_results[result.channel] = result.rows
        return search_results

    async def first_seen(self, network: str, spec: FilterSpec) -> list[SeenEntry] | None:
        from relaylogs.core.seen import user_seen

        return await user_seen(self, network, spec, last=False)

    async def last_seen(self, network: str, spec: FilterSpec) -> list[SeenEntry] | None:
        from relaylogs.core.seen import user_seen

        return await user_seen(self, network, spec, last=True)
