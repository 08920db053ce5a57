"""Run one built query against one channel partition."""
from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any

from relaylogs.models import BuiltQuery, Partition, PartitionResult

logger = logging.getLogger(__name__)


class PartitionQueryExecutor:
    """Executes queries against partition files opened read-only.

    Failures are logged and returned as zero-row results so one unreadable
    partition never aborts a multi-partition search.
    """

    def _connect_ro(self, db_path: Path) -> sqlite3.Connection:
        # as_uri() percent-encodes "#", which would otherwise start a fragment
        uri = f"{db_path.absolute().as_uri()}?mode=ro"
        return sqlite3.connect(uri, uri=True)

    def fetch_rows(self, db_path: Path, query: BuiltQuery) -> list[dict[str, Any]]:
        """Run the query and return rows keyed by column name. Errors propagate."""
        con = self._connect_ro(db_path)
        try:
            con.row_factory = sqlite3.Row
            rows = con.execute(query.sql, query.params).fetchall()
            return [dict(row) for row in rows]
        finally:
            con.close()

    def execute(self, partition: Partition, query: BuiltQuery) -> PartitionResult:
        try:
            rows = self.fetch_rows(partition.path, query)
        except (sqlite3.Error, OSError) as exc:
            logger.error("Searching %s failed: %s (query: %s)", partition.name, exc, query.sql)
            return PartitionResult.failed(partition.channel, exc)
        return PartitionResult(channel=partition.channel, rows=rows)

    __call__ = execute
