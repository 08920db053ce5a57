"""Exception types raised by the search engine."""
from __future__ import annotations


class RelayLogsError(Exception):
    """Base class for relaylogs errors."""


class PartitionDiscoveryError(RelayLogsError, FileNotFoundError):
    """A network's archive directory is missing or cannot be listed."""

    def __init__(self, network: str, path: str, reason: str) -> None:
        super().__init__(f"Cannot list archive for network {network!r} at {path}: {reason}")
        self.network = network
        self.path = path


class QueryBuildError(RelayLogsError, ValueError):
    """A search request cannot be turned into a query."""


class LogFormatError(QueryBuildError):
    """Unknown output format requested for channel logs."""
