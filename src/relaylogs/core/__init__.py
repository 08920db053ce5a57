"""Core business logic - query building, partition discovery and search."""
from __future__ import annotations

from relaylogs.core.time_parser import parse_time_expression
from relaylogs.core.query_builder import build_query
from relaylogs.core.matching import PatternCache
from relaylogs.core.networks import match_network

__all__ = [
    "parse_time_expression",
    "build_query",
    "PatternCache",
    "match_network",
    "LogSearchEngine",
    "ChannelLogReader",
]


def __getattr__(name: str):
    if name == "LogSearchEngine":
        from relaylogs.core.search_engine import LogSearchEngine

        return LogSearchEngine
    if name == "ChannelLogReader":
        from relaylogs.core.channel_logs import ChannelLogReader

        return ChannelLogReader
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
