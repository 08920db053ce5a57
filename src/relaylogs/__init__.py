from __future__ import annotations

__version__ = "0.3.0"
__author__ = "relaylogs Contributors"

from relaylogs.models import (
    FilterSpec,
    BuiltQuery,
    SearchOutcome,
    SeenEntry,
)
from relaylogs.core import build_query, parse_time_expression

__all__ = [
    "FilterSpec",
    "BuiltQuery",
    "SearchOutcome",
    "SeenEntry",
    "build_query",
    "parse_time_expression",
    "LogSearchEngine",
]


def __getattr__(name: str):
    if name == "LogSearchEngine":
        from relaylogs.core.search_engine import LogSearchEngine

        return LogSearchEngine
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
