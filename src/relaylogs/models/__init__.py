"""Data models for relaylogs."""
from relaylogs.models.enums import LogicOp, LogFormat
from relaylogs.models.domain import (
    FilterSpec,
    BuiltQuery,
    Partition,
    PartitionResult,
    ErrorInfo,
    SearchOutcome,
    SeenEntry,
)

__all__ = [
    # Enums
    "LogicOp",
    "LogFormat",
    # Domain models
    "FilterSpec",
    "BuiltQuery",
    "Partition",
    "PartitionResult",
    "ErrorInfo",
    "SearchOutcome",
    "SeenEntry",
]
