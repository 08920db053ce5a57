"""Domain models for relaylogs - search request and result structures."""
from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

# Option names used by chat-side callers, mapped onto FilterSpec fields
_OPTION_ALIASES: dict[str, str] = {
    "or": "or_",
    "strictStrings": "strict_strings",
    "from": "from_time",
    "fromTime": "from_time",
    "to": "to_time",
    "toTime": "to_time",
    "fromServer": "from_server",
}


@dataclass
class FilterSpec:
    """A search request.

    Free-text fields match with ``LIKE`` (``=`` under ``strict_strings``);
    ``from_time``/``to_time`` hold raw user strings resolved at query time.
    When both ``max`` and ``min`` are given, ``min`` wins.
    """
    message: str | None = None
    nick: str | None = None
    channel: str | None = None
    target: str | None = None
    host: str | None = None
    hostname: str | None = None
    ident: str | None = None
    type: str | None = None
    from_time: str | None = None
    to_time: str | None = None
    or_: bool = False
    ored: bool = False
    strict_strings: bool = False
    distinct: bool = False
    max: str | None = None
    min: str | None = None
    columns: str | None = None
    everything: bool = False
    filetype: str | None = None
    from_server: bool = False

    @property
    def use_or(self) -> bool:
        return bool(self.or_ or self.ored)

    @property
    def aggregate(self) -> tuple[str, str] | None:
        """The (function, column) projection, if one was requested."""
        if self.min:
            return ("MIN", self.min)
        if self.max:
            return ("MAX", self.max)
        return None

    def with_overrides(self, **changes: Any) -> "FilterSpec":
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FilterSpec":
        """Build a FilterSpec from a caller's option mapping.

        Raises:
            ValueError: If an option name is not recognized
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown filter option: {key!r}")
            kwargs[name] = value
        return cls(**kwargs)


@dataclass(frozen=True)
class BuiltQuery:
    """Parametrized SQL plus its positional arguments."""
    sql: str
    params: tuple[Any, ...] = ()

    @property
    def placeholder_count(self) -> int:
        return self.sql.count("?")


@dataclass(frozen=True)
class Partition:
    """One channel's archive file."""
    network: str
    name: str
    path: Path
    extension: str

    @property
    def channel(self) -> str:
        if self.extension and self.name.endswith(self.extension):
            return self.name[: -len(self.extension)]
        return self.name

    def is_public(self, prefix: str = "#") -> bool:
        return self.name.startswith(prefix)


@dataclass
class PartitionResult:
    """Rows from one partition, or the error that prevented reading it."""
    channel: str
    rows: list[dict[str, Any]] = field(default_factory=list)
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, channel: str, error: Exception) -> "PartitionResult":
        return cls(channel=channel, rows=[], error=error)


@dataclass(frozen=True)
class ErrorInfo:
    type: str
    message: str

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ErrorInfo":
        return cls(type=type(exc).__name__, message=str(exc))

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type, "message": self.message}


@dataclass
class SearchOutcome:
    """Aggregate result of one search across a network's partitions."""
    total_lines: int
    search_results: dict[str, list[dict[str, Any]]]
    query_time_ms: float
    query_time_human: str
    error: ErrorInfo | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "queryTimeMs": self.query_time_ms,
            "queryTimeHuman": self.query_time_human,
            "totalLines": self.total_lines,
            "searchResults": self.search_results,
        }
        if self.error is not None:
            payload["error"] = self.error.to_dict()
        return payload


@dataclass(frozen=True)
class SeenEntry:
    """A channel's extremal matching timestamp."""
    channel: str
    timestamp_ms: int
    timestamp_human: str
