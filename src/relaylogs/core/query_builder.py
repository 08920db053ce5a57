"""Translate a FilterSpec into parametrized SQL for one channel partition.

User-facing values only ever travel through the parameter list. Column
names used in projections are checked against an identifier pattern since
they cannot be bound as parameters.
"""
from __future__ import annotations

import re
from datetime import datetime

from relaylogs.config.constants import PARTITION_TABLE, TIMESTAMP_COLUMN
from relaylogs.core.durations import to_epoch_ms
from relaylogs.core.errors import QueryBuildError
from relaylogs.core.time_parser import parse_time_expression
from relaylogs.models import BuiltQuery, FilterSpec, LogicOp

# (FilterSpec field, storage column), in clause emission order
TEXT_FILTERS: tuple[tuple[str, str], ...] = (
    ("message", "message"),
    ("nick", "nick"),
    ("channel", "target"),
    ("target", "target"),
    ("host", "hostname"),
    ("hostname", "hostname"),
    ("ident", "ident"),
)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _check_identifier(name: str) -> str:
    name = name.strip()
    if not _IDENTIFIER.match(name):
        raise QueryBuildError(f"Invalid column name: {name!r}")
    return name


def _projection(spec: FilterSpec) -> str:
    aggregate = spec.aggregate
    if aggregate is not None:
        func, column = aggregate
        return f"{func}({_check_identifier(column)})"

    columns = (spec.columns or "*").strip()
    if columns != "*":
        columns = ", ".join(_check_identifier(c) for c in columns.split(","))
    return f"DISTINCT {columns}" if spec.distinct else columns


def _bound_value(bound: datetime | int | float | None):
    if isinstance(bound, datetime):
        return to_epoch_ms(bound)
    return bound


def build_query(
    spec: FilterSpec,
    from_time: datetime | int | float | None = None,
    to_time: datetime | int | float | None = None,
    *,
    table: str = PARTITION_TABLE,
) -> BuiltQuery:
    """
    Build the SELECT for one partition.

    The first emitted clause is introduced by WHERE and every later one by
    the logic operator (AND, or OR when ``spec.use_or``). Parameters are
    appended in clause order.

    Args:
        spec: Search request
        from_time: Resolved lower time bound (instant or epoch ms)
        to_time: Resolved upper time bound (instant or epoch ms)
        table: Table holding the channel's events

    Returns:
        BuiltQuery whose params align positionally with its placeholders

    Raises:
        QueryBuildError: If a projection column is not a valid identifier
    """
    logic_op = (LogicOp.OR if spec.use_or else LogicOp.AND).value
    string_comp = "=" if spec.strict_strings else "LIKE"

    candidates: list[tuple[object, str]] = [
        (getattr(spec, field_name), f"{column} {string_comp}")
        for field_name, column in TEXT_FILTERS
    ]
    candidates.extend([
        (spec.type, "type ="),
        (_bound_value(from_time), f"{TIMESTAMP_COLUMN} >="),
        (_bound_value(to_time), f"{TIMESTAMP_COLUMN} <="),
    ])

    sql = f"SELECT {_projection(spec)} FROM {_check_identifier(table)}"
    params: list[object] = []
    for value, clause in candidates:
        if not value:
            continue
        sql += f" {logic_op if params else 'WHERE'} {clause} ?"
        params.append(value)

    if spec.from_server:
        sql += f" {logic_op if params else 'WHERE'} from_server = 1"

    return BuiltQuery(sql=sql, params=tuple(params))


def resolve_time_window(
    spec: FilterSpec, now: datetime | None = None
) -> tuple[datetime | None, datetime | None]:
    """Resolve the spec's raw from/to strings; unparseable bounds become None."""
    return (
        parse_time_expression(spec.from_time, now),
        parse_time_expression(spec.to_time, now),
    )


def prepare_query(spec: FilterSpec, now: datetime | None = None) -> BuiltQuery:
    """Resolve the time window and build the query in one step."""
    from_time, to_time = resolve_time_window(spec, now)
    return build_query(spec, from_time, to_time)
