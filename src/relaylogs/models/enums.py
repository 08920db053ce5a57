"""Enumerations for relaylogs."""
from __future__ import annotations

from enum import Enum


class LogicOp(Enum):
    """Operator joining successive filter clauses."""
    AND = "AND"
    OR = "OR"


class LogFormat(Enum):
    """Output format for single-channel log reads."""
    JSON = "json"
    TXT = "txt"
