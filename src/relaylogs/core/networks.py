"""Resolve a user-typed network name against the registered networks."""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class Resolved:
    network: str
    # (match index, candidate) pairs, best first; empty for exact matches
    scores: list[tuple[int, str]] = field(default_factory=list)


@dataclass(frozen=True)
class Ambiguous:
    query: str
    candidates: list[tuple[int, str]]


@dataclass(frozen=True)
class NotMatched:
    query: str


NetworkMatch = Union[Resolved, Ambiguous, NotMatched]


def match_network(name: str, registered: Iterable[str]) -> NetworkMatch:
    """
    Match ``name`` against registered network names.

    An exact name wins outright. Otherwise every registered name containing
    ``name`` is scored by where the match starts; the earliest start wins,
    and a tie for earliest is ambiguous.
    """
    registered = list(registered)
    if name in registered:
        return Resolved(network=name)

    scored = sorted(
        ((candidate.find(name), candidate) for candidate in registered if name and name in candidate),
        key=lambda pair: pair[0],
    )
    if not scored:
        return NotMatched(query=name)

    if len(scored) > 1 and scored[0][0] == scored[1][0]:
        return Ambiguous(query=name, candidates=scored)

    return Resolved(network=scored[0][1], scores=scored)
