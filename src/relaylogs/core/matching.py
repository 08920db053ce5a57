"""Ad hoc matching of field values against substring or /regex/flags specs."""
from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

_REGEX_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
    "g": 0,  # global has no meaning for a single test
}


class PatternCache:
    """Compiled patterns keyed by their raw ``/regex/flags`` spec.

    Entries are never evicted; the cache grows with the number of distinct
    specs it sees, so scope an instance to a session or a request.
    """

    def __init__(self) -> None:
        self._patterns: dict[str, re.Pattern[str]] = {}

    def __len__(self) -> int:
        return len(self._patterns)

    def __contains__(self, spec: str) -> bool:
        return spec in self._patterns

    def clear(self) -> None:
        self._patterns.clear()

    def compile(self, spec: str) -> re.Pattern[str]:
        """
        Compile (or fetch) the pattern for a ``/regex/flags`` spec.

        Raises:
            ValueError: If the spec has no closing slash, unknown flags or an
                invalid expression
        """
        cached = self._patterns.get(spec)
        if cached is not None:
            return cached

        closing = spec.rfind("/")
        if closing < 1:
            raise ValueError(f"bad regex spec {spec!r}")

        flags = 0
        for flag in spec[closing + 1:]:
            if flag not in _REGEX_FLAGS:
                raise ValueError(f"bad regex flag {flag!r} in {spec!r}")
            flags |= _REGEX_FLAGS[flag]

        try:
            pattern = re.compile(spec[1:closing], flags)
        except re.error as exc:
            raise ValueError(f"bad regex spec {spec!r}: {exc}") from exc

        self._patterns[spec] = pattern
        logger.debug("Cached regex for %r", spec)
        return pattern

    def matches(self, spec: str, value: str) -> bool:
        """Regex search for ``/.../`` specs, plain substring test otherwise."""
        if spec.startswith("/"):
            return self.compile(spec).search(value) is not None
        return spec in value
