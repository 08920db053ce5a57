"""Tests for relaylogs.models.domain."""
from __future__ import annotations

from pathlib import Path

import pytest

from relaylogs.models import ErrorInfo, FilterSpec, Partition, PartitionResult, SearchOutcome


class TestFilterSpec:
    def test_from_dict_aliases(self):
        spec = FilterSpec.from_dict(
            {"nick": "alice", "or": True, "strictStrings": True, "from": "1h", "to": "2h", "fromServer": True}
        )
        assert spec.nick == "alice"
        assert spec.use_or
        assert spec.strict_strings
        assert (spec.from_time, spec.to_time) == ("1h", "2h")
        assert spec.from_server

    def test_from_dict_unknown_option(self):
        with pytest.raises(ValueError, match="Unknown filter option"):
            FilterSpec.from_dict({"colour": "red"})

    def test_ored_alone_enables_or(self):
        assert FilterSpec(ored=True).use_or
        assert not FilterSpec().use_or

    def test_with_overrides_copies(self):
        spec = FilterSpec(nick="alice")
        other = spec.with_overrides(nick="bob")
        assert spec.nick == "alice"
        assert other.nick == "bob"


class TestPartition:
    def test_channel_and_visibility(self):
        partition = Partition("libera", "#python.sqlite3", Path("/a/#python.sqlite3"), ".sqlite3")
        assert partition.channel == "#python"
        assert partition.is_public()
        assert not Partition("libera", "bob.sqlite3", Path("/a/bob.sqlite3"), ".sqlite3").is_public()


class TestResults:
    def test_failed_result(self):
        result = PartitionResult.failed("#python", OSError("gone"))
        assert not result.ok
        assert result.rows == []

    def test_outcome_to_dict_with_error(self):
        outcome = SearchOutcome(
            total_lines=0,
            search_results={},
            query_time_ms=0.0,
            query_time_human="0 seconds",
            error=ErrorInfo.from_exception(FileNotFoundError("no such network")),
        )
        assert outcome.to_dict()["error"] == {"type": "FileNotFoundError", "message": "no such network"}
