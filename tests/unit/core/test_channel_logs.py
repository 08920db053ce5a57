"""Tests for relaylogs.core.channel_logs."""
from __future__ import annotations

import sqlite3
from unittest.mock import MagicMock

import pytest

from relaylogs.core.channel_logs import ChannelLogReader, get_formatter
from relaylogs.core.errors import LogFormatError, QueryBuildError
from relaylogs.core.matching import PatternCache
from relaylogs.models import FilterSpec, LogFormat

NETWORK = "libera"
# 2024-01-01T00:00:00Z
JAN_1_2024_MS = 1704067200000


@pytest.fixture
def python_channel(network_dir, make_partition, message_row):
    make_partition(
        network_dir / "#python.sqlite3",
        [
            message_row(JAN_1_2024_MS, "alice", "hello"),
            message_row(JAN_1_2024_MS + 1500, "Bob", "hi alice"),
            message_row(JAN_1_2024_MS + 3000, "carol", "morning"),
        ],
    )
    return network_dir


class TestFormatters:
    def test_txt_line(self):
        line = get_formatter("txt")({"__drcIrcRxTs": JAN_1_2024_MS + 1500, "nick": "alice", "message": "hello"})
        assert line == "[2024-01-01T00:00:01.500Z] <alice> hello"

    def test_json_is_identity(self):
        row = {"nick": "alice"}
        assert get_formatter(LogFormat.JSON)(row) is row

    def test_unknown_format(self):
        with pytest.raises(LogFormatError, match="bad format xml"):
            get_formatter("xml")


class TestChannelLogReader:
    def test_json_rows(self, config, python_channel):
        rows = ChannelLogReader(config).read(NETWORK, "#python")
        assert [row["nick"] for row in rows] == ["alice", "Bob", "carol"]

    def test_txt_rows(self, config, python_channel):
        lines = ChannelLogReader(config).read(NETWORK, "#python", fmt="txt")
        assert lines[0] == "[2024-01-01T00:00:00.000Z] <alice> hello"

    def test_filters_apply(self, config, python_channel):
        rows = ChannelLogReader(config).read(NETWORK, "#python", FilterSpec(message="%alice%"))
        assert [row["nick"] for row in rows] == ["Bob"]

    def test_filter_by_nick(self, config, python_channel):
        cache = PatternCache()
        reader = ChannelLogReader(config, pattern_cache=cache)

        rows = reader.read(NETWORK, "#python", filter_by_nick="car,/^b/i")

        assert [row["nick"] for row in rows] == ["Bob", "carol"]
        assert "/^b/i" in cache

    def test_filter_by_nick_list(self, config, python_channel):
        rows = ChannelLogReader(config).read(NETWORK, "#python", filter_by_nick=["alice"])
        assert [row["nick"] for row in rows] == ["alice"]

    def test_bad_format_raises_before_io(self, config, python_channel):
        executor = MagicMock()
        reader = ChannelLogReader(config, executor=executor)
        with pytest.raises(QueryBuildError):
            reader.read(NETWORK, "#python", fmt="xml")
        executor.fetch_rows.assert_not_called()

    def test_missing_channel_propagates(self, config, python_channel):
        with pytest.raises(sqlite3.OperationalError):
            ChannelLogReader(config).read(NETWORK, "#nowhere")

    def test_disabled_returns_none(self, disabled_config, python_channel):
        assert ChannelLogReader(disabled_config).read(NETWORK, "#python") is None
