"""Pytest configuration and fixtures for relaylogs tests.

Partitions are real SQLite files laid out the way the relay writes them:
<archive>/<network>/<channel>.sqlite3 with a single ``channel`` table.
"""

from __future__ import annotations

import logging
import os
import sqlite3
from pathlib import Path

import pytest

from relaylogs.config.settings import ArchiveConfig, Config, NetworksConfig, SearchConfig
from relaylogs.core.logging_config import LogConfig

NETWORK = "libera"

# 2024-01-01T00:00:00Z in epoch milliseconds
JAN_1_2024_MS = 1704067200000
HOUR_MS = 3600 * 1000

_COLUMNS = ("__drcIrcRxTs", "nick", "ident", "hostname", "target", "message", "type", "from_server")


def _make_partition(path: Path, rows: list[dict]) -> Path:
    """Create a channel partition holding ``rows``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    con = sqlite3.connect(path)
    try:
        con.execute(
            """
            CREATE TABLE channel (
              __drcIrcRxTs INTEGER,
              nick TEXT,
              ident TEXT,
              hostname TEXT,
              target TEXT,
              message TEXT,
              type TEXT,
              from_server INTEGER DEFAULT 0
            )
            """
        )
        con.executemany(
            f"INSERT INTO channel ({', '.join(_COLUMNS)}) VALUES ({', '.join('?' for _ in _COLUMNS)})",
            [tuple(row.get(col, 0 if col == "from_server" else None) for col in _COLUMNS) for row in rows],
        )
        con.commit()
    finally:
        con.close()
    return path


def _message_row(ts: int, nick: str, message: str, target: str = "#python", **extra) -> dict:
    row = {
        "__drcIrcRxTs": ts,
        "nick": nick,
        "ident": f"~{nick}",
        "hostname": f"{nick}.example.org",
        "target": target,
        "message": message,
        "type": "privmsg",
    }
    row.update(extra)
    return row


@pytest.fixture
def make_partition():
    """Factory for channel partitions: make_partition(path, rows)."""
    return _make_partition


@pytest.fixture
def message_row():
    """Factory for a privmsg row: message_row(ts, nick, message, target="#python", **extra)."""
    return _message_row


@pytest.fixture(autouse=True)
def _clean_relaylogs_env(monkeypatch):
    """Keep developer RELAYLOGS_* settings out of the tests."""
    for key in list(os.environ):
        if key.startswith("RELAYLOGS_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def archive_root(tmp_path) -> Path:
    root = tmp_path / "archive"
    root.mkdir()
    return root


@pytest.fixture
def config(archive_root) -> Config:
    return Config(
        archive=ArchiveConfig(channels_to_file=True, path=str(archive_root), default_filetype="sqlite"),
        networks=NetworksConfig(registered=["libera", "oftc", "efnet"]),
        search=SearchConfig(public_channel_prefix="#"),
        logging=LogConfig(file_enabled=False, use_rich_console=False),
    )


@pytest.fixture
def disabled_config(config) -> Config:
    config.archive.channels_to_file = False
    return config


@pytest.fixture
def network_dir(archive_root) -> Path:
    path = archive_root / NETWORK
    path.mkdir()
    return path


@pytest.fixture
def populated_network(network_dir) -> Path:
    """Three public channels, one private query log, one unrelated file."""
    _make_partition(
        network_dir / "#python.sqlite3",
        [
            _message_row(JAN_1_2024_MS - 2 * HOUR_MS, "alice", "hello python"),
            _message_row(JAN_1_2024_MS + HOUR_MS, "bob", "asyncio question"),
            _message_row(JAN_1_2024_MS + 2 * HOUR_MS, "alice", "use asyncio.gather"),
        ],
    )
    _make_partition(
        network_dir / "#rust.sqlite3",
        [
            _message_row(JAN_1_2024_MS + 3 * HOUR_MS, "carol", "borrow checker", target="#rust"),
            _message_row(JAN_1_2024_MS + 4 * HOUR_MS, "alice", "lifetimes", target="#rust"),
        ],
    )
    _make_partition(
        network_dir / "#quiet.sqlite3",
        [_message_row(JAN_1_2024_MS, "dave", "anyone here?", target="#quiet")],
    )
    _make_partition(
        network_dir / "alice.sqlite3",
        [_message_row(JAN_1_2024_MS, "alice", "private hello", target="alice")],
    )
    (network_dir / "notes.txt").write_text("not a partition")
    return network_dir
