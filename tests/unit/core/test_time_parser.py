"""Tests for relaylogs.core.time_parser."""
from __future__ import annotations

import time
from datetime import datetime, timedelta, timezone

import pytest

from relaylogs.core.time_parser import (
    parse_literal_timestamp,
    parse_natural_date,
    parse_time_expression,
)

# Wednesday
NOW = datetime(2024, 1, 10, 15, 30, tzinfo=timezone.utc)


class TestLiteralTimestamps:
    def test_iso_with_zulu(self):
        assert parse_time_expression("2024-01-01T00:00:00Z") == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_iso_with_offset_is_preserved(self):
        result = parse_time_expression("2024-01-01T02:00:00+02:00")
        assert result == datetime(2024, 1, 1, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("2024-01-01", datetime(2024, 1, 1, tzinfo=timezone.utc)),
            ("2024-01-01 12:30", datetime(2024, 1, 1, 12, 30, tzinfo=timezone.utc)),
            ("2024", datetime(2024, 1, 1, tzinfo=timezone.utc)),
            ("2024/03/05", datetime(2024, 3, 5, tzinfo=timezone.utc)),
            ("Mon Jan 01 2024 09:30:00", datetime(2024, 1, 1, 9, 30, tzinfo=timezone.utc)),
        ],
    )
    def test_naive_literals_are_utc(self, text, expected):
        assert parse_literal_timestamp(text) == expected

    def test_literal_wins_over_duration(self):
        # "2024" would otherwise be a bare millisecond duration
        assert parse_time_expression("2024", now=NOW).year == 2024


class TestNaturalDates:
    def test_keywords_keep_time_of_day(self):
        assert parse_natural_date("yesterday", NOW) == NOW - timedelta(days=1)
        assert parse_natural_date("tomorrow", NOW) == NOW + timedelta(days=1)
        assert parse_natural_date("now", NOW) == NOW

    @pytest.mark.parametrize(
        "text,expected_day",
        [
            ("last friday", 5),
            ("next monday", 15),
            ("friday", 5),
            ("wednesday", 10),
            ("this thursday", 11),
        ],
    )
    def test_weekdays_resolve_to_midnight(self, text, expected_day):
        assert parse_natural_date(text, NOW) == datetime(2024, 1, expected_day, tzinfo=timezone.utc)

    def test_ago_and_in(self):
        assert parse_natural_date("3 days ago", NOW) == NOW - timedelta(days=3)
        assert parse_natural_date("an hour ago", NOW) == NOW - timedelta(hours=1)
        assert parse_natural_date("in 2 hours", NOW) == NOW + timedelta(hours=2)

    def test_relative_period(self):
        assert parse_natural_date("last week", NOW) == NOW - timedelta(weeks=1)

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Jan 15 2023", datetime(2023, 1, 15, tzinfo=timezone.utc)),
            ("January 15th, 2023", datetime(2023, 1, 15, tzinfo=timezone.utc)),
            ("15th March", datetime(2024, 3, 15, tzinfo=timezone.utc)),
            ("March 2023", datetime(2023, 3, 1, tzinfo=timezone.utc)),
        ],
    )
    def test_calendar_dates(self, text, expected):
        assert parse_natural_date(text, NOW) == expected

    def test_impossible_date_is_none(self):
        assert parse_natural_date("Feb 30", NOW) is None


class TestDurations:
    def test_duration_is_offset_from_now(self):
        assert parse_time_expression("2 hours", now=NOW) == NOW + timedelta(hours=2)

    def test_duration_without_explicit_now(self):
        expected = datetime.now(timezone.utc) + timedelta(hours=2)
        result = parse_time_expression("2 hours")
        assert abs(result - expected) < timedelta(seconds=5)

    @pytest.mark.parametrize(
        "text,delta",
        [
            ("3d", timedelta(days=3)),
            ("90s", timedelta(seconds=90)),
            ("-1h30m", -timedelta(minutes=90)),
        ],
    )
    def test_compact_durations(self, text, delta):
        assert parse_time_expression(text, now=NOW) == NOW + delta

    def test_naive_now_is_treated_as_utc(self):
        naive = NOW.replace(tzinfo=None)
        assert parse_time_expression("1h", now=naive) == NOW + timedelta(hours=1)


class TestUnparseable:
    @pytest.mark.parametrize("text", [None, "", "   ", "not a date", "2 potatoes"])
    def test_returns_none(self, text):
        assert parse_time_expression(text, now=NOW) is None

    def test_long_digit_run_is_rejected_quickly(self):
        started = time.perf_counter()
        assert parse_time_expression("1" * 30 + "!", now=NOW) is None
        assert time.perf_counter() - started < 0.5
