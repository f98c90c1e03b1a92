"""Tests for week arithmetic and event date parsing."""

from datetime import date

import pytest

from market_events.events.weeks import (
    current_week_start,
    falls_in_week,
    format_long_date,
    parse_event_dates,
    upcoming_week_start,
    week_end,
    week_month_names,
    week_start,
)


def test_weeks_start_on_sunday() -> None:
    # Monday, Saturday and Sunday of the same week
    assert week_start(date(2025, 12, 1)) == date(2025, 11, 30)
    assert week_start(date(2025, 12, 6)) == date(2025, 11, 30)
    assert week_start(date(2025, 11, 30)) == date(2025, 11, 30)
    assert week_end(date(2025, 11, 30)) == date(2025, 12, 6)


def test_current_and_upcoming_week() -> None:
    today = date(2025, 12, 3)

    assert current_week_start(today) == date(2025, 11, 30)
    assert upcoming_week_start(today) == date(2025, 12, 7)


def test_format_long_date() -> None:
    assert format_long_date(date(2025, 12, 1)) == "December 1 2025"


def test_week_month_names_across_month_boundary() -> None:
    assert week_month_names(date(2025, 11, 30)) == ["November", "December"]
    assert week_month_names(date(2025, 12, 7)) == ["December"]


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("December 1 2025", (date(2025, 12, 1), date(2025, 12, 1))),
        ("December 1, 2025", (date(2025, 12, 1), date(2025, 12, 1))),
        ("December 1-3 2025", (date(2025, 12, 1), date(2025, 12, 3))),
        ("Dec 2nd 2025", (date(2025, 12, 2), date(2025, 12, 2))),
        ("November 30 - December 2 2025", (date(2025, 11, 30), date(2025, 12, 2))),
        ("December 30 - January 2 2026", (date(2025, 12, 30), date(2026, 1, 2))),
        ("Week of December 1 2025", (date(2025, 12, 1), date(2025, 12, 1))),
    ],
)
def test_parse_event_dates(text: str, expected: tuple[date, date]) -> None:
    assert parse_event_dates(text) == expected


@pytest.mark.parametrize("text", ["TBD", "December 2025", "February 30 2025", "December 5-2 2025"])
def test_unparseable_dates(text: str) -> None:
    assert parse_event_dates(text) is None


def test_falls_in_week() -> None:
    start = date(2025, 11, 30)

    assert falls_in_week("December 1 2025", start)
    assert falls_in_week("November 28 - December 1 2025", start)
    assert not falls_in_week("December 8 2025", start)
    assert not falls_in_week("December 1 2024", start)
    assert not falls_in_week("TBD", start)
