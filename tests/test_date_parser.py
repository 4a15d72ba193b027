"""Tests for date parsing."""

from datetime import date

import pytest

from nexus.utils.date_parser import parse_date, try_parse_date


def test_day_first_when_year_is_last():
    assert try_parse_date("15/01/2024") == date(2024, 1, 15)
    assert try_parse_date("05/03/2024") == date(2024, 3, 5)


def test_year_first_when_year_leads():
    assert try_parse_date("2024/01/15") == date(2024, 1, 15)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("2024-01-15", date(2024, 1, 15)),
        ("2024-01-15T10:30:00", date(2024, 1, 15)),
        ("Jan 15 2024", date(2024, 1, 15)),
    ],
)
def test_generic_formats(raw, expected):
    """Non-slash dates are handled by dateutil."""
    assert try_parse_date(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "not a date", "31/02/2024"])
def test_unparseable_returns_none(raw):
    assert try_parse_date(raw) is None


def test_parse_date_falls_back_to_today():
    assert parse_date("garbage") == date.today()
    assert parse_date("15/01/2024") == date(2024, 1, 15)


@pytest.mark.parametrize("raw", ["05-03-2024", "05.03.2024", "05/03/24", "5-3-2024"])
def test_dash_dot_and_short_year_dates_are_day_first(raw):
    assert try_parse_date(raw) == date(2024, 3, 5)


def test_iso_dates_are_not_read_day_first():
    assert try_parse_date("2024-03-05") == date(2024, 3, 5)
    assert try_parse_date("2024-03-05T08:00:00") == date(2024, 3, 5)
