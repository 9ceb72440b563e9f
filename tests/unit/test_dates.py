"""Unit tests for date parsing and spreadsheet date reconstruction."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from disaster_data.core.dates import construct_date, parse_date, parse_upper_bound
from disaster_data.core.models import format_timestamp

UTC = timezone.utc


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2020-03-05", datetime(2020, 3, 5, tzinfo=UTC)),
        ("2020-03-05T10:30:00", datetime(2020, 3, 5, 10, 30, tzinfo=UTC)),
        ("2020-03-05T10:30:00Z", datetime(2020, 3, 5, 10, 30, tzinfo=UTC)),
        ("2020-03-05 12:00:00+02:00", datetime(2020, 3, 5, 10, 0, tzinfo=UTC)),
        ("1990", datetime(1990, 1, 1, tzinfo=UTC)),
        ("5/3/2020", datetime(2020, 3, 5, tzinfo=UTC)),
        ("05-03-2020", datetime(2020, 3, 5, tzinfo=UTC)),
        (" 2011-03-11 ", datetime(2011, 3, 11, tzinfo=UTC)),
    ],
)
def test_parse_date_formats(value: str, expected: datetime) -> None:
    assert parse_date(value) == expected


@pytest.mark.parametrize("value", ["", "   ", None, "not a date", "2020-13-45", "31/02/2020", "20200305"])
def test_parse_date_unparseable_is_none(value) -> None:
    assert parse_date(value) is None


def test_parse_date_accepts_date_objects() -> None:
    assert parse_date(date(2004, 12, 26)) == datetime(2004, 12, 26, tzinfo=UTC)
    assert parse_date(datetime(2004, 12, 26, 7, 58)) == datetime(2004, 12, 26, 7, 58, tzinfo=UTC)


def test_parse_date_converts_aware_values_to_utc() -> None:
    local = datetime(2004, 12, 26, 7, 58, tzinfo=timezone(timedelta(hours=7)))

    parsed = parse_date(local)

    assert parsed == datetime(2004, 12, 26, 0, 58, tzinfo=UTC)
    assert parsed.utcoffset() == timedelta(0)


def test_bare_year_formats_as_utc_midnight() -> None:
    assert format_timestamp(parse_date("1990")) == "1990-01-01T00:00:00Z"


@pytest.mark.parametrize(
    ("year", "month", "day", "expected"),
    [
        (2011, 3, 11, datetime(2011, 3, 11, tzinfo=UTC)),
        ("2011", "3", "11", datetime(2011, 3, 11, tzinfo=UTC)),
        (2011.0, 3.0, 11.0, datetime(2011, 3, 11, tzinfo=UTC)),
        (1990, None, None, datetime(1990, 1, 1, tzinfo=UTC)),
        (1990, "", "", datetime(1990, 1, 1, tzinfo=UTC)),
        (1990, 0, 0, datetime(1990, 1, 1, tzinfo=UTC)),
        (1990, 6, None, datetime(1990, 6, 1, tzinfo=UTC)),
    ],
)
def test_construct_date(year, month, day, expected: datetime) -> None:
    assert construct_date(year, month, day) == expected


@pytest.mark.parametrize(
    ("year", "month", "day"),
    [(None, 1, 1), ("", 1, 1), ("abc", 1, 1), (2020, 13, 1), (2020, 2, 30)],
)
def test_construct_date_invalid_is_none(year, month, day) -> None:
    assert construct_date(year, month, day) is None


END_OF_DAY = {"hour": 23, "minute": 59, "second": 59, "microsecond": 999999}


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2011", datetime(2011, 12, 31, tzinfo=UTC).replace(**END_OF_DAY)),
        ("2011-03-11", datetime(2011, 3, 11, tzinfo=UTC).replace(**END_OF_DAY)),
        ("11/03/2011", datetime(2011, 3, 11, tzinfo=UTC).replace(**END_OF_DAY)),
        (date(2011, 3, 11), datetime(2011, 3, 11, tzinfo=UTC).replace(**END_OF_DAY)),
        ("2011-03-11T06:00:00Z", datetime(2011, 3, 11, 6, tzinfo=UTC)),
        (datetime(2011, 3, 11), datetime(2011, 3, 11, tzinfo=UTC)),
        ("later", None),
        (None, None),
    ],
)
def test_parse_upper_bound(value, expected) -> None:
    assert parse_upper_bound(value) == expected
