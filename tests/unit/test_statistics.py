"""Unit tests for dashboard aggregates."""

from __future__ import annotations

import pytest

from disaster_data.core.models import DisasterEvent
from disaster_data.core.normalizer import RecordNormalizer
from disaster_data.core.statistics import (
    EVENT_COLUMNS,
    events_to_dataframe,
    overview,
    summary_by_country,
    summary_by_type,
    summary_by_year,
)


@pytest.fixture()
def events(normalizer: RecordNormalizer, make_row) -> list[DisasterEvent]:
    rows = [
        make_row(),
        make_row(**{
            "Disaster No": "2011-0200-JPN",
            "Disaster Type": "Flood",
            "Disaster Subtype": "",
            "Start Date": "2011-09-01",
            "Total Deaths": "4",
            "Total Affected": "",
            "Total Damages ('000 US$)": "",
        }),
        make_row(**{
            "Disaster No": "2022-0363-PAK",
            "Disaster Type": "Flood",
            "Country": "Pakistan",
            "Start Date": "2022-06-14",
            "Total Deaths": "1739",
            "Total Affected": "33000000",
            "Total Damages ('000 US$)": "15000000",
        }),
    ]
    return [normalizer.normalize(row, i) for i, row in enumerate(rows)]


def test_events_to_dataframe(events: list[DisasterEvent]) -> None:
    df = events_to_dataframe(events)

    assert list(df.columns) == EVENT_COLUMNS
    assert len(df) == 3
    assert df.loc[0, "id"] == "emdat-2011-0082-JPN"
    assert df.loc[2, "country"] == "Pakistan"
    assert df.loc[0, "fallback_level"] == "country"


def test_summary_by_type(events: list[DisasterEvent]) -> None:
    df = summary_by_type(events)

    assert list(df["type"]) == ["flood", "earthquake"]
    flood = df.iloc[0]
    assert flood["event_count"] == 2
    assert flood["deaths"] == 1743
    assert flood["affected"] == 33_000_000
    assert flood["economic_loss_usd"] == pytest.approx(15_000_000_000)


def test_summary_by_year(events: list[DisasterEvent]) -> None:
    df = summary_by_year(events)

    assert list(df["year"]) == [2011, 2022]
    assert list(df["event_count"]) == [2, 1]
    assert df.iloc[0]["deaths"] == 19850


def test_summary_by_country(events: list[DisasterEvent]) -> None:
    df = summary_by_country(events)

    assert list(df["country"]) == ["Japan", "Pakistan"]
    assert df.iloc[0]["affected"] == 368820


def test_empty_summaries() -> None:
    assert summary_by_type([]).empty
    assert list(summary_by_country([]).columns) == ["country", "event_count", "deaths", "affected", "economic_loss_usd"]


def test_overview(events: list[DisasterEvent]) -> None:
    totals = overview(events)

    assert totals.event_count == 3
    assert totals.deaths == 19846 + 4 + 1739
    assert totals.affected == 368820 + 33_000_000
    assert totals.economic_loss_usd == pytest.approx(225_000_000_000)
    assert totals.countries == 2
    assert (totals.first_year, totals.last_year) == (2011, 2022)
    assert overview([]).to_dict()["first_year"] is None
