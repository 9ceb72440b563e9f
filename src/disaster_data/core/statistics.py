"""
Summary Statistics Module.

Aggregates for the dashboard views:
- Event counts and impact totals by type
- By year
- By country
- Batch overview
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import pandas as pd

from disaster_data.core.models import DisasterEvent

EVENT_COLUMNS = [
    "id",
    "name",
    "type",
    "sub_type",
    "start_date",
    "end_date",
    "year",
    "country",
    "region",
    "city",
    "lat",
    "lng",
    "fallback_level",
    "deaths",
    "injured",
    "missing",
    "affected",
    "displaced",
    "economic_loss_usd",
    "insured_loss_usd",
    "reconstruction_cost_usd",
    "aid_contribution_usd",
    "severity_level",
    "description",
    "source",
    "source_url",
]

SUMMARY_COLUMNS = ["event_count", "deaths", "affected", "economic_loss_usd"]


@dataclass
class Overview:
    """Totals for a batch of events."""
    event_count: int
    deaths: int
    affected: int
    economic_loss_usd: float
    countries: int
    first_year: int | None
    last_year: int | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_count": self.event_count,
            "deaths": self.deaths,
            "affected": self.affected,
            "economic_loss_usd": self.economic_loss_usd,
            "countries": self.countries,
            "first_year": self.first_year,
            "last_year": self.last_year,
        }


def event_row(event: DisasterEvent) -> dict[str, Any]:
    """Flatten one event into a dataframe row."""
    impact = event.impact
    return {
        "id": event.id,
        "name": event.name,
        "type": event.type.value,
        "sub_type": event.sub_type,
        "start_date": event.start_date,
        "end_date": event.end_date,
        "year": event.year,
        "country": event.location.country,
        "region": event.location.region,
        "city": event.location.city,
        "lat": event.location.lat,
        "lng": event.location.lng,
        "fallback_level": event.fallback_level.value,
        "deaths": impact.deaths,
        "injured": impact.injured,
        "missing": impact.missing,
        "affected": impact.affected,
        "displaced": impact.displaced,
        "economic_loss_usd": impact.economic_loss_usd,
        "insured_loss_usd": impact.insured_loss_usd,
        "reconstruction_cost_usd": impact.reconstruction_cost_usd,
        "aid_contribution_usd": impact.aid_contribution_usd,
        "severity_level": impact.severity_level,
        "description": event.description,
        "source": event.source.value,
        "source_url": event.source_url,
    }


def events_to_dataframe(events: Iterable[DisasterEvent]) -> pd.DataFrame:
    """One row per event, in input order."""
    return pd.DataFrame([event_row(e) for e in events], columns=EVENT_COLUMNS)


def _summarize(events: Iterable[DisasterEvent], key: str) -> pd.DataFrame:
    df = events_to_dataframe(events)
    if df.empty:
        return pd.DataFrame(columns=[key, *SUMMARY_COLUMNS])

    summary = (
        df.groupby(key)
        .agg(
            event_count=("id", "count"),
            deaths=("deaths", "sum"),
            affected=("affected", lambda s: s.fillna(0).sum()),
            economic_loss_usd=("economic_loss_usd", lambda s: s.fillna(0).sum()),
        )
        .reset_index()
    )
    summary["deaths"] = summary["deaths"].astype(int)
    summary["affected"] = summary["affected"].astype(int)
    summary["economic_loss_usd"] = summary["economic_loss_usd"].astype(float)
    return summary


def summary_by_type(events: Iterable[DisasterEvent]) -> pd.DataFrame:
    """Counts and impact totals per disaster type, most frequent first."""
    summary = _summarize(events, "type")
    return summary.sort_values(["event_count", "type"], ascending=[False, True]).reset_index(drop=True)


def summary_by_year(events: Iterable[DisasterEvent]) -> pd.DataFrame:
    """Counts and impact totals per start year, chronological."""
    return _summarize(events, "year").sort_values("year").reset_index(drop=True)


def summary_by_country(events: Iterable[DisasterEvent]) -> pd.DataFrame:
    """Counts and impact totals per country, most deaths first."""
    summary = _summarize(events, "country")
    return summary.sort_values(["deaths", "country"], ascending=[False, True]).reset_index(drop=True)


def overview(events: Iterable[DisasterEvent]) -> Overview:
    """Totals across a batch."""
    events = list(events)
    years = [e.year for e in events]
    return Overview(
        event_count=len(events),
        deaths=sum(e.impact.deaths for e in events),
        affected=sum(e.impact.affected or 0 for e in events),
        economic_loss_usd=float(sum(e.impact.economic_loss_usd or 0 for e in events)),
        countries=len({e.location.country for e in events}),
        first_year=min(years) if years else None,
        last_year=max(years) if years else None,
    )
