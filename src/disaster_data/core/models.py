"""
Data model for normalized disaster events.

`EmdatRecord` is the raw, per-row view of an EMDAT export; `DisasterEvent`
is the canonical event produced from it. Events are frozen so that
filters, summaries and exports only ever read them.
"""

import math
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any

from disaster_data.config import COLUMN_ALIASES, EMDAT_COLUMNS, DisasterType, EventSource, FallbackLevel

_KNOWN_COLUMNS = frozenset(EMDAT_COLUMNS)


def _norm_key(key: str) -> str:
    return re.sub(r"[^a-z0-9]+", "", str(key).lower())


def _cell_to_str(value: Any) -> str:
    """Convert a raw cell to a trimmed string ("" for blanks)."""
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (datetime, date)):
        text = value.isoformat()
    else:
        text = str(value).strip()
    if text.lower() in ("nan", "nat", "none"):
        return ""
    return text


class EmdatRecord(Mapping[str, str]):
    """
    One row of an EMDAT export, keyed by column name.

    Known EMDAT columns always resolve: a column that is missing from the
    row reads as "". Lookups try the exact header first and then a
    case- and punctuation-insensitive match, since exports vary in
    spelling ("Start year", "Start Year", "Start_Year").
    """

    def __init__(self, values: Mapping[str, Any] | None = None):
        self._values: dict[str, str] = {}
        self._aliases: dict[str, str] = {}
        for key, value in (values or {}).items():
            name = str(key).strip()
            self._values[name] = _cell_to_str(value)
            self._aliases.setdefault(_norm_key(name), name)

    def _lookup(self, key: str) -> str | None:
        if key in self._values:
            return key
        for candidate in (key, *COLUMN_ALIASES.get(key, ())):
            name = self._aliases.get(_norm_key(candidate))
            if name is not None:
                return name
        return None

    def __getitem__(self, key: str) -> str:
        name = self._lookup(key)
        if name is not None:
            return self._values[name]
        if key in _KNOWN_COLUMNS:
            return ""
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._lookup(key) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"EmdatRecord({self._values!r})"

    def with_values(self, **overrides: Any) -> "EmdatRecord":
        """Return a copy with some columns replaced (keys as column names)."""
        merged: dict[str, Any] = dict(self._values)
        for key, value in overrides.items():
            existing = self._lookup(key)
            if existing is not None:
                del merged[existing]
            merged[key] = value
        return EmdatRecord(merged)

    def to_dict(self) -> dict[str, str]:
        return dict(self._values)


@dataclass(frozen=True)
class Coordinates:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lng: float

    def to_dict(self) -> dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class Location:
    """Resolved location of an event."""

    lat: float
    lng: float
    country: str
    region: str | None = None
    city: str | None = None

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(self.lat, self.lng)

    @property
    def is_placeholder(self) -> bool:
        """True for the (0, 0) coordinate used by sources with no location."""
        return self.lat == 0 and self.lng == 0

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"lat": self.lat, "lng": self.lng, "country": self.country}
        if self.region:
            data["region"] = self.region
        if self.city:
            data["city"] = self.city
        return data


@dataclass(frozen=True)
class DisasterImpact:
    """Human and economic impact figures. Monetary values are in US$."""

    deaths: int = 0
    severity_level: int = 1
    injured: int | None = None
    missing: int | None = None
    affected: int | None = None
    displaced: int | None = None
    economic_loss_usd: float | None = None
    insured_loss_usd: float | None = None
    reconstruction_cost_usd: float | None = None
    aid_contribution_usd: float | None = None
    infrastructure_damage: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "deaths": self.deaths,
            "injured": self.injured,
            "missing": self.missing,
            "affected": self.affected,
            "displaced": self.displaced,
            "economicLossUSD": self.economic_loss_usd,
            "insuredLossUSD": self.insured_loss_usd,
            "reconstructionCostUSD": self.reconstruction_cost_usd,
            "aidContributionUSD": self.aid_contribution_usd,
            "infrastructureDamage": self.infrastructure_damage,
            "severityLevel": self.severity_level,
        }
        return {k: v for k, v in data.items() if v is not None}


def format_timestamp(value: datetime | None) -> str | None:
    """Render a datetime as an ISO-8601 UTC timestamp ending in Z."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class DisasterEvent:
    """A normalized, geolocated disaster event."""

    id: str
    name: str
    type: DisasterType
    start_date: datetime
    location: Location
    impact: DisasterImpact
    description: str
    sub_type: str | None = None
    end_date: datetime | None = None
    source: EventSource = EventSource.EMDAT
    source_url: str | None = None
    fallback_level: FallbackLevel = FallbackLevel.EXACT

    @property
    def country(self) -> str:
        return self.location.country

    @property
    def year(self) -> int:
        return self.start_date.year

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase shape used by map and chart views."""
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "subType": self.sub_type,
            "startDate": format_timestamp(self.start_date),
            "endDate": format_timestamp(self.end_date),
            "country": self.country,
            "location": self.location.to_dict(),
            "impact": self.impact.to_dict(),
            "description": self.description,
            "source": self.source.value,
            "sourceUrl": self.source_url,
        }
        return {k: v for k, v in data.items() if v is not None}
