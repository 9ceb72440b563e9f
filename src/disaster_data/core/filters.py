"""
Event filtering.

Applies the map view's filter options to a normalized event batch.
Filters only select; events are never modified and input order is kept.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from disaster_data.config import DisasterType
from disaster_data.core.dates import parse_date, parse_upper_bound
from disaster_data.core.models import DisasterEvent


@dataclass
class FilterOptions:
    """Criteria for selecting events. Empty criteria match everything."""

    types: list[DisasterType] = field(default_factory=list)
    sub_types: list[str] = field(default_factory=list)
    start_date: datetime | None = None
    end_date: datetime | None = None
    countries: list[str] = field(default_factory=list)
    min_deaths: int | None = None
    min_affected: int | None = None
    severity_level: int | None = None

    def __post_init__(self) -> None:
        self.types = [DisasterType(t) for t in self.types]
        # Event dates are UTC-aware; bounds must be too. Both bounds are inclusive.
        self.start_date = parse_date(self.start_date)
        self.end_date = parse_upper_bound(self.end_date)
        if self.severity_level is not None and not 1 <= self.severity_level <= 5:
            raise ValueError(f"Severity level must be between 1 and 5, got {self.severity_level}")

    @property
    def is_empty(self) -> bool:
        return not (
            self.types
            or self.sub_types
            or self.start_date
            or self.end_date
            or self.countries
            or self.min_deaths
            or self.min_affected
            or self.severity_level
        )

    def matches(self, event: DisasterEvent) -> bool:
        """True if the event passes every active criterion."""
        if self.types and event.type not in self.types:
            return False
        if self.sub_types and event.sub_type not in self.sub_types:
            return False
        if self.start_date and event.start_date < self.start_date:
            return False
        if self.end_date and event.start_date > self.end_date:
            return False
        if self.countries and event.location.country not in self.countries:
            return False
        if self.min_deaths and event.impact.deaths < self.min_deaths:
            return False
        if self.min_affected and (event.impact.affected or 0) < self.min_affected:
            return False
        if self.severity_level and event.impact.severity_level != self.severity_level:
            return False
        return True


def filter_events(events: Iterable[DisasterEvent], options: FilterOptions | None = None) -> list[DisasterEvent]:
    """
    Select events matching the given options.

    Args:
        events: Normalized events.
        options: Filter criteria; None keeps everything.

    Returns:
        Matching events in their original order.
    """
    events = list(events)
    if options is None or options.is_empty:
        return events
    return [e for e in events if options.matches(e)]


def list_sub_types(events: Iterable[DisasterEvent]) -> list[str]:
    """Distinct sub-types present in a batch, sorted."""
    return sorted({e.sub_type for e in events if e.sub_type})


def list_countries(events: Iterable[DisasterEvent]) -> list[str]:
    """Distinct countries present in a batch, sorted."""
    return sorted({e.location.country for e in events if e.location.country})
