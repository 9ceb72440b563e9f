"""
Core module for Disaster Data Platform.

Provides:
- Event data model
- Location resolution with gazetteer fallback
- Type classification and severity scoring
- Record normalization
- Filtering, summaries and export
"""

from disaster_data.core.classification import classify, is_natural_disaster
from disaster_data.core.dates import construct_date, parse_date
from disaster_data.core.export import EventExporter, ExportConfig, ExportFormat, export_events
from disaster_data.core.filters import FilterOptions, filter_events
from disaster_data.core.geocoding import (
    Gazetteer,
    GeocodeResult,
    LocationInput,
    LocationResolver,
    is_valid_coordinates,
    load_gazetteer,
)
from disaster_data.core.models import (
    Coordinates,
    DisasterEvent,
    DisasterImpact,
    EmdatRecord,
    Location,
)
from disaster_data.core.normalizer import RecordNormalizer
from disaster_data.core.severity import score, score_threshold, score_with
from disaster_data.core.statistics import (
    events_to_dataframe,
    overview,
    summary_by_country,
    summary_by_type,
    summary_by_year,
)

__all__ = [
    # Models
    "Coordinates",
    "DisasterEvent",
    "DisasterImpact",
    "EmdatRecord",
    "Location",
    # Geocoding
    "Gazetteer",
    "GeocodeResult",
    "LocationInput",
    "LocationResolver",
    "is_valid_coordinates",
    "load_gazetteer",
    # Classification & severity
    "classify",
    "is_natural_disaster",
    "score",
    "score_threshold",
    "score_with",
    # Normalization
    "RecordNormalizer",
    "construct_date",
    "parse_date",
    # Filtering & statistics
    "FilterOptions",
    "filter_events",
    "events_to_dataframe",
    "overview",
    "summary_by_country",
    "summary_by_type",
    "summary_by_year",
    # Export
    "EventExporter",
    "ExportConfig",
    "ExportFormat",
    "export_events",
]
