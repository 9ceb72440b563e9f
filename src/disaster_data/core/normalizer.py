"""
EMDAT record normalization.

Turns one raw EMDAT row into one DisasterEvent, or None when the row
cannot be placed on a map or in time. Rejections are logged with the
row index and the offending field; nothing raises past `normalize`.

Steps:
    1. optional natural-hazard inclusion filter
    2. location resolution (coordinates -> city -> region -> country)
    3. start date (mandatory) and end date (optional)
    4. lenient numeric parsing of impact figures
    5. type classification, severity scoring, description
"""

import logging
import math
from datetime import datetime
from typing import Any, Mapping

from disaster_data.config import (
    COL_AID_CONTRIBUTION,
    COL_COUNTRY,
    COL_DISASTER_NO,
    COL_DISASTER_SUBTYPE,
    COL_DISASTER_TYPE,
    COL_END_DATE,
    COL_END_DAY,
    COL_END_MONTH,
    COL_END_YEAR,
    COL_EVENT_NAME,
    COL_INFRASTRUCTURE_DAMAGE,
    COL_INSURED_DAMAGES,
    COL_LATITUDE,
    COL_LOCATION,
    COL_LONGITUDE,
    COL_NO_HOMELESS,
    COL_NO_INJURED,
    COL_NO_MISSING,
    COL_RECONSTRUCTION_COSTS,
    COL_REGION,
    COL_START_DATE,
    COL_START_DAY,
    COL_START_MONTH,
    COL_START_YEAR,
    COL_TOTAL_AFFECTED,
    COL_TOTAL_DAMAGES,
    COL_TOTAL_DAMAGES_ADJUSTED,
    COL_TOTAL_DEATHS,
    COL_YEAR,
    EventSource,
    SeverityModel,
    settings,
)
from disaster_data.core.classification import classify, is_natural_disaster
from disaster_data.core.dates import construct_date, parse_date
from disaster_data.core.geocoding import LocationInput, LocationResolver, load_gazetteer
from disaster_data.core.models import (
    Coordinates,
    DisasterEvent,
    DisasterImpact,
    EmdatRecord,
    Location,
)
from disaster_data.core.severity import score_with
from disaster_data.exceptions import RecordRejectedError

LOGGER = logging.getLogger(__name__)

# EMDAT reports money in thousands of US$.
THOUSANDS = 1000


# =============================================================================
# CELL PARSING
# =============================================================================


def parse_float(value: str | None) -> float | None:
    """Parse a numeric cell, accepting thousands separators."""
    if value is None:
        return None
    text = str(value).strip().replace(",", "")
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_int(value: str | None) -> int | None:
    """Parse a count cell; fractional values are truncated."""
    number = parse_float(value)
    if number is None:
        return None
    return int(number)


def _positive_int(value: str) -> int | None:
    """Count cell; zero and negative counts are treated as unreported."""
    number = parse_int(value)
    return number if number and number > 0 else None


def _thousands_usd(value: str | None) -> float | None:
    number = parse_float(value)
    if not number or number < 0:
        return None
    return number * THOUSANDS


def _optional_text(value: str) -> str | None:
    return value or None


# =============================================================================
# DESCRIPTION
# =============================================================================


def build_description(
    disaster_type: str,
    sub_type: str | None,
    country: str,
    deaths: int | None,
    affected: int | None,
    economic_loss_usd: float | None,
) -> str:
    """
    Human-readable synopsis of an event.

    Example:
        "A flash flood (flood) occurred in Pakistan, resulting in 1,739
        deaths and affecting 33,000,000 people."
    """
    type_text = disaster_type.lower()
    if sub_type:
        subject = f"{sub_type.lower()} ({type_text})"
    else:
        subject = type_text

    text = f"A {subject} occurred in {country}"
    has_clause = False

    if deaths:
        text += f", resulting in {deaths:,} deaths"
        has_clause = True
    if affected:
        text += f"{' and' if has_clause else ','} affecting {affected:,} people"
        has_clause = True
    if economic_loss_usd:
        text += f"{' and' if has_clause else ','} with economic losses of ${economic_loss_usd:,.0f}"

    return text + "."


# =============================================================================
# NORMALIZER
# =============================================================================


class RecordNormalizer:
    """
    Normalize EMDAT records into DisasterEvents.

    The normalizer holds no per-record state: the same record and index
    always give an equal event.
    """

    def __init__(
        self,
        resolver: LocationResolver,
        *,
        natural_disasters_only: bool = False,
        severity_model: SeverityModel = SeverityModel.COMPOSITE,
        source_url: str | None = "https://www.emdat.be",
    ):
        """
        Args:
            resolver: Location resolver backed by a loaded gazetteer.
            natural_disasters_only: Reject records whose type/subtype does
                not mention a natural hazard.
            severity_model: Severity scoring model.
            source_url: Provenance link stored on every event.
        """
        self.resolver = resolver
        self.natural_disasters_only = natural_disasters_only
        self.severity_model = SeverityModel(severity_model)
        self.source_url = source_url

    @classmethod
    def from_settings(cls, **overrides: Any) -> "RecordNormalizer":
        """Build a normalizer from the application settings."""
        options: dict[str, Any] = {
            "natural_disasters_only": settings.natural_disasters_only,
            "severity_model": settings.severity_model,
            "source_url": settings.source_url,
        }
        options.update({k: v for k, v in overrides.items() if v is not None})
        gazetteer = load_gazetteer(options.pop("gazetteer_path", None))
        return cls(LocationResolver(gazetteer), **options)

    def normalize(self, record: Mapping[str, Any], index: int) -> DisasterEvent | None:
        """
        Transform one raw record, logging and dropping it if rejected.

        Args:
            record: Raw row (column name -> cell value).
            index: Position of the row in its batch; used for the id when
                the row has no disaster number.

        Returns:
            The event, or None if the record was rejected.
        """
        try:
            return self.transform(record, index)
        except RecordRejectedError as e:
            LOGGER.warning("Record %d rejected: %s", index, e.reason)
            return None

    def transform(self, record: Mapping[str, Any], index: int) -> DisasterEvent:
        """
        Transform one raw record.

        Raises:
            RecordRejectedError: With the reason the record cannot become an event.
        """
        if not isinstance(record, EmdatRecord):
            record = EmdatRecord(record)

        raw_type = record[COL_DISASTER_TYPE]
        raw_subtype = record[COL_DISASTER_SUBTYPE]
        country = record[COL_COUNTRY]

        if self.natural_disasters_only and not is_natural_disaster(raw_type, raw_subtype):
            raise RecordRejectedError(f"{COL_DISASTER_TYPE}={raw_type!r} is not a natural disaster")

        # Location
        geocoded = self.resolver.resolve(self._location_input(record))
        if geocoded.coordinates is None:
            raise RecordRejectedError(
                f"no coordinates for {COL_COUNTRY}={country!r} ({'; '.join(geocoded.errors)})"
            )
        if geocoded.errors:
            LOGGER.debug(
                "Record %d located at %s level: %s",
                index,
                geocoded.fallback_level.value,
                "; ".join(geocoded.errors),
            )

        # Dates
        start_field, start_date = self._start_date(record)
        if start_date is None:
            raise RecordRejectedError(f"unparseable {start_field}={record[start_field]!r}")
        end_date = self._end_date(record, index)

        # Impact
        deaths = _positive_int(record[COL_TOTAL_DEATHS]) or 0
        affected = _positive_int(record[COL_TOTAL_AFFECTED])
        damages = record[COL_TOTAL_DAMAGES]
        if parse_float(damages) is None:
            damages = record[COL_TOTAL_DAMAGES_ADJUSTED]
        economic_loss = _thousands_usd(damages)

        severity = score_with(self.severity_model, deaths, affected, economic_loss)
        impact = DisasterImpact(
            deaths=deaths,
            severity_level=severity,
            injured=_positive_int(record[COL_NO_INJURED]),
            missing=_positive_int(record[COL_NO_MISSING]),
            affected=affected,
            displaced=_positive_int(record[COL_NO_HOMELESS]),
            economic_loss_usd=economic_loss,
            insured_loss_usd=_thousands_usd(record[COL_INSURED_DAMAGES]),
            reconstruction_cost_usd=_thousands_usd(record[COL_RECONSTRUCTION_COSTS]),
            aid_contribution_usd=_thousands_usd(record[COL_AID_CONTRIBUTION]),
            infrastructure_damage=_optional_text(record[COL_INFRASTRUCTURE_DAMAGE]),
        )

        disaster_type = classify(raw_type, raw_subtype)
        type_label = raw_type or disaster_type.value
        coords = geocoded.coordinates

        return DisasterEvent(
            id=f"emdat-{record[COL_DISASTER_NO] or index}",
            name=record[COL_EVENT_NAME] or f"{type_label} in {country}",
            type=disaster_type,
            sub_type=_optional_text(raw_subtype),
            start_date=start_date,
            end_date=end_date,
            location=Location(
                lat=coords.lat,
                lng=coords.lng,
                country=country,
                region=_optional_text(record[COL_REGION]),
                city=_optional_text(record[COL_LOCATION]),
            ),
            impact=impact,
            description=build_description(
                type_label, raw_subtype or None, country, deaths, affected, economic_loss
            ),
            source=EventSource.EMDAT,
            source_url=self.source_url,
            fallback_level=geocoded.fallback_level,
        )

    @staticmethod
    def _location_input(record: EmdatRecord) -> LocationInput:
        lat = parse_float(record[COL_LATITUDE])
        lng = parse_float(record[COL_LONGITUDE])
        coordinates = Coordinates(lat, lng) if lat is not None and lng is not None else None
        return LocationInput(
            country=record[COL_COUNTRY],
            coordinates=coordinates,
            city=_optional_text(record[COL_LOCATION]),
            region=_optional_text(record[COL_REGION]),
        )

    @staticmethod
    def _start_date(record: EmdatRecord) -> tuple[str, datetime | None]:
        """Start date and the column it came from."""
        for column in (COL_START_DATE, COL_YEAR):
            if record[column]:
                return column, parse_date(record[column])
        return COL_START_YEAR, construct_date(
            record[COL_START_YEAR], record[COL_START_MONTH], record[COL_START_DAY]
        )

    @staticmethod
    def _end_date(record: EmdatRecord, index: int) -> datetime | None:
        if record[COL_END_DATE]:
            end_date = parse_date(record[COL_END_DATE])
            if end_date is None:
                LOGGER.debug("Record %d: ignoring unparseable %s=%r", index, COL_END_DATE, record[COL_END_DATE])
            return end_date
        return construct_date(record[COL_END_YEAR], record[COL_END_MONTH], record[COL_END_DAY])

