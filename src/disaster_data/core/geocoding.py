"""
Location resolution with gazetteer fallback.

EMDAT rows rarely carry usable coordinates. The resolver walks from the
most to the least precise source of location information and reports
which level succeeded:

    exact coordinates -> city -> region -> country -> failed
"""

import json
import logging
import math
import re
from dataclasses import dataclass, field
from functools import lru_cache
from numbers import Real
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from disaster_data.config import FallbackLevel, settings
from disaster_data.core.models import Coordinates
from disaster_data.exceptions import GazetteerError

LOGGER = logging.getLogger(__name__)

GAZETTEER_NAMESPACES = ("cities", "regions", "countries")

_REGION_SUFFIX = re.compile(r"(province|state|region)$", re.IGNORECASE)


def is_valid_coordinates(lat: Any, lng: Any) -> bool:
    """
    Check that a lat/lng pair is a usable geographic coordinate.

    Both values must be finite real numbers within range, and the pair
    must not be the (0, 0) placeholder.
    """
    for value in (lat, lng):
        if isinstance(value, bool) or not isinstance(value, Real):
            return False
        if not math.isfinite(value):
            return False
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        return False
    return not (lat == 0 and lng == 0)


def normalize_region_name(region: str) -> str:
    """Strip a trailing province/state/region suffix."""
    return _REGION_SUFFIX.sub("", region.strip()).strip()


# =============================================================================
# GAZETTEER
# =============================================================================


@dataclass(frozen=True)
class Gazetteer:
    """
    Read-only place name lookup at city, region and country granularity.

    Built once and shared; every namespace is an immutable mapping.
    """

    cities: Mapping[str, Coordinates] = field(default_factory=lambda: MappingProxyType({}))
    regions: Mapping[str, Coordinates] = field(default_factory=lambda: MappingProxyType({}))
    countries: Mapping[str, Coordinates] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Gazetteer":
        """
        Build a gazetteer from ``{"cities": {name: {"lat", "lng"}}, ...}``.

        Entries with invalid coordinates are skipped with a warning.
        """
        namespaces: dict[str, Mapping[str, Coordinates]] = {}
        for namespace in GAZETTEER_NAMESPACES:
            raw = data.get(namespace) or {}
            if not isinstance(raw, Mapping):
                raise GazetteerError(f"Gazetteer section '{namespace}' must be an object")

            entries: dict[str, Coordinates] = {}
            for name, coords in raw.items():
                parsed = _parse_entry(coords)
                if parsed is None:
                    LOGGER.warning("Skipping gazetteer %s entry %r: invalid coordinates", namespace, name)
                    continue
                entries[str(name)] = parsed
            namespaces[namespace] = MappingProxyType(entries)

        return cls(**namespaces)

    @classmethod
    def from_json(cls, path: Path | str) -> "Gazetteer":
        """Load a gazetteer from a JSON file."""
        path = Path(path)
        try:
            with path.open(encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, json.JSONDecodeError) as e:
            raise GazetteerError(f"Cannot read gazetteer {path}: {e}") from e

        if not isinstance(data, Mapping):
            raise GazetteerError(f"Gazetteer {path} must contain a JSON object")
        return cls.from_dict(data)

    def lookup(self, namespace: str, name: str) -> Coordinates | None:
        """Exact-key lookup in one namespace."""
        return getattr(self, namespace).get(name)

    def __len__(self) -> int:
        return len(self.cities) + len(self.regions) + len(self.countries)


def _parse_entry(coords: Any) -> Coordinates | None:
    if not isinstance(coords, Mapping):
        return None
    lat, lng = coords.get("lat"), coords.get("lng")
    if not is_valid_coordinates(lat, lng):
        return None
    return Coordinates(float(lat), float(lng))


@lru_cache(maxsize=8)
def _load_cached(path: str) -> Gazetteer:
    gazetteer = Gazetteer.from_json(path)
    LOGGER.info(
        "Loaded gazetteer %s (%d cities, %d regions, %d countries)",
        path,
        len(gazetteer.cities),
        len(gazetteer.regions),
        len(gazetteer.countries),
    )
    return gazetteer


def load_gazetteer(path: Path | str | None = None) -> Gazetteer:
    """
    Load (once per path) the gazetteer used by the resolver.

    Args:
        path: JSON file to load. Defaults to the configured gazetteer,
            or the one shipped with the package.

    Returns:
        Shared, immutable Gazetteer instance.
    """
    resolved = Path(path) if path else settings.resolved_gazetteer_path
    return _load_cached(str(resolved.resolve()))


# =============================================================================
# RESOLVER
# =============================================================================


@dataclass(frozen=True)
class LocationInput:
    """Whatever location fields a record provides."""

    country: str = ""
    coordinates: Coordinates | None = None
    city: str | None = None
    region: str | None = None


@dataclass(frozen=True)
class GeocodeResult:
    """Outcome of a resolution attempt."""

    coordinates: Coordinates | None
    fallback_level: FallbackLevel
    errors: tuple[str, ...] = ()

    @property
    def succeeded(self) -> bool:
        return self.coordinates is not None


class LocationResolver:
    """Resolve partial location information against a gazetteer."""

    def __init__(self, gazetteer: Gazetteer):
        self.gazetteer = gazetteer

    def resolve(self, location: LocationInput) -> GeocodeResult:
        """
        Produce the best available coordinates for a location.

        Levels are tried in order and the first hit wins. Misses are
        reported in ``errors``; this method never raises.
        """
        errors: list[str] = []

        coords = location.coordinates
        if coords is not None and is_valid_coordinates(coords.lat, coords.lng):
            return GeocodeResult(coords, FallbackLevel.EXACT)

        if location.city:
            found = self.gazetteer.lookup("cities", location.city)
            if found is not None:
                return GeocodeResult(found, FallbackLevel.CITY, tuple(errors))
            errors.append(f"No coordinates found for city: {location.city}")

        if location.region:
            found = self.gazetteer.lookup("regions", normalize_region_name(location.region))
            if found is not None:
                return GeocodeResult(found, FallbackLevel.REGION, tuple(errors))
            errors.append(f"No coordinates found for region: {location.region}")

        if location.country:
            found = self.gazetteer.lookup("countries", location.country)
            if found is not None:
                return GeocodeResult(found, FallbackLevel.COUNTRY, tuple(errors))
        errors.append(f"No coordinates found for country: {location.country}")

        return GeocodeResult(None, FallbackLevel.FAILED, tuple(errors))
