"""Shared fixtures for the unit test suite."""

from __future__ import annotations

import io
from typing import Any, Callable

import pandas as pd
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from disaster_data.core.geocoding import Gazetteer, LocationResolver
from disaster_data.core.normalizer import RecordNormalizer
from disaster_data.db.models import Base

GAZETTEER_DATA: dict[str, dict[str, dict[str, float]]] = {
    "cities": {
        "Tokyo": {"lat": 35.6762, "lng": 139.6503},
        "Manila": {"lat": 14.5995, "lng": 120.9842},
    },
    "regions": {
        "Sichuan": {"lat": 30.6517, "lng": 104.0759},
        "California": {"lat": 36.7783, "lng": -119.4179},
    },
    "countries": {
        "Japan": {"lat": 36.2048, "lng": 138.2529},
        "China": {"lat": 35.8617, "lng": 104.1954},
        "Pakistan": {"lat": 30.3753, "lng": 69.3451},
        "Philippines": {"lat": 12.8797, "lng": 121.774},
        "United States of America": {"lat": 37.0902, "lng": -95.7129},
    },
}


@pytest.fixture()
def gazetteer() -> Gazetteer:
    return Gazetteer.from_dict(GAZETTEER_DATA)


@pytest.fixture()
def resolver(gazetteer: Gazetteer) -> LocationResolver:
    return LocationResolver(gazetteer)


@pytest.fixture()
def normalizer(resolver: LocationResolver) -> RecordNormalizer:
    return RecordNormalizer(resolver)


@pytest.fixture()
def session() -> Session:
    """In-memory SQLite session with the store schema created."""

    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    db_session = factory()
    try:
        yield db_session
    finally:
        db_session.close()
        engine.dispose()


@pytest.fixture()
def xlsx_bytes() -> Callable[[list[dict[str, Any]]], bytes]:
    """Build an XLSX workbook in memory from a list of row dicts."""

    def _build(rows: list[dict[str, Any]], columns: list[str] | None = None) -> bytes:
        buffer = io.BytesIO()
        df = pd.DataFrame(rows, columns=columns)
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="EM-DAT", index=False)
        return buffer.getvalue()

    return _build


def _emdat_row(**overrides: Any) -> dict[str, Any]:
    """A complete EMDAT CSV-style row for Japan, with overrides."""

    row: dict[str, Any] = {
        "Disaster No": "2011-0082-JPN",
        "Event Name": "Tohoku",
        "Disaster Type": "Earthquake",
        "Disaster Subtype": "Ground movement",
        "Country": "Japan",
        "Region": "",
        "Location": "",
        "Latitude": "",
        "Longitude": "",
        "Start Date": "2011-03-11",
        "End Date": "",
        "Total Deaths": "19846",
        "Total Affected": "368820",
        "Total Damages ('000 US$)": "210000000",
    }
    row.update(overrides)
    return row


@pytest.fixture()
def make_row() -> Callable[..., dict[str, Any]]:
    return _emdat_row
