"""Unit tests for event export."""

from __future__ import annotations

import json
from pathlib import Path

import pandas as pd
import pytest

from disaster_data.core.export import EventExporter, ExportConfig, ExportFormat, export_events
from disaster_data.core.models import DisasterEvent
from disaster_data.core.normalizer import RecordNormalizer


@pytest.fixture()
def events(normalizer: RecordNormalizer, make_row) -> list[DisasterEvent]:
    return [
        normalizer.normalize(make_row(), 0),
        normalizer.normalize(make_row(**{"Disaster No": "2011-0200-JPN", "End Date": "2011-09-05"}), 1),
    ]


def test_json_export_writes_event_dicts(events: list[DisasterEvent], tmp_path: Path) -> None:
    path = export_events(events, "batch", ExportFormat.JSON, output_dir=tmp_path)

    assert path == tmp_path / "batch.json"
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data == [e.to_dict() for e in events]
    assert data[0]["startDate"] == "2011-03-11T00:00:00Z"


def test_csv_export(events: list[DisasterEvent], tmp_path: Path) -> None:
    path = export_events(events, "batch", "csv", output_dir=tmp_path)

    df = pd.read_csv(path)
    assert list(df["id"]) == ["emdat-2011-0082-JPN", "emdat-2011-0200-JPN"]
    assert df.loc[0, "start_date"].startswith("2011-03-11")


def test_excel_export(events: list[DisasterEvent], tmp_path: Path) -> None:
    path = export_events(events, "batch", ExportFormat.EXCEL, output_dir=tmp_path)

    assert path.suffix == ".xlsx"
    df = pd.read_excel(path, sheet_name="events", engine="openpyxl")
    assert len(df) == 2
    assert df.loc[1, "end_date"] == pd.Timestamp("2011-09-05")


def test_timestamped_filename(events: list[DisasterEvent], tmp_path: Path) -> None:
    exporter = EventExporter(ExportConfig(format=ExportFormat.CSV, output_dir=tmp_path / "nested"))

    path = exporter.export(events, "batch")

    assert path.parent == tmp_path / "nested"
    assert path.name.startswith("batch_")
    assert path.exists()
