"""Unit tests for the disasterdata command-line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from rich.console import Console
from typer.testing import CliRunner

from disaster_data import __version__
from disaster_data.cli import main as cli_main
from disaster_data.cli.main import app
from disaster_data.db.connection import dispose_engines

runner = CliRunner()

CSV_TEXT = "\n".join(
    [
        "Disaster No,Event Name,Disaster Type,Disaster Subtype,Country,Start Date,Total Deaths,Total Affected",
        "2011-0082-JPN,Tohoku,Earthquake,Tsunami,Japan,2011-03-11,19846,368820",
        "2022-0363-PAK,,Flood,Riverine flood,Pakistan,2022-06-14,1739,33000000",
        "2020-0001-ATL,,Flood,,Atlantis,2020-01-01,1,",
    ]
)


@pytest.fixture()
def csv_file(tmp_path: Path) -> Path:
    path = tmp_path / "emdat.csv"
    path.write_text(CSV_TEXT, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def wide_console(monkeypatch: pytest.MonkeyPatch) -> None:
    """Render tables at a fixed width so cells are not truncated."""

    monkeypatch.setattr(cli_main, "console", Console(width=200))


@pytest.fixture()
def database_url(tmp_path: Path):
    """A throwaway SQLite store."""

    yield f"sqlite:///{tmp_path / 'store.db'}"
    dispose_engines()


def test_version() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_ingest_summary_output(csv_file: Path) -> None:
    result = runner.invoke(app, ["ingest", str(csv_file)])

    assert result.exit_code == 0, result.stdout
    assert "Records processed: 3" in result.stdout
    assert "Events loaded:     2" in result.stdout
    assert "Records rejected:  1" in result.stdout
    assert "Record 2: no coordinates for Country='Atlantis'" in result.stdout


def test_ingest_exports_json(csv_file: Path, tmp_path: Path) -> None:
    out_dir = tmp_path / "out"

    result = runner.invoke(app, ["ingest", str(csv_file), "--export", "json", "--output-dir", str(out_dir)])

    assert result.exit_code == 0, result.stdout
    exported = list(out_dir.glob("emdat_*.json"))
    assert len(exported) == 1
    data = json.loads(exported[0].read_text(encoding="utf-8"))
    assert [d["id"] for d in data] == ["emdat-2011-0082-JPN", "emdat-2022-0363-PAK"]


def test_ingest_unsupported_file(tmp_path: Path) -> None:
    path = tmp_path / "emdat.pdf"
    path.write_bytes(b"%PDF")

    result = runner.invoke(app, ["ingest", str(path)])

    assert result.exit_code == 1
    assert "Please upload a CSV or XLSX file" in result.stdout


def test_ingest_no_valid_records(tmp_path: Path) -> None:
    path = tmp_path / "bad.csv"
    path.write_text("Country,Start Date\nAtlantis,2001-01-01\n", encoding="utf-8")

    result = runner.invoke(app, ["ingest", str(path)])

    assert result.exit_code == 1
    assert "No valid records found in the file" in result.stdout


def test_summary_by_country(csv_file: Path) -> None:
    result = runner.invoke(app, ["summary", str(csv_file), "--by", "country"])

    assert result.exit_code == 0, result.stdout
    assert "Events by country" in result.stdout
    assert "Pakistan" in result.stdout


def test_filter_by_type(csv_file: Path) -> None:
    result = runner.invoke(app, ["filter", str(csv_file), "--type", "flood"])

    assert result.exit_code == 0, result.stdout
    assert "1 of 2 events match" in result.stdout


def test_geocode_fallback() -> None:
    result = runner.invoke(app, ["geocode", "--country", "Japan", "--city", "Atlantis City"])

    assert result.exit_code == 0, result.stdout
    assert "No coordinates found for city: Atlantis City" in result.stdout
    assert "(by country)" in result.stdout


def test_geocode_failure() -> None:
    result = runner.invoke(app, ["geocode", "--country", "Atlantis"])

    assert result.exit_code == 1
    assert "could not be resolved" in result.stdout


def test_store_and_show(csv_file: Path, database_url: str) -> None:
    stored = runner.invoke(app, ["ingest", str(csv_file), "--store", "--database-url", database_url])
    shown = runner.invoke(app, ["db", "show", "--database-url", database_url])
    status = runner.invoke(app, ["db", "status", "--database-url", database_url])

    assert stored.exit_code == 0, stored.stdout
    assert "Stored 2 events" in stored.stdout
    assert shown.exit_code == 0, shown.stdout
    assert "emdat-2011-0082-JPN" in shown.stdout
    assert "Tohoku" in shown.stdout
    assert status.exit_code == 0, status.stdout
    assert "disaster_events" in status.stdout
    assert "emdat.csv" in status.stdout


def test_db_show_empty(database_url: str) -> None:
    result = runner.invoke(app, ["db", "show", "--database-url", database_url])

    assert result.exit_code == 0
    assert "No stored events" in result.stdout
