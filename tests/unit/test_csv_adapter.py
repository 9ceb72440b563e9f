"""Unit tests for delimited-text ingestion."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from disaster_data.config import FallbackLevel
from disaster_data.core.normalizer import RecordNormalizer
from disaster_data.exceptions import IngestionError, NoValidRecordsError
from disaster_data.ingestion import DelimitedTextAdapter, load_file

HEADER = "Disaster No,Event Name,Disaster Type,Disaster Subtype,Country,Start Date,Total Deaths,Total Affected"

CSV_TEXT = "\n".join(
    [
        HEADER,
        "2011-0082-JPN,Tohoku,Earthquake,Ground movement,Japan,2011-03-11,19846,368820",
        "2022-0363-PAK,,Flood,Riverine flood,Pakistan,2022-06-14,1739,33000000",
        "1900-0001-ATL,,Flood,,Atlantis,1900-01-01,10,",
        "",
        "2013-0433-PHL,Haiyan,Storm,Tropical cyclone,Philippines,2013-11-08,7354,16106870",
    ]
)


def test_parse_keeps_order_and_drops_unlocatable(normalizer: RecordNormalizer) -> None:
    events = DelimitedTextAdapter(normalizer).parse(CSV_TEXT)

    assert [e.id for e in events] == ["emdat-2011-0082-JPN", "emdat-2022-0363-PAK", "emdat-2013-0433-PHL"]
    assert events[1].name == "Flood in Pakistan"
    assert all(e.fallback_level == FallbackLevel.COUNTRY for e in events)


def test_ingest_reports_counts(normalizer: RecordNormalizer) -> None:
    result = DelimitedTextAdapter(normalizer).ingest(CSV_TEXT, source="emdat.csv")

    assert result.source == "emdat.csv"
    assert result.status == "success"
    assert result.records_processed == 4
    assert result.records_loaded == 3
    assert result.records_failed == 1
    assert result.rejected == [2]
    assert result.to_dict()["duration_seconds"] >= 0


def test_rejected_rows_keep_their_reason(normalizer: RecordNormalizer) -> None:
    result = DelimitedTextAdapter(normalizer).ingest(CSV_TEXT)

    assert len(result.errors) == 1
    assert result.errors[0].startswith("Record 2: no coordinates for Country='Atlantis'")
    assert result.to_dict()["errors"] == result.errors


def test_crlf_and_padding_are_tolerated(normalizer: RecordNormalizer) -> None:
    text = " Country , Start Date , Disaster Type \r\n Japan , 2011-03-11 , Earthquake \r\n"

    events = DelimitedTextAdapter(normalizer).parse(text)

    assert len(events) == 1
    assert events[0].location.country == "Japan"
    assert events[0].id == "emdat-0"


def test_short_rows_fill_missing_values(normalizer: RecordNormalizer) -> None:
    text = "Country,Start Date,Total Deaths,Total Affected\nJapan,2011-03-11\n"

    events = DelimitedTextAdapter(normalizer).parse(text)

    assert events[0].impact.deaths == 0
    assert events[0].impact.affected is None


def test_naive_split_shifts_quoted_commas(normalizer: RecordNormalizer) -> None:
    """The default tokenizer ignores quotes, so a quoted comma shifts columns."""

    text = 'Event Name,Country,Start Date\n"Kobe, Great Hanshin",Japan,1995-01-17\n'

    with pytest.raises(NoValidRecordsError):
        DelimitedTextAdapter(normalizer, quote_aware=False).parse(text)


def test_quote_aware_mode(normalizer: RecordNormalizer) -> None:
    text = 'Event Name,Country,Start Date\n"Kobe, Great Hanshin",Japan,1995-01-17\n'

    events = DelimitedTextAdapter(normalizer, quote_aware=True).parse(text)

    assert len(events) == 1
    assert events[0].name == "Kobe, Great Hanshin"


def test_every_row_failing_geocoding_raises(normalizer: RecordNormalizer, caplog) -> None:
    text = "Country,Start Date\nAtlantis,2001-01-01\nLemuria,2002-02-02\n"

    with caplog.at_level(logging.WARNING, logger="disaster_data"):
        with pytest.raises(NoValidRecordsError, match="No valid records found in the file"):
            DelimitedTextAdapter(normalizer).parse(text)

    assert "Record 0 rejected" in caplog.text
    assert "Record 1 rejected" in caplog.text


class _FlakyAdapter(DelimitedTextAdapter):
    def prepare(self, record, index):
        if index == 0:
            raise KeyError("Start Date")
        return record


def test_unexpected_record_errors_reject_only_that_record(normalizer: RecordNormalizer) -> None:
    result = _FlakyAdapter(normalizer).ingest(CSV_TEXT)

    assert result.rejected == [0, 2]
    assert result.errors[0] == "Record 0: KeyError: 'Start Date'"
    assert [e.id for e in result.events] == ["emdat-2022-0363-PAK", "emdat-2013-0433-PHL"]


@pytest.mark.parametrize("quote_aware", [False, True])
def test_empty_input_raises(normalizer: RecordNormalizer, quote_aware: bool) -> None:
    with pytest.raises(IngestionError, match="No header row"):
        DelimitedTextAdapter(normalizer, quote_aware=quote_aware).parse("")


def test_load_file_dispatches_on_extension(normalizer: RecordNormalizer, tmp_path: Path) -> None:
    path = tmp_path / "emdat.csv"
    path.write_text("\ufeff" + CSV_TEXT, encoding="utf-8")

    result = load_file(path, normalizer=normalizer)

    assert result.source == "emdat.csv"
    assert result.records_loaded == 3


def test_load_file_rejects_other_extensions(normalizer: RecordNormalizer, tmp_path: Path) -> None:
    path = tmp_path / "emdat.txt"
    path.write_text(CSV_TEXT, encoding="utf-8")

    with pytest.raises(IngestionError, match="Please upload a CSV or XLSX file"):
        load_file(path, normalizer=normalizer)


def test_load_file_missing(normalizer: RecordNormalizer, tmp_path: Path) -> None:
    with pytest.raises(IngestionError):
        load_file(tmp_path / "nope.csv", normalizer=normalizer)
