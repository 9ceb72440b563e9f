"""
Spreadsheet (XLSX) ingestion.

EMDAT spreadsheet exports carry dates as separate Start/End Year, Month
and Day columns. They are rebuilt here and handed to the normalizer as
ISO "Start Date"/"End Date" values.
"""

import io
import logging
from collections.abc import Iterator

import pandas as pd

from disaster_data.config import (
    COL_END_DATE,
    COL_END_DAY,
    COL_END_MONTH,
    COL_END_YEAR,
    COL_START_DATE,
    COL_START_DAY,
    COL_START_MONTH,
    COL_START_YEAR,
    REQUIRED_SPREADSHEET_COLUMNS,
)
from disaster_data.core.dates import construct_date
from disaster_data.core.models import EmdatRecord, format_timestamp
from disaster_data.exceptions import IngestionError, MissingColumnsError, RecordRejectedError
from disaster_data.ingestion.base import BaseAdapter

LOGGER = logging.getLogger(__name__)


def missing_columns(headers: list[str]) -> list[str]:
    """Required header fragments not found (case-insensitively) in any header."""
    lowered = [h.lower() for h in headers]
    return [
        required
        for required in REQUIRED_SPREADSHEET_COLUMNS
        if not any(required in header for header in lowered)
    ]


def read_first_sheet(content: bytes) -> pd.DataFrame:
    """
    Read the first worksheet of an XLSX workbook.

    Raises:
        IngestionError: If the workbook cannot be opened or has no header row.
        MissingColumnsError: If a required column is absent.
    """
    try:
        df = pd.read_excel(io.BytesIO(content), sheet_name=0, engine="openpyxl", dtype=object)
    except Exception as e:
        raise IngestionError(f"Could not read the workbook: {e}") from e

    headers = [str(c).strip() for c in df.columns if not str(c).startswith("Unnamed:")]
    if not headers:
        raise IngestionError("No headers found in the sheet")

    missing = missing_columns(headers)
    if missing:
        raise MissingColumnsError(missing)

    df = df.loc[:, [not str(c).startswith("Unnamed:") for c in df.columns]]
    df.columns = headers
    return df


class SpreadsheetAdapter(BaseAdapter):
    """Adapter for EMDAT XLSX exports."""

    source_name = "xlsx"

    def records(self, content: bytes) -> Iterator[EmdatRecord]:
        df = read_first_sheet(content)
        LOGGER.debug("Spreadsheet headers: %s", list(df.columns))
        return (EmdatRecord(row) for row in df.to_dict(orient="records"))

    def prepare(self, record: EmdatRecord, index: int) -> EmdatRecord:
        start_date = construct_date(
            record[COL_START_YEAR], record[COL_START_MONTH], record[COL_START_DAY]
        )
        if start_date is None:
            raise RecordRejectedError(f"no valid start date ({COL_START_YEAR}={record[COL_START_YEAR]!r})")

        end_date = construct_date(record[COL_END_YEAR], record[COL_END_MONTH], record[COL_END_DAY])
        return record.with_values(
            **{
                COL_START_DATE: format_timestamp(start_date),
                COL_END_DATE: format_timestamp(end_date) or "",
            }
        )
