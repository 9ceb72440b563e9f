"""
Data ingestion package for Disaster Data Platform.
"""

from pathlib import Path
from typing import Any

from disaster_data.exceptions import IngestionError
from disaster_data.ingestion.base import BaseAdapter, IngestionResult
from disaster_data.ingestion.csv_text import DelimitedTextAdapter
from disaster_data.ingestion.spreadsheet import SpreadsheetAdapter

__all__ = [
    "BaseAdapter",
    "IngestionResult",
    "DelimitedTextAdapter",
    "SpreadsheetAdapter",
    "load_file",
]


def load_file(path: Path | str, **options: Any) -> IngestionResult:
    """
    Ingest an EMDAT export, choosing the adapter from the file extension.

    Args:
        path: A .csv or .xlsx file.
        **options: Passed to the adapter (normalizer, quote_aware).

    Returns:
        IngestionResult with the loaded events.

    Raises:
        IngestionError: For unsupported or unreadable files.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    try:
        if suffix == ".csv":
            return DelimitedTextAdapter(**options).ingest(path.read_text(encoding="utf-8-sig"), source=path.name)
        if suffix == ".xlsx":
            options.pop("quote_aware", None)
            return SpreadsheetAdapter(**options).ingest(path.read_bytes(), source=path.name)
    except (OSError, UnicodeDecodeError) as e:
        raise IngestionError(f"Could not read {path}: {e}") from e

    raise IngestionError("Please upload a CSV or XLSX file")
