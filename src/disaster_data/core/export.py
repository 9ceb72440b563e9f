"""
Data Export Utilities.

Export normalized events to CSV, Excel or JSON.
"""

import json
from collections.abc import Iterable
from datetime import datetime
from enum import Enum
from pathlib import Path

import pandas as pd

from disaster_data.config import EXPORTS_DIR
from disaster_data.core.models import DisasterEvent
from disaster_data.core.statistics import events_to_dataframe


class ExportFormat(str, Enum):
    """Supported export formats."""
    CSV = "csv"
    EXCEL = "xlsx"
    JSON = "json"


class ExportConfig:
    """Configuration for data export."""

    def __init__(
        self,
        format: ExportFormat = ExportFormat.CSV,
        output_dir: Path | str | None = None,
        timestamp_filename: bool = True,
    ):
        self.format = ExportFormat(format)
        self.output_dir = Path(output_dir) if output_dir else EXPORTS_DIR
        self.timestamp_filename = timestamp_filename

        # Create output directory if it doesn't exist
        self.output_dir.mkdir(parents=True, exist_ok=True)


class EventExporter:
    """
    Export event batches to files.
    """

    def __init__(self, config: ExportConfig | None = None):
        self.config = config or ExportConfig()

    def _generate_filename(self, base_name: str) -> Path:
        """Generate output filename."""
        if self.config.timestamp_filename:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            filename = f"{base_name}_{timestamp}.{self.config.format.value}"
        else:
            filename = f"{base_name}.{self.config.format.value}"

        return self.config.output_dir / filename

    def _write_dataframe(self, df: pd.DataFrame, filepath: Path, sheet_name: str = "events") -> None:
        """Write DataFrame to file."""
        # Excel cannot store timezone-aware datetimes.
        for column in ("start_date", "end_date"):
            if column in df:
                df[column] = pd.to_datetime(df[column], utc=True).dt.tz_localize(None)

        if self.config.format == ExportFormat.CSV:
            df.to_csv(filepath, index=False)

        elif self.config.format == ExportFormat.EXCEL:
            with pd.ExcelWriter(filepath, engine="openpyxl") as writer:
                df.to_excel(writer, sheet_name=sheet_name, index=False)

    def export(self, events: Iterable[DisasterEvent], base_name: str = "disasters") -> Path:
        """
        Export a batch of events.

        Args:
            events: Events to write, in order.
            base_name: Filename without extension.

        Returns:
            Path to the exported file.
        """
        events = list(events)
        filepath = self._generate_filename(base_name)

        if self.config.format == ExportFormat.JSON:
            with open(filepath, "w", encoding="utf-8") as f:
                json.dump([e.to_dict() for e in events], f, indent=2, ensure_ascii=False)
        else:
            self._write_dataframe(events_to_dataframe(events), filepath)

        return filepath


def export_events(
    events: Iterable[DisasterEvent],
    filename: str,
    format: ExportFormat | str = ExportFormat.CSV,
    output_dir: Path | str | None = None,
) -> Path:
    """Quick export function without a timestamp in the filename."""
    exporter = EventExporter(ExportConfig(
        format=ExportFormat(format),
        output_dir=output_dir,
        timestamp_filename=False,
    ))
    return exporter.export(events, filename)
