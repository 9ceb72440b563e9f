"""
Delimited-text (CSV) ingestion.

The default tokenizer is a plain comma split: no quoting rules, so a
quoted field containing a comma shifts the columns after it. EMDAT's
public CSV exports are read this way. Pass `quote_aware=True` to use
pandas' CSV reader for files with quoted fields.
"""

import io
import logging
from collections.abc import Iterator

import pandas as pd

from disaster_data.config import settings
from disaster_data.core.models import EmdatRecord
from disaster_data.core.normalizer import RecordNormalizer
from disaster_data.exceptions import IngestionError
from disaster_data.ingestion.base import BaseAdapter

LOGGER = logging.getLogger(__name__)


class DelimitedTextAdapter(BaseAdapter):
    """Adapter for comma-separated EMDAT text exports."""

    source_name = "csv"

    def __init__(self, normalizer: RecordNormalizer | None = None, quote_aware: bool | None = None):
        """
        Args:
            normalizer: Record normalizer. If None, one is built from settings.
            quote_aware: Honor CSV quoting. Defaults to the
                `quote_aware_csv` setting.
        """
        super().__init__(normalizer)
        self.quote_aware = settings.quote_aware_csv if quote_aware is None else quote_aware

    def records(self, content: str) -> Iterator[EmdatRecord]:
        if self.quote_aware:
            return self._quoted_records(content)
        return self._split_records(content)

    @staticmethod
    def _split_records(content: str) -> Iterator[EmdatRecord]:
        lines = content.replace("\r\n", "\n").replace("\r", "\n").split("\n")
        if not lines or not lines[0].strip():
            raise IngestionError("No header row found in the file")

        headers = [h.strip() for h in lines[0].split(",")]
        LOGGER.debug("CSV headers: %s", headers)

        def generate() -> Iterator[EmdatRecord]:
            for line in lines[1:]:
                if not line.strip():
                    continue
                values = [v.strip() for v in line.split(",")]
                yield EmdatRecord(
                    {header: values[i] if i < len(values) else "" for i, header in enumerate(headers)}
                )

        return generate()

    @staticmethod
    def _quoted_records(content: str) -> Iterator[EmdatRecord]:
        if not content.strip():
            raise IngestionError("No header row found in the file")
        try:
            df = pd.read_csv(
                io.StringIO(content),
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
            )
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            raise IngestionError(f"Could not parse CSV: {e}") from e

        df.columns = [str(c).strip() for c in df.columns]
        return (EmdatRecord(row) for row in df.to_dict(orient="records"))
