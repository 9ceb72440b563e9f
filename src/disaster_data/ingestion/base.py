"""
Base classes for file ingestion.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from disaster_data.core.models import DisasterEvent, EmdatRecord
from disaster_data.core.normalizer import RecordNormalizer
from disaster_data.exceptions import NoValidRecordsError, RecordRejectedError

LOGGER = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class IngestionResult:
    """Result of ingesting one file."""

    source: str
    started_at: datetime
    completed_at: datetime | None = None
    status: str = "running"
    records_processed: int = 0
    records_failed: int = 0
    rejected: list[int] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    events: list[DisasterEvent] = field(default_factory=list, repr=False)

    @property
    def records_loaded(self) -> int:
        return len(self.events)

    @property
    def duration_seconds(self) -> float | None:
        """Calculate duration in seconds."""
        if self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "source": self.source,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "status": self.status,
            "records_processed": self.records_processed,
            "records_loaded": self.records_loaded,
            "records_failed": self.records_failed,
            "rejected": self.rejected,
            "duration_seconds": self.duration_seconds,
            "errors": self.errors,
        }


class BaseAdapter(ABC):
    """
    Abstract base class for ingestion adapters.

    An adapter turns file content into an ordered stream of EmdatRecords;
    normalization and batch bookkeeping are shared.
    """

    source_name: str = "file"

    def __init__(self, normalizer: RecordNormalizer | None = None):
        """
        Initialize the adapter.

        Args:
            normalizer: Record normalizer. If None, one is built from settings.
        """
        self.normalizer = normalizer or RecordNormalizer.from_settings()

    @abstractmethod
    def records(self, content: Any) -> Iterator[EmdatRecord]:
        """
        Split file content into raw records, in file order.

        Raises:
            IngestionError: If the content cannot be read as a whole.
        """
        pass

    def prepare(self, record: EmdatRecord, index: int) -> EmdatRecord:
        """
        Adapter-specific per-record step before normalization.

        Raises:
            RecordRejectedError: If the record cannot be used.
        """
        return record

    def _normalize_one(self, record: EmdatRecord, index: int) -> DisasterEvent:
        """Prepare and normalize one record; raises RecordRejectedError."""
        try:
            event = self.normalizer.transform(self.prepare(record, index), index)
        except RecordRejectedError:
            raise
        except Exception as e:
            raise RecordRejectedError(f"{type(e).__name__}: {e}") from e

        if event.location.is_placeholder:
            raise RecordRejectedError("placeholder coordinates (0, 0)")
        return event

    def ingest(self, content: Any, source: str | None = None) -> IngestionResult:
        """
        Ingest file content.

        Args:
            content: File content (text or bytes, depending on the adapter).
            source: Name recorded on the result, usually the file name.

        Returns:
            IngestionResult with the surviving events in input order.

        Raises:
            IngestionError: If the file cannot be read.
            NoValidRecordsError: If no record survives normalization.
        """
        result = IngestionResult(source=source or self.source_name, started_at=_now())

        for index, record in enumerate(self.records(content)):
            result.records_processed += 1
            try:
                event = self._normalize_one(record, index)
            except RecordRejectedError as e:
                LOGGER.warning("Record %d rejected: %s", index, e.reason)
                result.records_failed += 1
                result.rejected.append(index)
                result.errors.append(f"Record {index}: {e.reason}")
                continue
            result.events.append(event)

        result.completed_at = _now()
        LOGGER.info(
            "Ingested %s: %d of %d records loaded, %d rejected",
            result.source,
            result.records_loaded,
            result.records_processed,
            result.records_failed,
        )

        if not result.events:
            result.status = "failed"
            raise NoValidRecordsError()

        result.status = "success"
        return result

    def parse(self, content: Any) -> list[DisasterEvent]:
        """Parse file content into normalized events."""
        return self.ingest(content).events
