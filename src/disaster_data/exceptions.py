"""
Exception hierarchy for Disaster Data Platform.

Per-record problems raise RecordRejectedError inside the pipeline;
adapters record the reason and drop the record. Only batch-level
failures surface to callers.
"""


class DisasterDataError(Exception):
    """Base class for all package errors."""


class GazetteerError(DisasterDataError):
    """The gazetteer file could not be read or has the wrong shape."""


class IngestionError(DisasterDataError):
    """A whole upload could not be processed."""


class MissingColumnsError(IngestionError):
    """A spreadsheet lacks one or more required columns."""

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(f"Missing required columns: {', '.join(self.missing)}")


class NoValidRecordsError(IngestionError):
    """Every record of an upload was rejected."""

    def __init__(self, message: str = "No valid records found in the file"):
        super().__init__(message)


class RecordRejectedError(DisasterDataError):
    """A single record cannot become an event."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)
