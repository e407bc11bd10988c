"""Ingestion exception hierarchy.

Only these errors cross the ingestion boundary. Row and field problems are
absorbed by the reader and parser and show up in logs and counters.
"""


class PipelineError(Exception):
    """Base exception for all pipeline failures."""


class IngestionError(PipelineError):
    """Raised when a run must be aborted and nothing may be published."""


class SourceUnavailableError(IngestionError):
    """Raised when the source file cannot be opened."""


class HeaderReadError(IngestionError):
    """Raised when the header row is missing or unreadable."""
