"""
Data Ingestion Module
"""
from .errors import HeaderReadError, IngestionError, PipelineError, SourceUnavailableError
from .parser import build_column_map, parse_transaction
from .reader import ReadStats, TransactionReader

__all__ = [
    "HeaderReadError",
    "IngestionError",
    "PipelineError",
    "SourceUnavailableError",
    "build_column_map",
    "parse_transaction",
    "ReadStats",
    "TransactionReader",
]
