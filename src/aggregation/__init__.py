"""
Aggregation Module
"""
from .aggregator import AggregationState, drain
from .snapshot import build_snapshot
from .pipeline import IngestionPipeline, IngestReport
from .store import AggregateStore, ReadWriteLock, get_store, init_store, reset_store

__all__ = [
    "AggregationState",
    "drain",
    "build_snapshot",
    "IngestionPipeline",
    "IngestReport",
    "AggregateStore",
    "ReadWriteLock",
    "get_store",
    "init_store",
    "reset_store",
]
