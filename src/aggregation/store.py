"""
Aggregate Store

Holds the currently published DashboardSnapshot behind a read/write lock.

Readers share the lock and never wait on an ingestion run, only on the
pointer swap at its end. A failed run leaves the published snapshot as it
was.
"""

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

import structlog

from src.aggregation.pipeline import IngestionPipeline, IngestReport
from src.models.dashboard import DashboardSnapshot, ViewKind

logger = structlog.get_logger(__name__)


class ReadWriteLock:
    """
    Writer-preferring read/write lock.

    Any number of readers hold the lock together; a writer holds it alone.
    Once a writer is waiting, new readers queue behind it. Not reentrant.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class AggregateStore:
    """
    Owner of the current dashboard snapshot.

    Example:
        store = AggregateStore(IngestionPipeline.from_settings())
        store.ingest("data/transactions.csv")
        regions = store.get_view(ViewKind.TOP_REGIONS)
    """

    def __init__(self, pipeline: Optional[IngestionPipeline] = None):
        self.pipeline = pipeline or IngestionPipeline.from_settings()
        self._snapshot = DashboardSnapshot.empty()
        self._lock = ReadWriteLock()
        # One ingestion run at a time
        self._ingest_lock = threading.Lock()

    def ingest(self, file_path: Union[str, Path]) -> IngestReport:
        """
        Run the pipeline over ``file_path`` and publish the result.

        Raises:
            IngestionError: if the run fails; the current snapshot is kept
        """
        with self._ingest_lock:
            snapshot, report = self.pipeline.run(file_path)
            self.publish(snapshot)
        return report

    def publish(self, snapshot: DashboardSnapshot) -> None:
        """Atomically replace the current snapshot"""
        with self._lock.write_locked():
            self._snapshot = snapshot
        logger.info(
            "Snapshot published",
            record_count=snapshot.record_count,
            last_updated=snapshot.last_updated.isoformat() if snapshot.last_updated else None,
        )

    def get_snapshot(self) -> DashboardSnapshot:
        """Return the current snapshot"""
        with self._lock.read_locked():
            return self._snapshot

    def get_view(self, kind: Union[ViewKind, str]) -> tuple:
        """
        Return one view of the current snapshot.

        Raises:
            ValueError: if ``kind`` is not a known view name
        """
        kind = ViewKind(kind)
        with self._lock.read_locked():
            snapshot = self._snapshot
        return snapshot.view(kind)

    @property
    def has_data(self) -> bool:
        """Whether at least one run has been published"""
        return not self.get_snapshot().is_empty


# Process-wide store used by the API layer
_store: Optional[AggregateStore] = None


def init_store(pipeline: Optional[IngestionPipeline] = None) -> AggregateStore:
    """Create the process-wide store if it does not exist yet"""
    global _store

    if _store is None:
        _store = AggregateStore(pipeline)
        logger.info("Aggregate store initialized", workers=_store.pipeline.workers)

    return _store


def get_store() -> AggregateStore:
    """Get the process-wide store"""
    if _store is None:
        raise RuntimeError("Aggregate store not initialized. Call init_store() first.")
    return _store


def reset_store() -> None:
    """Drop the process-wide store"""
    global _store
    _store = None
