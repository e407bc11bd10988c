"""
Ingestion Pipeline

One run turns a transaction file into a DashboardSnapshot:

    reader -> bounded queue -> N aggregation workers -> barrier -> builder

The reader runs on the calling thread and blocks when the queue is full.
Workers run in a thread pool sized to the host's CPU count unless
configured otherwise. The snapshot is only built after every worker has
exited, and nothing is built when the run fails.
"""

import queue
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional, Tuple, Union

import structlog
from prometheus_client import Counter, Histogram
from pydantic import BaseModel

from src.aggregation.aggregator import STOP, AggregationState, drain
from src.aggregation.snapshot import DEFAULT_TOP_PRODUCTS, DEFAULT_TOP_REGIONS, build_snapshot
from src.config import IngestionSettings, get_settings
from src.ingestion.errors import IngestionError
from src.ingestion.reader import TransactionReader
from src.models.dashboard import DashboardSnapshot

logger = structlog.get_logger(__name__)


# =============================================================================
# METRICS
# =============================================================================

ROWS_INGESTED = Counter(
    "dashboard_rows_ingested_total",
    "Total number of transaction rows folded into aggregates",
)

ROWS_SKIPPED = Counter(
    "dashboard_rows_skipped_total",
    "Total number of malformed rows skipped during ingestion",
)

INGEST_RUNS = Counter(
    "dashboard_ingest_runs_total",
    "Total number of ingestion runs",
    ["status"],
)

INGEST_DURATION = Histogram(
    "dashboard_ingest_duration_seconds",
    "Wall time of completed ingestion runs",
)


class IngestReport(BaseModel):
    """Result of a completed ingestion run"""
    file_path: str
    rows_ingested: int
    rows_skipped: int
    groups: int
    workers: int
    started_at: datetime
    completed_at: datetime
    duration_seconds: float


class IngestionPipeline:
    """
    Reader, worker pool and snapshot builder for a single source file.

    Example:
        pipeline = IngestionPipeline(workers=4)
        snapshot, report = pipeline.run("data/transactions.csv")
    """

    def __init__(
        self,
        workers: int = 1,
        queue_size: int = 1000,
        progress_interval: int = 100_000,
        delimiter: str = ",",
        encoding: str = "utf-8-sig",
        top_products_limit: Optional[int] = DEFAULT_TOP_PRODUCTS,
        top_regions_limit: Optional[int] = DEFAULT_TOP_REGIONS,
    ):
        if workers < 1:
            raise ValueError("workers must be at least 1")
        for name, limit in (("top_products_limit", top_products_limit), ("top_regions_limit", top_regions_limit)):
            if limit is not None and limit < 1:
                raise ValueError(f"{name} must be at least 1 or None")
        self.workers = workers
        self.queue_size = queue_size
        self.progress_interval = progress_interval
        self.delimiter = delimiter
        self.encoding = encoding
        self.top_products_limit = top_products_limit
        self.top_regions_limit = top_regions_limit

    @classmethod
    def from_settings(cls, settings: Optional[IngestionSettings] = None) -> "IngestionPipeline":
        """Create a pipeline from the ingestion settings section"""
        settings = settings or get_settings().ingestion
        return cls(
            workers=settings.effective_workers,
            queue_size=settings.queue_size,
            progress_interval=settings.progress_interval,
            delimiter=settings.delimiter,
            encoding=settings.encoding,
            top_products_limit=settings.top_products_limit,
            top_regions_limit=settings.top_regions_limit,
        )

    def _reader(self, file_path: Path) -> TransactionReader:
        return TransactionReader(
            file_path,
            delimiter=self.delimiter,
            encoding=self.encoding,
            progress_interval=self.progress_interval,
        )

    def run(self, file_path: Union[str, Path]) -> Tuple[DashboardSnapshot, IngestReport]:
        """
        Ingest one file and build its snapshot.

        Args:
            file_path: Path of the delimited transaction file

        Returns:
            The new snapshot and a report of the run

        Raises:
            IngestionError: if the source cannot be read; no snapshot is built
        """
        file_path = Path(file_path)
        started_at = datetime.now(timezone.utc)
        start = time.perf_counter()

        state = AggregationState()
        work_queue: queue.Queue = queue.Queue(maxsize=self.queue_size)
        reader = self._reader(file_path)

        logger.info(
            "Starting ingestion",
            file=str(file_path),
            workers=self.workers,
            queue_size=self.queue_size,
        )

        try:
            with ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="aggregator") as pool:
                futures = [pool.submit(drain, work_queue, state) for _ in range(self.workers)]
                try:
                    stats = reader.read_into(work_queue.put)
                finally:
                    # Close the queue even when the reader failed
                    for _ in futures:
                        work_queue.put(STOP)

                # Barrier: every worker has drained the queue and exited
                for future in futures:
                    future.result()
        except IngestionError as e:
            INGEST_RUNS.labels(status="failed").inc()
            logger.error("Ingestion failed", file=str(file_path), error=str(e))
            raise
        except Exception as e:
            INGEST_RUNS.labels(status="failed").inc()
            logger.exception("Ingestion aborted by unexpected error", file=str(file_path))
            raise IngestionError(f"error during processing of {file_path}: {e}") from e

        snapshot = build_snapshot(
            state,
            processing_duration=timedelta(seconds=time.perf_counter() - start),
            top_products_limit=self.top_products_limit,
            top_regions_limit=self.top_regions_limit,
        )

        completed_at = datetime.now(timezone.utc)
        duration = time.perf_counter() - start

        ROWS_INGESTED.inc(stats.rows_read)
        ROWS_SKIPPED.inc(stats.rows_skipped)
        INGEST_RUNS.labels(status="completed").inc()
        INGEST_DURATION.observe(duration)

        report = IngestReport(
            file_path=str(file_path),
            rows_ingested=stats.rows_read,
            rows_skipped=stats.rows_skipped,
            groups=len(state.country_products),
            workers=self.workers,
            started_at=started_at,
            completed_at=completed_at,
            duration_seconds=duration,
        )

        logger.info(
            "Data processing completed",
            file=str(file_path),
            rows=report.rows_ingested,
            skipped=report.rows_skipped,
            groups=report.groups,
            duration_seconds=round(duration, 3),
        )

        return snapshot, report
