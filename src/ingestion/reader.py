"""
Transaction CSV Reader

Streams a delimited transaction file row by row:
- builds the column map from the header row
- parses each row with the tolerant record parser
- skips structurally malformed rows instead of aborting
- logs progress for large files

Only failures to open the file, read its header, or keep reading it are
fatal; they raise IngestionError subclasses.
"""

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, List, Union

import structlog

from src.ingestion.errors import HeaderReadError, IngestionError, SourceUnavailableError
from src.ingestion.parser import build_column_map, parse_transaction
from src.models.transaction import Transaction

logger = structlog.get_logger(__name__)


@dataclass
class ReadStats:
    """Row counters for one pass over a source file"""
    rows_read: int = 0
    rows_skipped: int = 0


class TransactionReader:
    """
    Lenient CSV reader producing Transaction records.

    Example:
        reader = TransactionReader("data/transactions.csv")
        stats = reader.read_into(work_queue.put)
    """

    def __init__(
        self,
        file_path: Union[str, Path],
        delimiter: str = ",",
        encoding: str = "utf-8-sig",
        progress_interval: int = 100_000,
    ):
        self.file_path = Path(file_path)
        self.delimiter = delimiter
        self.encoding = encoding
        self.progress_interval = progress_interval
        self.stats = ReadStats()

    def _open(self):
        try:
            # Undecodable bytes are replaced rather than failing the run
            return open(self.file_path, "r", encoding=self.encoding, errors="replace", newline="")
        except OSError as e:
            raise SourceUnavailableError(f"failed to open file {self.file_path}: {e}") from e

    def _read_header(self, rows: Iterator[list]) -> List[str]:
        """First non-blank row; blank lines before it are ignored"""
        try:
            for header in rows:
                if any(cell.strip() for cell in header):
                    return header
        except (csv.Error, OSError) as e:
            raise HeaderReadError(f"failed to read header of {self.file_path}: {e}") from e
        raise HeaderReadError(f"failed to read header of {self.file_path}: file is empty")

    def transactions(self) -> Iterator[Transaction]:
        """
        Yield one Transaction per structurally valid row.

        ``self.stats`` is updated as rows are consumed.

        Raises:
            SourceUnavailableError: if the file cannot be opened
            HeaderReadError: if the header row cannot be read
            IngestionError: on an I/O failure while reading rows
        """
        self.stats = ReadStats()

        with self._open() as handle:
            # The default dialect is non-strict, so stray quotes are tolerated
            rows = csv.reader(handle, delimiter=self.delimiter)
            header = self._read_header(rows)
            columns = build_column_map(header)
            width = len(header)

            while True:
                line_number = rows.line_num + 1
                try:
                    row = next(rows)
                except StopIteration:
                    break
                except csv.Error as e:
                    self.stats.rows_skipped += 1
                    logger.warning(
                        "Skipping malformed record",
                        file=str(self.file_path),
                        line=line_number,
                        error=str(e),
                    )
                    continue
                except OSError as e:
                    raise IngestionError(f"error reading {self.file_path}: {e}") from e

                if not row:
                    continue

                if len(row) != width:
                    self.stats.rows_skipped += 1
                    logger.warning(
                        "Skipping record with wrong number of fields",
                        file=str(self.file_path),
                        line=rows.line_num,
                        expected=width,
                        actual=len(row),
                    )
                    continue

                self.stats.rows_read += 1
                if self.stats.rows_read % self.progress_interval == 0:
                    logger.info("Ingestion progress", rows=self.stats.rows_read)

                yield parse_transaction(row, columns)

        logger.info(
            "Finished reading records",
            file=str(self.file_path),
            rows=self.stats.rows_read,
            skipped=self.stats.rows_skipped,
        )

    def read_into(self, sink: Callable[[Transaction], None]) -> ReadStats:
        """
        Emit every transaction to ``sink`` and return the final counters.

        ``sink`` is typically a bounded queue's ``put``, so a slow consumer
        blocks the reader.
        """
        for transaction in self.transactions():
            sink(transaction)
        return self.stats
