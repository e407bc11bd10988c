"""
Test Suite Configuration
"""
import csv
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

import pytest

from src.aggregation.pipeline import IngestionPipeline
from src.aggregation.store import AggregateStore
from src.models.transaction import TRANSACTION_COLUMNS

HEADER = list(TRANSACTION_COLUMNS)

ROW_DEFAULTS = {
    "transaction_id": "TXN001",
    "transaction_date": "2024-01-15",
    "user_id": "USER001",
    "country": "USA",
    "region": "North America",
    "product_id": "PROD001",
    "product_name": "Laptop",
    "category": "Electronics",
    "price": "100.00",
    "quantity": "1",
    "total_price": "100.00",
    "stock_quantity": "50",
    "added_date": "2023-12-01",
}


def make_row(header: Sequence[str] = HEADER, **overrides: str) -> List[str]:
    """Build one raw row in header order"""
    values = {**ROW_DEFAULTS, **overrides}
    return [values.get(name, "") for name in header]


@pytest.fixture
def row() -> Callable[..., List[str]]:
    """Factory for raw rows, see make_row"""
    return make_row


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing rows (lists of cells) to a CSV file under tmp_path"""

    def _write(
        rows: Sequence[Sequence[str]],
        header: Optional[Sequence[str]] = None,
        name: str = "transactions.csv",
    ) -> Path:
        path = tmp_path / name
        with open(path, "w", newline="", encoding="utf-8") as fh:
            writer = csv.writer(fh)
            writer.writerow(header if header is not None else HEADER)
            writer.writerows(rows)
        return path

    return _write


@pytest.fixture
def sample_rows() -> List[List[str]]:
    """Small dataset covering several countries, products, months and regions"""
    overrides: List[Dict[str, str]] = [
        {"country": "USA", "region": "California", "product_name": "Laptop",
         "total_price": "1000", "quantity": "2", "stock_quantity": "100", "transaction_date": "2024-01-10"},
        {"country": "USA", "region": "California", "product_name": "Laptop",
         "total_price": "500", "quantity": "1", "stock_quantity": "0", "transaction_date": "2024-01-20"},
        {"country": "UK", "region": "England", "product_name": "Phone",
         "total_price": "800", "quantity": "1", "stock_quantity": "40", "transaction_date": "2024-02-05"},
        {"country": "UK", "region": "Scotland", "product_name": "Mouse",
         "total_price": "25", "quantity": "5", "stock_quantity": "300", "transaction_date": "2023-12-24"},
        {"country": "Germany", "region": "Bavaria", "product_name": "Phone",
         "total_price": "750", "quantity": "1", "stock_quantity": "35", "transaction_date": "2023-11-02"},
    ]
    return [make_row(transaction_id=f"TXN{i:03d}", **fields) for i, fields in enumerate(overrides, start=1)]


@pytest.fixture
def pipeline() -> IngestionPipeline:
    """Pipeline with a small pool and queue so tests exercise backpressure"""
    return IngestionPipeline(workers=3, queue_size=4)


@pytest.fixture
def store(pipeline: IngestionPipeline) -> AggregateStore:
    """Empty aggregate store"""
    return AggregateStore(pipeline)
