"""
Transaction Aggregation

Run-local accumulators for the four dashboard views and the worker loop that
folds queued transactions into them.

All four dictionaries are guarded by one lock so that the updates made for a
single transaction are applied as a unit.
"""

import calendar
import queue
import threading
from dataclasses import dataclass
from typing import Dict, Tuple

import structlog

from src.models.transaction import Transaction

logger = structlog.get_logger(__name__)

# Queued once per worker after the reader has finished
STOP = object()


@dataclass
class CountryProductTotals:
    country: str
    product_name: str
    total_revenue: float = 0.0
    transaction_count: int = 0


@dataclass
class ProductTotals:
    product_name: str
    purchase_count: int = 0
    current_stock: int = 0


@dataclass
class MonthTotals:
    year: int
    month_number: int
    month: str
    total_sales: float = 0.0
    sales_volume: int = 0


@dataclass
class RegionTotals:
    region: str
    total_revenue: float = 0.0
    items_sold: int = 0


class AggregationState:
    """
    Shared accumulators for one ingestion run.

    Safe to fold into from many threads. Never exposed to snapshot readers.
    """

    def __init__(self):
        self.country_products: Dict[Tuple[str, str], CountryProductTotals] = {}
        self.products: Dict[str, ProductTotals] = {}
        self.months: Dict[Tuple[int, int], MonthTotals] = {}
        self.regions: Dict[str, RegionTotals] = {}
        self.records_folded = 0
        self._lock = threading.Lock()

    def fold(self, tx: Transaction) -> None:
        """Apply one transaction to all four accumulators"""
        with self._lock:
            self.records_folded += 1

            key = (tx.country, tx.product_name)
            country_product = self.country_products.get(key)
            if country_product is None:
                self.country_products[key] = CountryProductTotals(
                    country=tx.country,
                    product_name=tx.product_name,
                    total_revenue=tx.total_price,
                    transaction_count=1,
                )
            else:
                country_product.total_revenue += tx.total_price
                country_product.transaction_count += 1

            product = self.products.get(tx.product_name)
            if product is None:
                self.products[tx.product_name] = ProductTotals(
                    product_name=tx.product_name,
                    purchase_count=tx.quantity,
                    current_stock=tx.stock_quantity,
                )
            else:
                product.purchase_count += tx.quantity
                # Latest non-zero reading wins
                if tx.stock_quantity != 0:
                    product.current_stock = tx.stock_quantity

            date = tx.transaction_date
            month_key = (date.year, date.month)
            month = self.months.get(month_key)
            if month is None:
                self.months[month_key] = MonthTotals(
                    year=date.year,
                    month_number=date.month,
                    month=calendar.month_name[date.month],
                    total_sales=tx.total_price,
                    sales_volume=tx.quantity,
                )
            else:
                month.total_sales += tx.total_price
                month.sales_volume += tx.quantity

            region = self.regions.get(tx.region)
            if region is None:
                self.regions[tx.region] = RegionTotals(
                    region=tx.region,
                    total_revenue=tx.total_price,
                    items_sold=tx.quantity,
                )
            else:
                region.total_revenue += tx.total_price
                region.items_sold += tx.quantity


def drain(work_queue: "queue.Queue", state: AggregationState) -> int:
    """
    Worker loop: fold transactions until the STOP sentinel arrives.

    A worker whose fold fails keeps consuming (and discarding) items until
    STOP, then re-raises, so the reader never blocks on a full queue.

    Returns:
        Number of transactions this worker folded
    """
    folded = 0
    failure = None
    while True:
        item = work_queue.get()
        try:
            if item is STOP:
                break
            if failure is None:
                state.fold(item)
                folded += 1
        except Exception as e:
            failure = e
        finally:
            work_queue.task_done()

    if failure is not None:
        logger.error("Aggregation worker failed", folded=folded, error=str(failure))
        raise failure

    logger.debug("Aggregation worker finished", folded=folded)
    return folded
