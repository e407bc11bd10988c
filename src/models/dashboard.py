"""
Dashboard View Models

Finalized, immutable aggregate views and the snapshot that groups them.
A snapshot is built once per ingestion run and replaced as a whole.
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class ViewKind(str, Enum):
    """Named slices of a dashboard snapshot"""
    COUNTRY_REVENUES = "country_revenues"
    TOP_PRODUCTS = "top_products"
    MONTHLY_SALES = "monthly_sales"
    TOP_REGIONS = "top_regions"


class CountryProductRevenue(BaseModel):
    """Revenue for one (country, product) pair"""
    model_config = ConfigDict(frozen=True)

    country: str
    product_name: str
    total_revenue: float
    transaction_count: int


class ProductFrequency(BaseModel):
    """Purchased quantity and last known stock for one product"""
    model_config = ConfigDict(frozen=True)

    product_name: str
    purchase_count: int
    current_stock: int


class MonthlySales(BaseModel):
    """Sales amount and volume for one calendar month"""
    model_config = ConfigDict(frozen=True)

    month: str
    year: int
    total_sales: float
    sales_volume: int


class RegionRevenue(BaseModel):
    """Revenue and items sold for one region"""
    model_config = ConfigDict(frozen=True)

    region: str
    total_revenue: float
    items_sold: int


class DashboardSnapshot(BaseModel):
    """
    Immutable set of aggregate views plus build metadata.

    All four views come from the same ingestion run. ``last_updated`` is
    ``None`` until the first run has been published.
    """
    model_config = ConfigDict(frozen=True)

    country_revenues: Tuple[CountryProductRevenue, ...] = ()
    top_products: Tuple[ProductFrequency, ...] = ()
    monthly_sales: Tuple[MonthlySales, ...] = ()
    top_regions: Tuple[RegionRevenue, ...] = ()
    last_updated: Optional[datetime] = None
    processing_duration: timedelta = Field(default_factory=timedelta)
    record_count: int = 0

    @classmethod
    def empty(cls) -> "DashboardSnapshot":
        """Snapshot served before any ingestion has completed"""
        return cls()

    @property
    def is_empty(self) -> bool:
        return self.last_updated is None

    def view(self, kind: Union[ViewKind, str]) -> tuple:
        """
        Return one view by name.

        Raises:
            ValueError: if ``kind`` is not a known view name
        """
        return getattr(self, ViewKind(kind).value)
