"""
Snapshot Builder

Converts the run-local accumulators into sorted, optionally truncated view
tuples and stamps the build metadata. Runs only after every aggregation
worker has exited.

Ordering:
- country revenues: total revenue desc, then country, product name
- top products: purchase count desc, then product name
- monthly sales: year desc, total sales desc, then calendar month
- top regions: total revenue desc, then region
"""

from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional, Tuple

from src.aggregation.aggregator import (
    AggregationState,
    CountryProductTotals,
    MonthTotals,
    ProductTotals,
    RegionTotals,
)
from src.models.dashboard import (
    CountryProductRevenue,
    DashboardSnapshot,
    MonthlySales,
    ProductFrequency,
    RegionRevenue,
)

DEFAULT_TOP_PRODUCTS = 20
DEFAULT_TOP_REGIONS = 30

# Summation order across workers varies, so money is reported in cents
MONEY_DECIMALS = 2


def _truncate(items: List, limit: Optional[int]) -> List:
    if limit is not None and len(items) > limit:
        return items[:limit]
    return items


def _money(value: float) -> float:
    return round(value, MONEY_DECIMALS)


def sort_country_revenues(totals: Iterable[CountryProductTotals]) -> Tuple[CountryProductRevenue, ...]:
    ordered = sorted(
        totals,
        key=lambda t: (-_money(t.total_revenue), t.country, t.product_name),
    )
    return tuple(
        CountryProductRevenue(
            country=t.country,
            product_name=t.product_name,
            total_revenue=_money(t.total_revenue),
            transaction_count=t.transaction_count,
        )
        for t in ordered
    )


def sort_top_products(
    totals: Iterable[ProductTotals],
    limit: Optional[int] = DEFAULT_TOP_PRODUCTS,
) -> Tuple[ProductFrequency, ...]:
    ordered = sorted(totals, key=lambda t: (-t.purchase_count, t.product_name))
    return tuple(
        ProductFrequency(
            product_name=t.product_name,
            purchase_count=t.purchase_count,
            current_stock=t.current_stock,
        )
        for t in _truncate(ordered, limit)
    )


def sort_monthly_sales(totals: Iterable[MonthTotals]) -> Tuple[MonthlySales, ...]:
    ordered = sorted(
        totals,
        key=lambda t: (-t.year, -_money(t.total_sales), t.month_number),
    )
    return tuple(
        MonthlySales(
            month=t.month,
            year=t.year,
            total_sales=_money(t.total_sales),
            sales_volume=t.sales_volume,
        )
        for t in ordered
    )


def sort_top_regions(
    totals: Iterable[RegionTotals],
    limit: Optional[int] = DEFAULT_TOP_REGIONS,
) -> Tuple[RegionRevenue, ...]:
    ordered = sorted(totals, key=lambda t: (-_money(t.total_revenue), t.region))
    return tuple(
        RegionRevenue(
            region=t.region,
            total_revenue=_money(t.total_revenue),
            items_sold=t.items_sold,
        )
        for t in _truncate(ordered, limit)
    )


def build_snapshot(
    state: AggregationState,
    processing_duration: timedelta,
    top_products_limit: Optional[int] = DEFAULT_TOP_PRODUCTS,
    top_regions_limit: Optional[int] = DEFAULT_TOP_REGIONS,
    built_at: Optional[datetime] = None,
) -> DashboardSnapshot:
    """
    Finalize the accumulators of a completed run.

    Args:
        state: Accumulators after the worker barrier
        processing_duration: Time from run start to now
        top_products_limit: Entries kept in the top products view (None keeps all)
        top_regions_limit: Entries kept in the top regions view (None keeps all)
        built_at: Timestamp to record (defaults to current UTC time)

    Returns:
        DashboardSnapshot whose record_count is the number of rows folded
    """
    return DashboardSnapshot(
        country_revenues=sort_country_revenues(state.country_products.values()),
        top_products=sort_top_products(state.products.values(), top_products_limit),
        monthly_sales=sort_monthly_sales(state.months.values()),
        top_regions=sort_top_regions(state.regions.values(), top_regions_limit),
        last_updated=built_at or datetime.now(timezone.utc),
        processing_duration=processing_duration,
        record_count=state.records_folded,
    )
