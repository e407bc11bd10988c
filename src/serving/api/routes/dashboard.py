"""
Dashboard API Endpoints

Read-only JSON views over the published dashboard snapshot.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
import structlog

from src.aggregation.store import AggregateStore, get_store
from src.models.dashboard import (
    CountryProductRevenue,
    DashboardSnapshot,
    MonthlySales,
    ProductFrequency,
    RegionRevenue,
    ViewKind,
)

router = APIRouter()
logger = structlog.get_logger(__name__)

# {top} is filled from the limits of the store's pipeline
VIEW_DESCRIPTIONS = {
    ViewKind.COUNTRY_REVENUES: "Country-level revenue data sorted by total revenue (descending)",
    ViewKind.TOP_PRODUCTS: "{top} most frequently purchased products with current stock",
    ViewKind.MONTHLY_SALES: "Monthly sales volume data highlighting peak sales periods",
    ViewKind.TOP_REGIONS: "{top} regions by total revenue and items sold",
}


def describe_view(kind: ViewKind, store: AggregateStore) -> str:
    """Description of a view, naming the truncation limit in effect"""
    limits = {
        ViewKind.TOP_PRODUCTS: store.pipeline.top_products_limit,
        ViewKind.TOP_REGIONS: store.pipeline.top_regions_limit,
    }
    limit = limits.get(kind)
    return VIEW_DESCRIPTIONS[kind].format(top=f"Top {limit}" if limit is not None else "All")


class ResponseMeta(BaseModel):
    """Description and freshness of a response"""
    description: str
    updated_at: Optional[datetime]


class CountryRevenueResponse(BaseModel):
    data: List[CountryProductRevenue]
    count: int
    meta: ResponseMeta


class TopProductsResponse(BaseModel):
    data: List[ProductFrequency]
    count: int
    meta: ResponseMeta


class MonthlySalesResponse(BaseModel):
    data: List[MonthlySales]
    count: int
    meta: ResponseMeta


class TopRegionsResponse(BaseModel):
    data: List[RegionRevenue]
    count: int
    meta: ResponseMeta


class DashboardResponse(BaseModel):
    data: DashboardSnapshot
    meta: ResponseMeta


def _view_response(store: AggregateStore, kind: ViewKind) -> dict:
    """Build the data/count/meta envelope for one view"""
    # One snapshot read keeps data and updated_at consistent
    snapshot = store.get_snapshot()
    data = snapshot.view(kind)
    return {
        "data": list(data),
        "count": len(data),
        "meta": {
            "description": describe_view(kind, store),
            "updated_at": snapshot.last_updated,
        },
    }


@router.get("/revenue-by-country", response_model=CountryRevenueResponse)
async def get_country_revenues(store: AggregateStore = Depends(get_store)):
    """Revenue per country and product."""
    return _view_response(store, ViewKind.COUNTRY_REVENUES)


@router.get("/top-products", response_model=TopProductsResponse)
async def get_top_products(store: AggregateStore = Depends(get_store)):
    """Most purchased products with their latest stock level."""
    return _view_response(store, ViewKind.TOP_PRODUCTS)


@router.get("/sales-by-month", response_model=MonthlySalesResponse)
async def get_monthly_sales(store: AggregateStore = Depends(get_store)):
    """Sales amount and volume per month."""
    return _view_response(store, ViewKind.MONTHLY_SALES)


@router.get("/top-regions", response_model=TopRegionsResponse)
async def get_top_regions(store: AggregateStore = Depends(get_store)):
    """Regions with the highest revenue."""
    return _view_response(store, ViewKind.TOP_REGIONS)


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(store: AggregateStore = Depends(get_store)):
    """Complete dashboard snapshot."""
    snapshot = store.get_snapshot()
    return {
        "data": snapshot,
        "meta": {
            "description": "Complete dashboard data including all metrics",
            "updated_at": snapshot.last_updated,
        },
    }


@router.get("/views/{kind}")
async def get_view(kind: str, store: AggregateStore = Depends(get_store)):
    """Any single view by name."""
    try:
        view_kind = ViewKind(kind)
    except ValueError:
        logger.warning("Unknown view requested", view=kind)
        raise HTTPException(
            status_code=404,
            detail=f"Unknown view '{kind}'. Expected one of: {[k.value for k in ViewKind]}",
        )
    return _view_response(store, view_kind)
