"""
Health Check Endpoints

Service health plus the metadata of the published snapshot.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from src.aggregation.store import AggregateStore, get_store
from src.config import get_settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    version: str
    environment: str
    timestamp: datetime
    last_data_update: Optional[datetime]
    processing_duration: timedelta
    record_count: int


@router.get("/health", response_model=HealthResponse)
async def health_check(store: AggregateStore = Depends(get_store)) -> HealthResponse:
    """Service status and metadata of the current snapshot."""
    settings = get_settings()
    snapshot = store.get_snapshot()

    return HealthResponse(
        status="healthy",
        version=settings.version,
        environment=settings.app_env,
        timestamp=datetime.now(timezone.utc),
        last_data_update=snapshot.last_updated,
        processing_duration=snapshot.processing_duration,
        record_count=snapshot.record_count,
    )


@router.get("/health/live")
async def liveness_check() -> Dict[str, str]:
    """
    Liveness probe endpoint.

    Returns 200 if the application is running.
    """
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness_check(
    response: Response,
    store: AggregateStore = Depends(get_store),
) -> Dict[str, str]:
    """
    Readiness probe endpoint.

    Returns 503 until the first snapshot has been published.
    """
    if not store.has_data:
        response.status_code = 503
        return {"status": "not_ready", "reason": "no_snapshot"}

    return {"status": "ready"}
