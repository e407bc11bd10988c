"""
FastAPI Application Factory

Creates and configures the dashboard API application.
"""

from typing import Any, Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from prometheus_client import make_asgi_app

from src.config import Settings, get_settings
from src.serving.api.middleware import RequestLoggingMiddleware
from src.serving.api.routes import dashboard_router, health_router

ENDPOINTS = {
    "health": "/api/health",
    "country_revenues": "/api/revenue-by-country",
    "top_products": "/api/top-products",
    "monthly_sales": "/api/sales-by-month",
    "top_regions": "/api/top-regions",
    "complete_dashboard": "/api/dashboard",
    "metrics": "/metrics",
}


def create_api_app(settings: Optional[Settings] = None, **kwargs: Any) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Settings to configure from (cached settings if omitted)
        **kwargs: Extra FastAPI constructor arguments, e.g. ``lifespan``

    Returns:
        Configured FastAPI app instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="ABT Analytics Dashboard API",
        description="Pre-aggregated sales analytics over ingested transactions",
        version=settings.version,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        **kwargs,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.monitoring.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(health_router, prefix="/api", tags=["Health"])
    app.include_router(dashboard_router, prefix="/api", tags=["Dashboard"])

    app.mount("/metrics", make_asgi_app())

    @app.get("/")
    async def root() -> Dict[str, Any]:
        """Service information and endpoint map."""
        return {
            "service": "ABT Analytics Dashboard API",
            "version": settings.version,
            "status": "running",
            "endpoints": ENDPOINTS,
        }

    return app
