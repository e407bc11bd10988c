"""
FastAPI Production Application

Main entry point for the ABT Analytics Dashboard API. The configured
dataset is ingested once at startup; without one, a synthetic sample is
generated and ingested instead.
"""

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
import structlog

from src.aggregation.pipeline import IngestionPipeline
from src.aggregation.store import AggregateStore, init_store, reset_store
from src.config import Settings, get_settings
from src.data.generators import TransactionGenerator
from src.serving.api.main import create_api_app

logger = structlog.get_logger(__name__)


def resolve_dataset(settings: Settings) -> Path:
    """
    Path of the dataset to ingest at startup.

    Falls back to generating the sample dataset when DATA_FILE_PATH is unset.
    """
    if settings.data_file_path:
        return Path(settings.data_file_path)

    ingestion = settings.ingestion
    logger.info(
        "No dataset file provided. Using sample data for development.",
        rows=ingestion.sample_rows,
        file=ingestion.sample_path,
    )
    generator = TransactionGenerator(seed=ingestion.sample_seed)
    return generator.write_csv(ingestion.sample_path, n=ingestion.sample_rows)


def load_initial_snapshot(store: AggregateStore, settings: Settings) -> None:
    """Ingest the startup dataset into the store"""
    dataset = resolve_dataset(settings)
    logger.info("Processing dataset", file=str(dataset))
    store.ingest(dataset)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    from src.config.logging import configure_logging
    settings = get_settings()
    configure_logging(settings=settings)

    logger.info("Starting ABT Analytics Dashboard API", environment=settings.app_env)

    store = init_store(IngestionPipeline.from_settings(settings.ingestion))

    # A failed startup ingest aborts startup
    await asyncio.to_thread(load_initial_snapshot, store, settings)

    yield

    logger.info("Shutting down...")
    reset_store()


def create_app() -> FastAPI:
    """Create the application with the startup lifespan attached"""
    return create_api_app(lifespan=lifespan)


app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
