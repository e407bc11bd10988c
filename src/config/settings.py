"""
ABT Analytics Dashboard
Centralized Configuration Management

Pydantic settings with environment variable and .env support for the
ingestion pipeline, the API server and logging.
"""

import os
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class IngestionSettings(BaseSettings):
    """Ingestion Pipeline Configuration"""

    model_config = SettingsConfigDict(env_prefix="INGEST_")

    workers: Optional[int] = Field(default=None, description="Aggregation workers (default: CPU count)")
    queue_size: int = Field(default=1000, description="Reader to worker queue capacity")
    progress_interval: int = Field(default=100_000, description="Rows between progress log lines")
    delimiter: str = Field(default=",", description="Field delimiter")
    encoding: str = Field(default="utf-8-sig", description="Source file encoding")

    # View sizes
    top_products_limit: int = Field(default=20, description="Entries kept in the top products view")
    top_regions_limit: int = Field(default=30, description="Entries kept in the top regions view")

    # Sample data used when no source file is configured
    sample_rows: int = Field(default=5000, description="Rows generated for the sample dataset")
    sample_path: str = Field(default="./data/sample_transactions.csv", description="Sample dataset path")
    sample_seed: int = Field(default=42, description="Sample generator seed")

    @field_validator("workers")
    @classmethod
    def validate_workers(cls, v: Optional[int]) -> Optional[int]:
        """Worker count must be positive when set"""
        if v is not None and v < 1:
            raise ValueError("workers must be at least 1")
        return v

    @field_validator("queue_size", "progress_interval", "top_products_limit", "top_regions_limit")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("value must be at least 1")
        return v

    @property
    def effective_workers(self) -> int:
        """Configured worker count, or the host's CPU count"""
        return self.workers or os.cpu_count() or 1


class MonitoringSettings(BaseSettings):
    """Logging and Observability Configuration"""

    model_config = SettingsConfigDict(env_prefix="")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL", description="Logging level")
    log_format: str = Field(default="json", alias="LOG_FORMAT", description="Log format: json or text")

    # CORS
    cors_origins: List[str] = Field(default=["*"], description="Allowed CORS origins")


class Settings(BaseSettings):
    """
    Main Application Settings

    Aggregates all configuration sections and provides a single entry point
    for accessing application configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="abt-analytics-dashboard", alias="APP_NAME", description="Application name")
    app_env: str = Field(default="development", alias="ENVIRONMENT", description="Environment")
    debug: bool = Field(default=False, alias="DEBUG", description="Debug mode")

    # API Server
    api_host: str = Field(default="0.0.0.0", alias="API_HOST", description="API host")
    api_port: int = Field(default=8080, alias="PORT", description="API port")

    # Source dataset
    data_file_path: Optional[str] = Field(default=None, alias="DATA_FILE_PATH", description="Transactions CSV to ingest")

    # Version
    version: str = Field(default="1.0.0", description="Application version")

    # Subsystem configurations
    ingestion: IngestionSettings = Field(default_factory=IngestionSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value"""
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()

    @field_validator("data_file_path")
    @classmethod
    def empty_path_is_none(cls, v: Optional[str]) -> Optional[str]:
        """An empty DATA_FILE_PATH means no dataset was provided"""
        if v is not None and not v.strip():
            return None
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development"""
        return self.app_env == "development"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are only loaded once.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
