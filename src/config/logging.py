"""
Dashboard Logging

structlog events and stdlib records (uvicorn, prometheus) share one stdout
handler. Every line carries the emitting thread, so progress from the reader
and failures from individual aggregation workers can be told apart.
"""

import logging
import sys
from typing import List, Optional

import structlog
from structlog.processors import CallsiteParameter, CallsiteParameterAdder, JSONRenderer, TimeStamper
from structlog.stdlib import ProcessorFormatter, add_log_level

from src.config.settings import Settings, get_settings

SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _shared_processors() -> List:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        add_log_level,
        TimeStamper(fmt="iso", utc=True),
        CallsiteParameterAdder([CallsiteParameter.THREAD_NAME]),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def build_renderer(log_format: str):
    """JSON lines for ``json``, colored key/value output otherwise"""
    if log_format == "json":
        return JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def configure_logging(log_level: Optional[str] = None, settings: Optional[Settings] = None) -> None:
    """
    Route structlog and stdlib logging through a single stdout handler.

    Args:
        log_level: Level name overriding LOG_LEVEL
        settings: Source of LOG_LEVEL and LOG_FORMAT (cached settings if omitted)
    """
    settings = settings or get_settings()
    monitoring = settings.monitoring
    level = (log_level or monitoring.log_level).upper()
    numeric_level = logging.getLevelName(level)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    processors = _shared_processors()

    structlog.configure(
        processors=processors + [ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        ProcessorFormatter(
            processor=build_renderer(monitoring.log_format),
            foreign_pre_chain=processors,
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(numeric_level)

    # uvicorn installs its own handlers; replace them so lines are not doubled
    for name in SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers = [handler]
        server_logger.setLevel(numeric_level)
        server_logger.propagate = False

    structlog.get_logger(__name__).info(
        "Logging configured",
        level=level,
        format=monitoring.log_format,
        environment=settings.app_env,
    )
