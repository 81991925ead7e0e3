"""FastAPI application entrypoint for the metrics demonstration service."""

from __future__ import annotations

from fastapi import FastAPI

from metricslab.config import Settings, get_settings
from metricslab.hello import HelloMetrics, router as hello_router
from metricslab.lib.logger import configure_logging, get_logger
from metricslab.lib.metrics import MetricsRegistry
from metricslab.system import router as system_router

logger = get_logger(__name__)


def create_app(settings: Settings | None = None, registry: MetricsRegistry | None = None) -> FastAPI:
    """Build the application with its own metrics registry.

    One registry is expected per process. It is created here (unless supplied)
    and handed to every component through ``app.state``.
    """

    settings = settings or get_settings()
    configure_logging(settings.log_level)

    if registry is None:
        registry = MetricsRegistry(cardinality_limit=settings.metrics_cardinality_limit)

    app = FastAPI(title=settings.app_name, version="0.1.0")
    app.state.settings = settings
    app.state.metrics = registry
    app.state.hello_metrics = HelloMetrics(registry)

    app.include_router(hello_router, tags=["hello"])
    app.include_router(system_router, tags=["system"])

    logger.info(
        "Application configured",
        extra={"app_name": settings.app_name, "cardinality_limit": registry.cardinality_limit},
    )
    return app


app = create_app()
