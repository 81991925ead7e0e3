"""Health and metrics export routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST

from metricslab.lib.exposition import render_prometheus, snapshot_payload
from metricslab.lib.metrics import MetricsRegistry

router = APIRouter()


def get_metrics_registry(request: Request) -> MetricsRegistry:
    registry: MetricsRegistry | None = getattr(request.app.state, "metrics", None)
    if registry is None:
        raise RuntimeError("Metrics registry not configured on application state")
    return registry


@router.get("/health", summary="Health check")
async def health_check() -> JSONResponse:
    """Return liveness response for uptime monitoring."""
    payload = {"ok": True, "data": {"status": "healthy"}}
    return JSONResponse(content=payload)


@router.get("/metrics", summary="Metrics endpoint")
async def metrics_endpoint(registry: MetricsRegistry = Depends(get_metrics_registry)) -> JSONResponse:
    return JSONResponse({"ok": True, "data": snapshot_payload(registry.snapshot())})


@router.get("/metrics/prometheus", summary="Prometheus exposition")
async def prometheus_endpoint(registry: MetricsRegistry = Depends(get_metrics_registry)) -> Response:
    return Response(content=render_prometheus(registry), media_type=CONTENT_TYPE_LATEST)
