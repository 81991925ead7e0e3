"""Greeting route counting every request it serves."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from metricslab.hello.metrics import HelloMetrics
from metricslab.lib.logger import get_logger
from metricslab.lib.metrics import MetricsError

GREETING = "Hello, metrics!"

router = APIRouter()
logger = get_logger(__name__)


def get_hello_metrics(request: Request) -> HelloMetrics:
    hello_metrics: HelloMetrics | None = getattr(request.app.state, "hello_metrics", None)
    if hello_metrics is None:
        raise RuntimeError("Hello metrics not configured on application state")
    return hello_metrics


@router.get("/hello", response_class=PlainTextResponse)
async def hello(hello_metrics: HelloMetrics = Depends(get_hello_metrics)) -> PlainTextResponse:
    """Count the request and return the greeting."""

    try:
        hello_metrics.increment_counter()
    except MetricsError:
        logger.exception("Failed to record hello request")
    return PlainTextResponse(GREETING)
