"""Hello endpoint and its request counter."""

from metricslab.hello.metrics import HelloMetrics
from metricslab.hello.routes import router

__all__ = ["HelloMetrics", "router"]
