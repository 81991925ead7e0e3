"""System routes: health and metrics export."""

from metricslab.system.routes import get_metrics_registry, router

__all__ = ["get_metrics_registry", "router"]
