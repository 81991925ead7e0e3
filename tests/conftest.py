"""Pytest fixtures for the metrics service tests."""

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from metricslab.config import Settings
from metricslab.lib.metrics import MetricsRegistry
from metricslab.main import create_app


@pytest.fixture()
def settings() -> Settings:
    """Return settings isolated from the surrounding environment."""
    return Settings(APP_NAME="metricslab-test", LOG_LEVEL="DEBUG", METRICS_CARDINALITY_LIMIT=None)


@pytest.fixture()
def registry() -> MetricsRegistry:
    return MetricsRegistry()


@pytest.fixture()
def app(settings: Settings, registry: MetricsRegistry) -> FastAPI:
    """Return a freshly built application wired to the test registry."""
    return create_app(settings=settings, registry=registry)


@pytest_asyncio.fixture()
async def async_client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Provide an `httpx.AsyncClient` configured for the FastAPI app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client
