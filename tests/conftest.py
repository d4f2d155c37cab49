"""Shared test fixtures for all test modules."""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta

import pytest

try:
    import httpx
except ImportError:
    httpx = None

from tests.payloads import RANGE_TO

from grafanasj.adapters.sources.in_memory import InMemorySource
from grafanasj.core.config import BasicAuth, SimpleJSONConfig
from grafanasj.core.models import (
    Annotation,
    DataPoint,
    NumberColumn,
    StringColumn,
    TableColumn,
    TimeColumn,
)


@pytest.fixture
def source() -> InMemorySource:
    """In-memory source with two series, a table, annotations and tags.

    Series points are stored newest first so responses prove sorting.
    """
    src = InMemorySource()
    for name in ("upper_50", "upper_75"):
        src.add_series(
            name,
            [
                DataPoint(time=RANGE_TO, value=1500.0),
                DataPoint(time=RANGE_TO - timedelta(seconds=5), value=1234.0),
            ],
            labels={"host": "web-1"},
        )
    src.add_table(
        "requests",
        [
            TableColumn("Time", TimeColumn([RANGE_TO])),
            TableColumn("Path", StringColumn(["/index"])),
            TableColumn("Count", NumberColumn([42.0])),
        ],
    )
    src.add_annotation(
        Annotation(
            time=datetime.fromtimestamp(1234, tz=UTC),
            title="First Title",
            text="First annotation",
        )
    )
    src.add_annotation(
        Annotation(
            time=datetime.fromtimestamp(1235, tz=UTC),
            time_end=datetime.fromtimestamp(1237, tz=UTC),
            title="Second Title",
            text="Second annotation with range",
            tags=("outage",),
        )
    )
    src.add_tag_values("region", ["eu-west", "us-east"])
    return src


@pytest.fixture
def config(source: InMemorySource) -> SimpleJSONConfig:
    """Configuration with every capability wired to the in-memory source."""
    return SimpleJSONConfig.from_source(source)


@pytest.fixture
def auth_config(source: InMemorySource) -> SimpleJSONConfig:
    """Configuration requiring basic auth (grafana / s3cret)."""
    return SimpleJSONConfig.from_source(
        source, basic_auth=BasicAuth("grafana", "s3cret"), realm="test-realm"
    )


# === ASGI Test Fixtures ===


@pytest.fixture
def asgi_test_client():
    """Factory fixture that creates an httpx.AsyncClient for ASGI testing.

    Usage:
        async def test_something(asgi_test_client):
            app = create_asgi_app(config)
            async with asgi_test_client(app) as client:
                response = await client.post("/query", json=...)
    """
    if httpx is None:
        pytest.skip("httpx not installed")

    def _get_client(app):
        """Return an AsyncClient context manager for the given app."""
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://test"
        )

    return _get_client


@pytest.fixture
async def asgi_client(config: SimpleJSONConfig, asgi_test_client) -> AsyncGenerator:
    """ASGI client over an app with every capability wired."""
    from grafanasj.adapters.frameworks.asgi import create_asgi_app

    async with asgi_test_client(create_asgi_app(config)) as client:
        yield client


# === WSGI Test Fixtures ===


@pytest.fixture
def wsgi_test_client():
    """Factory fixture that creates an httpx.Client for WSGI testing."""
    if httpx is None:
        pytest.skip("httpx not installed")

    def _get_client(app):
        """Return a Client context manager for the given app."""
        return httpx.Client(
            transport=httpx.WSGITransport(app=app), base_url="http://test"
        )

    return _get_client
