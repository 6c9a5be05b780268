"""Pytest configuration and fixtures."""

from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from config import Config
from nanolink import ShortCodeGenerator, ShortLinkService, VisitRecorder
from nanolink.common.logging_config import setup_logging
from nanolink.database import MemoryShortLinkStore
from web_app import create_app


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def store(logger) -> MemoryShortLinkStore:
    """Create an empty in-memory store."""
    return MemoryShortLinkStore(logger=logger)


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=6)


@pytest.fixture
def service(store, short_code_generator, logger) -> ShortLinkService:
    """Create service instance."""
    return ShortLinkService(
        store=store,
        short_code_generator=short_code_generator,
        logger=logger,
    )


@pytest.fixture
async def visit_recorder(service, logger) -> AsyncGenerator[VisitRecorder, None]:
    """Running visit recorder, stopped after the test."""
    recorder = VisitRecorder(service, logger=logger, workers=2)
    recorder.start()

    yield recorder

    await recorder.stop()


@pytest.fixture
def config() -> Config:
    """Configuration for app tests (memory store, generous rate limit)."""
    return Config(
        database_url="memory://",
        base_url="http://testserver",
        rate_limit=1000,
        _env_file=None,
    )


@pytest.fixture
def app(service, visit_recorder, config):
    """Create test FastAPI app.

    ASGITransport does not run the lifespan, so the service and recorder
    are wired in directly.
    """
    return create_app(
        service_instance=service,
        visit_recorder=visit_recorder,
        config=config,
    )


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
