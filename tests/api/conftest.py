"""Fixtures for HTTP tests.

The application is exercised through FastAPI's TestClient with every
container dependency overridden: in-memory cache, stub resolvers, a fresh
tally and mock loggers. No network, DNS or Redis access happens.
"""

from unittest.mock import Mock, patch

import pytest
from fastapi.testclient import TestClient

from hostdetail.application.services import EnrichmentOrchestrator, UserAgentTally
from hostdetail.core.container import (
    get_cache,
    get_enrichment_orchestrator,
    get_logger,
    get_user_agent_tally,
)
from hostdetail.core.result import Success
from hostdetail.main import app
from tests.conftest import InMemoryCache, StubResolver


@pytest.fixture
def access_logger():
    """Logger used by the middleware and exception handlers."""
    logger = Mock()
    with (
        patch(
            "hostdetail.presentation.middleware.request_logging_middleware.get_logger",
            return_value=logger,
        ),
        patch("hostdetail.presentation.errors.get_logger", return_value=logger),
    ):
        yield logger


@pytest.fixture
def dns_resolver() -> StubResolver:
    return StubResolver(Success(value="dns.google"))


@pytest.fixture
def geo_resolver(sample_geo) -> StubResolver:
    return StubResolver(Success(value=sample_geo))


@pytest.fixture
def tally() -> UserAgentTally:
    return UserAgentTally(max_entries=100)


@pytest.fixture
def orchestrator(memory_cache, dns_resolver, geo_resolver, mock_logger):
    return EnrichmentOrchestrator(
        cache=memory_cache,
        dns_resolver=dns_resolver,
        geo_resolver=geo_resolver,
        logger=mock_logger,
    )


@pytest.fixture
def override_dependencies(orchestrator, tally, memory_cache, mock_logger):
    app.dependency_overrides[get_enrichment_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_user_agent_tally] = lambda: tally
    app.dependency_overrides[get_cache] = lambda: memory_cache
    app.dependency_overrides[get_logger] = lambda: mock_logger
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client(override_dependencies, access_logger):
    """Provide test client (lifespan not started)."""
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def browser_headers() -> dict[str, str]:
    return {
        "User-Agent": (
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_4) AppleWebKit/605.1.15 "
            "(KHTML, like Gecko) Version/17.4 Safari/605.1.15"
        )
    }
