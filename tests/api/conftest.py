"""API test fixtures: app instances, HTTP clients and a mocked GitHub GraphQL endpoint.

Builds on root conftest fixtures (test_settings, fake_clock).

Every app gets its own ResponseCache driven by the FakeClock, so cache
expiry is controlled by the test rather than wall time.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from changefeed.main import create_app
from changefeed.services.changelog.cache import ResponseCache
from tests.helpers.factories import graphql_node, graphql_search_payload


# ─────────────────────────────────────────────────────────────────────────────
# App + client fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def changelog_cache(test_settings, fake_clock) -> ResponseCache:
    return ResponseCache(ttl_seconds=test_settings.cache_ttl_seconds, clock=fake_clock)


@pytest.fixture
def app(test_settings, changelog_cache):
    return create_app(test_settings, cache=changelog_cache)


@pytest.fixture
async def api_client(app):
    """HTTP client bound to the app through ASGITransport (no network)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def unconfigured_client(test_settings):
    """Client for an app started without GITHUB_TOKEN."""
    app = create_app(test_settings.model_copy(update={"github_token": ""}))
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ─────────────────────────────────────────────────────────────────────────────
# GitHub mock
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def github_graphql():
    """SAFETY: patch the shared HTTP client used by GraphQL operations.

    Yields the AsyncMock client; tests set `client.post.return_value` or
    `side_effect`. Defaults to a two-item page with no further pages.
    """
    with patch("changefeed.services.github.graphql_operations.get_github_client") as get_client:
        client = AsyncMock()
        client.post.return_value = httpx.Response(
            status_code=200,
            json=graphql_search_payload(
                [graphql_node(1), graphql_node(2, baseRefName="canary")]
            ),
        )
        get_client.return_value = client
        yield client
