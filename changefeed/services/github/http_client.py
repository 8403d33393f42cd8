"""
Process-wide httpx client for GitHub.

The REST fetches of the snapshot generator and the GraphQL query of the live
service share one pooled AsyncClient. It is created on first use and must be
closed explicitly: by the FastAPI lifespan, or at the end of a batch run.
"""

import logging

import httpx

logger = logging.getLogger(__name__)

USER_AGENT = "changefeed"
REQUEST_TIMEOUT_SECONDS = 30.0
CONNECT_TIMEOUT_SECONDS = 5.0

_client: httpx.AsyncClient | None = None


def get_github_client() -> httpx.AsyncClient:
    """
    Return the shared client, creating it if needed (or if it was closed).

    The bearer token differs per caller, so it travels with each request
    rather than living on the client.
    """
    global _client
    if _client is None or _client.is_closed:
        _client = httpx.AsyncClient(
            headers={"User-Agent": USER_AGENT},
            timeout=httpx.Timeout(REQUEST_TIMEOUT_SECONDS, connect=CONNECT_TIMEOUT_SECONDS),
            limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
            http2=True,
        )
        logger.debug("Opened shared GitHub HTTP client")
    return _client


async def close_github_client() -> None:
    """Close the shared client. Safe to call when none is open."""
    global _client
    if _client is None:
        return
    if not _client.is_closed:
        await _client.aclose()
        logger.debug("Closed shared GitHub HTTP client")
    _client = None
