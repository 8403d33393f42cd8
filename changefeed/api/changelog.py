"""
Changelog feed endpoint.
"""

import logging
import math
import re
import time

from fastapi import APIRouter, HTTPException, Query, Response, status

from changefeed.api.deps import ChangelogServiceDep
from changefeed.core.exceptions import UpstreamError
from changefeed.schemas.changelog import Channel
from changefeed.services.changelog.fetcher import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_WINDOW_DAYS,
    clamp_page_size,
    clamp_window_days,
)
from changefeed.services.github.exceptions import GitHubAPIError

router = APIRouter(tags=["changelog"])
logger = logging.getLogger(__name__)

_WINDOW_PARAM = re.compile(r"^(\d+)\s*d?$", re.IGNORECASE)


def parse_window_param(value: str | None) -> int:
    """Parse `30d` / `30` into clamped days; anything unparseable is the default."""
    if not value:
        return DEFAULT_WINDOW_DAYS
    match = _WINDOW_PARAM.match(value.strip())
    if not match:
        return DEFAULT_WINDOW_DAYS
    return clamp_window_days(int(match.group(1)))


def parse_limit_param(value: str | None) -> int:
    """Parse a page size into [1, 50]; anything unparseable is the default."""
    if not value:
        return DEFAULT_PAGE_SIZE
    try:
        count = float(value)
    except ValueError:
        return DEFAULT_PAGE_SIZE
    if not math.isfinite(count):
        return DEFAULT_PAGE_SIZE
    return clamp_page_size(int(count))


@router.get("/changelog")
async def get_changelog(
    response: Response,
    service: ChangelogServiceDep,
    window: str | None = Query(None, description="Lookback window, e.g. 30d (1-365)"),
    limit: str | None = Query(None, description="Page size (1-50)"),
    cursor: str | None = Query(None, description="Opaque cursor from nextCursor"),
    channel: Channel | None = Query(None, description="Only items on this channel"),
) -> dict:
    """Cursor-paginated changelog feed of merged PRs."""
    window_days = parse_window_param(window)
    page_size = parse_limit_param(limit)

    try:
        feed = await service.get_feed(window_days, page_size, cursor, channel)
    except GitHubAPIError as e:
        detail = e.message
        if e.rate_limit_reset:
            reset_in = max(0, e.rate_limit_reset - int(time.time()))
            minutes = reset_in // 60
            detail = f"{e.message}. Rate limit resets in {minutes} minutes."
        logger.warning(f"Changelog upstream failure: {detail}")
        raise UpstreamError(detail) from None
    except Exception:
        logger.exception("Failed to build changelog")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to fetch changelog",
        ) from None

    response.headers["Cache-Control"] = "no-store"
    return feed.to_payload()
