"""
Live changelog service: cache -> GraphQL page -> build -> assemble.
"""

import logging

from changefeed.schemas.changelog import ChangelogFeed, Channel, FeedSource
from changefeed.services.changelog.builder import SERVICE_CHANNELS, build_changelog_item
from changefeed.services.changelog.cache import ResponseCache
from changefeed.services.changelog.feed import assemble_feed, filter_items
from changefeed.services.changelog.fetcher import (
    ServiceSourceFetcher,
    clamp_page_size,
    clamp_window_days,
)

logger = logging.getLogger(__name__)


class ChangelogService:
    """
    Serves cursor-paginated changelog feeds, fronted by a ResponseCache.

    Upstream failures propagate as GitHubAPIError and leave the cache untouched.
    """

    def __init__(self, fetcher: ServiceSourceFetcher, cache: ResponseCache[ChangelogFeed]):
        self.fetcher = fetcher
        self.cache = cache

    async def get_feed(
        self,
        window_days: int,
        limit: int,
        cursor: str | None = None,
        channel: Channel | None = None,
    ) -> ChangelogFeed:
        """
        Return one page of the feed.

        Args:
            window_days: Lookback window (clamped to 1-365)
            limit: Page size (clamped to 1-50)
            cursor: Opaque cursor from a previous page's nextCursor
            channel: Optional channel filter applied to the page

        Raises:
            GitHubAPIError: If the upstream query fails
        """
        window_days = clamp_window_days(window_days)
        limit = clamp_page_size(limit)
        key = ResponseCache.make_key(window_days, limit, cursor)

        feed = self.cache.get(key)
        if feed is None:
            feed = await self._build_feed(window_days, limit, cursor)
            self.cache.set(key, feed)

        if channel:
            # The upstream query already applied the window
            return feed.model_copy(update={"items": filter_items(feed.items, channel=channel)})
        return feed

    async def _build_feed(
        self,
        window_days: int,
        limit: int,
        cursor: str | None,
    ) -> ChangelogFeed:
        page = await self.fetcher.fetch_page(window_days, limit, cursor)
        items = [
            build_changelog_item(pr, SERVICE_CHANNELS, with_area=True)
            for pr in page.pull_requests
        ]
        logger.info(f"Built {len(items)} changelog items (window={window_days}d, limit={limit})")

        return assemble_feed(
            items,
            FeedSource(
                repo=self.fetcher.repo,
                branch=self.fetcher.branch,
                window_days=window_days,
                label=self.fetcher.label,
            ),
            next_cursor=page.end_cursor if page.has_next_page else None,
        )
