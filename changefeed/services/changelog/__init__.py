"""
Changelog pipeline.

Module structure:
- titles.py: Conventional-commit title classification
- release_notes.py: One-line release note extraction from PR bodies
- builder.py: RawPullRequest -> ChangelogItem, per-feed channel tables
- fetcher.py: Batch (REST, all pages) and service (GraphQL, one page) fetchers
- cache.py: TTL response cache with injectable clock
- feed.py: Sorting, de-duplication, filtering, feed packaging
- service.py: Cached live feed used by the API
"""

from changefeed.services.changelog.builder import (
    BATCH_CHANNELS,
    SERVICE_CHANNELS,
    ChannelTable,
    build_changelog_item,
    build_chips,
)
from changefeed.services.changelog.cache import ResponseCache
from changefeed.services.changelog.feed import (
    assemble_feed,
    dedupe_items,
    filter_items,
    sort_items,
)
from changefeed.services.changelog.fetcher import (
    BatchSourceFetcher,
    ServiceSourceFetcher,
    map_with_concurrency,
)
from changefeed.services.changelog.release_notes import clamp_summary, extract_release_note
from changefeed.services.changelog.service import ChangelogService
from changefeed.services.changelog.titles import ClassifiedTitle, classify_title, format_title

__all__ = [
    # Extraction
    "ClassifiedTitle",
    "classify_title",
    "format_title",
    "extract_release_note",
    "clamp_summary",
    # Building
    "ChannelTable",
    "BATCH_CHANNELS",
    "SERVICE_CHANNELS",
    "build_changelog_item",
    "build_chips",
    # Fetching
    "BatchSourceFetcher",
    "ServiceSourceFetcher",
    "map_with_concurrency",
    # Caching and assembly
    "ResponseCache",
    "assemble_feed",
    "dedupe_items",
    "filter_items",
    "sort_items",
    # Service
    "ChangelogService",
]
