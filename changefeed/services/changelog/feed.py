"""
Feed assembly: ordering, de-duplication, filtering and packaging of changelog items.
"""

from collections.abc import Iterable
from datetime import UTC, datetime, timedelta

from changefeed.schemas.changelog import ChangelogFeed, ChangelogItem, Channel, FeedSource


def parse_merged_at(value: str) -> datetime | None:
    """Parse an ISO-8601 merge timestamp; naive values are treated as UTC."""
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _sort_key(item: ChangelogItem) -> tuple[float, int]:
    merged = parse_merged_at(item.merged_at)
    # Unparseable timestamps sort after every real one
    timestamp = merged.timestamp() if merged else float("-inf")
    return (timestamp, item.id)


def sort_items(items: Iterable[ChangelogItem]) -> list[ChangelogItem]:
    """Newest merge first; ties broken by descending PR number."""
    return sorted(items, key=_sort_key, reverse=True)


def dedupe_items(items: Iterable[ChangelogItem]) -> list[ChangelogItem]:
    """Drop repeated PR numbers, keeping the first occurrence."""
    seen: set[int] = set()
    unique: list[ChangelogItem] = []
    for item in items:
        if item.id in seen:
            continue
        seen.add(item.id)
        unique.append(item)
    return unique


def filter_items(
    items: Iterable[ChangelogItem],
    window_days: int | None = None,
    channel: Channel | None = None,
    now: datetime | None = None,
) -> list[ChangelogItem]:
    """
    Keep items merged within the window (if given) and on one channel (if given).

    With a window, items with unparseable merge timestamps are dropped.
    """
    cutoff = None
    if window_days is not None:
        cutoff = (now or datetime.now(UTC)) - timedelta(days=window_days)

    kept: list[ChangelogItem] = []
    for item in items:
        if cutoff is not None:
            merged = parse_merged_at(item.merged_at)
            if merged is None or merged < cutoff:
                continue
        if channel and item.channel != channel:
            continue
        kept.append(item)
    return kept


def assemble_feed(
    items: Iterable[ChangelogItem],
    source: FeedSource,
    next_cursor: str | None = None,
    now: datetime | None = None,
) -> ChangelogFeed:
    """
    Package items into a feed.

    Args:
        items: Changelog items in any order
        source: Query descriptor (repo, branches, window, label)
        next_cursor: Upstream pagination cursor, passed through untouched
        now: Assembly time (defaults to the current UTC time)

    Returns:
        ChangelogFeed with items sorted newest first
    """
    generated_at = (now or datetime.now(UTC)).isoformat().replace("+00:00", "Z")
    return ChangelogFeed(
        generated_at=generated_at,
        source=source,
        items=sort_items(dedupe_items(items)),
        next_cursor=next_cursor,
    )
