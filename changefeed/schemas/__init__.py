"""Pydantic schemas for the changelog feed."""

from changefeed.schemas.changelog import (
    Channel,
    ChangelogAuthor,
    ChangelogFeed,
    ChangelogItem,
    FeedSource,
)

__all__ = [
    "Channel",
    "ChangelogAuthor",
    "ChangelogFeed",
    "ChangelogItem",
    "FeedSource",
]
