"""Pydantic schemas for the changelog feed (shared by the snapshot file and the API)."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

Channel = Literal["stable", "nightly", "canary", "unknown"]


class FeedModel(BaseModel):
    """Base for feed models: immutable, camelCase on the wire."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ChangelogAuthor(FeedModel):
    """PR author handle and profile link."""

    login: str
    url: str


class ChangelogItem(FeedModel):
    """A single merged PR as a changelog entry."""

    id: int
    title: str
    raw_title: str
    summary: str | None = None
    merged_at: str
    url: str
    diff_url: str
    author: ChangelogAuthor | None = None
    labels: list[str]
    channel: Channel
    chips: list[str]
    breaking: bool = False
    area: str | None = None  # Service feed only


class FeedSource(FeedModel):
    """Describes the query a feed was built from."""

    repo: str
    branch: str | None = None  # Service feed (single branch)
    branches: list[str] | None = None  # Snapshot feed (every branch queried)
    window_days: int | None = None
    label: str


class ChangelogFeed(FeedModel):
    """Feed payload: items newest first, plus an upstream cursor in service mode."""

    generated_at: str
    source: FeedSource
    items: list[ChangelogItem]
    next_cursor: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict with unset optional keys omitted.

        `summary` and `author` stay as explicit nulls; consumers rely on the keys.
        """
        payload = self.model_dump(mode="json", by_alias=True)
        if self.next_cursor is None:
            payload.pop("nextCursor")
        payload["source"] = {k: v for k, v in payload["source"].items() if v is not None}
        for item in payload["items"]:
            if item["area"] is None:
                del item["area"]
        return payload
