"""
Build ChangelogItems from raw pull requests.

The batch snapshot and the live service map base branches to channels
differently (three tracks vs. two), so the table is passed in per call site.
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from changefeed.schemas.changelog import ChangelogAuthor, ChangelogItem, Channel
from changefeed.services.changelog.release_notes import extract_release_note
from changefeed.services.changelog.titles import ClassifiedTitle, classify_title, format_title
from changefeed.services.github.types import RawPullRequest

MAX_CHIPS = 3

_AREA_LABEL = re.compile(r"^area:\s*(.+)$", re.IGNORECASE)


@dataclass(frozen=True)
class ChannelTable:
    """Base branch -> channel mapping with a default for unknown branches."""

    branches: Mapping[str, Channel] = field(default_factory=dict)
    default: Channel = "unknown"

    def resolve(self, base_ref: str | None) -> Channel:
        """Map a base branch to a channel. Total: never raises."""
        if base_ref is None:
            return self.default
        return self.branches.get(base_ref, self.default)


# Snapshot generator: main/canary/nightly, anything else is unknown
BATCH_CHANNELS = ChannelTable(
    branches={"main": "stable", "canary": "canary", "nightly": "nightly"},
    default="unknown",
)

# Live service: canary, everything else ships as stable
SERVICE_CHANNELS = ChannelTable(branches={"canary": "canary"}, default="stable")


def build_chips(classified: ClassifiedTitle, channel: str | None) -> list[str]:
    """Ordered, deduplicated [type, scope, channel] tags, falsy entries skipped."""
    chips: list[str] = []
    for chip in (classified.type, classified.scope, channel):
        if chip and chip not in chips:
            chips.append(chip)
    return chips[:MAX_CHIPS]


def derive_area(labels: Iterable[str]) -> str | None:
    """Value of the first `area: <name>` label."""
    for label in labels:
        match = _AREA_LABEL.match(label)
        if match and match.group(1).strip():
            return match.group(1).strip()
    return None


def build_changelog_item(
    pr: RawPullRequest,
    channels: ChannelTable,
    with_area: bool = False,
) -> ChangelogItem:
    """
    Compose one changelog entry from a raw PR.

    Args:
        pr: Normalized PR from the REST or GraphQL API
        channels: Channel table for the calling feed
        with_area: Also derive `area` from `area:` labels (service feed)

    Returns:
        Immutable ChangelogItem
    """
    classified = classify_title(pr.title, pr.labels)
    channel = channels.resolve(pr.base_ref)
    author = (
        ChangelogAuthor(login=pr.author_login, url=pr.author_url)
        if pr.author_login and pr.author_url
        else None
    )

    return ChangelogItem(
        id=pr.number,
        title=format_title(classified),
        raw_title=pr.title,
        summary=extract_release_note(pr.body),
        merged_at=pr.merged_at,
        url=pr.url,
        diff_url=f"{pr.url}/files",
        author=author,
        labels=list(pr.labels),
        channel=channel,
        chips=build_chips(classified, channel),
        breaking=classified.breaking,
        area=derive_area(pr.labels) if with_area else None,
    )
