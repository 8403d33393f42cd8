"""
Generate the static changelog snapshot.

Searches every live release branch for merged PRs carrying the changelog
label, builds one entry per PR and overwrites the snapshot JSON file.
Any GitHub failure aborts the run; there is no partial snapshot.

Usage:
    python -m changefeed.tasks.generate_changelog
"""

import asyncio
import json
import logging
import sys
from pathlib import Path

from changefeed.config.settings import Settings, settings
from changefeed.schemas.changelog import ChangelogFeed, FeedSource
from changefeed.services.changelog.builder import BATCH_CHANNELS, build_changelog_item
from changefeed.services.changelog.feed import assemble_feed
from changefeed.services.changelog.fetcher import BatchSourceFetcher
from changefeed.services.github.exceptions import GitHubAPIError
from changefeed.services.github.http_client import close_github_client
from changefeed.services.github.read_operations import GitHubReadOperations

logger = logging.getLogger(__name__)


async def generate_changelog(app_settings: Settings) -> ChangelogFeed:
    """Fetch, build and assemble the snapshot feed."""
    github = GitHubReadOperations(app_settings.github_token, app_settings.changelog_repo)
    fetcher = BatchSourceFetcher(
        github,
        label=app_settings.changelog_label,
        window_days=app_settings.batch_window_days,
    )

    result = await fetcher.fetch()
    items = [build_changelog_item(pr, BATCH_CHANNELS) for pr in result.pull_requests]

    return assemble_feed(
        items,
        FeedSource(
            repo=app_settings.changelog_repo,
            branches=result.branches,
            window_days=app_settings.batch_window_days,
            label=app_settings.changelog_label,
        ),
    )


def write_snapshot(feed: ChangelogFeed, path: Path) -> None:
    """Overwrite the snapshot file with the feed (2-space indented, trailing newline)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"{json.dumps(feed.to_payload(), indent=2)}\n", encoding="utf-8")


async def run(app_settings: Settings) -> int:
    """Run one generation. Returns the process exit code."""
    if not app_settings.github_configured:
        logger.error("GITHUB_TOKEN is required to generate changelog.json")
        return 1

    try:
        feed = await generate_changelog(app_settings)
    except GitHubAPIError as e:
        logger.error(f"Changelog generation failed: {e.message}")
        return 1
    finally:
        await close_github_client()

    path = Path(app_settings.snapshot_path)
    write_snapshot(feed, path)
    logger.info(f"Wrote {len(feed.items)} changelog items to {path}")
    return 0


def main() -> None:
    """Entry point for the snapshot generator."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    sys.exit(asyncio.run(run(settings)))


if __name__ == "__main__":
    main()
