"""
Source fetchers: retrieve qualifying merged PRs from GitHub.

- BatchSourceFetcher walks every search page on every live branch, then fetches
  each PR's detail with at most MAX_CONCURRENT_DETAIL_FETCHES requests in flight.
- ServiceSourceFetcher issues exactly one GraphQL page per call, driven by a
  caller-supplied cursor.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TypeVar

from changefeed.services.github.graphql_operations import GitHubGraphQLOperations
from changefeed.services.github.read_operations import GitHubReadOperations
from changefeed.services.github.types import PullRequestPage, RawPullRequest

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

MAX_CONCURRENT_DETAIL_FETCHES = 5

DEFAULT_WINDOW_DAYS = 30
MIN_WINDOW_DAYS = 1
MAX_WINDOW_DAYS = 365

DEFAULT_PAGE_SIZE = 20
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 50


def clamp_window_days(days: int) -> int:
    """Clamp a lookback window to [MIN_WINDOW_DAYS, MAX_WINDOW_DAYS]."""
    return min(max(days, MIN_WINDOW_DAYS), MAX_WINDOW_DAYS)


def clamp_page_size(limit: int) -> int:
    """Clamp a page size to [MIN_PAGE_SIZE, MAX_PAGE_SIZE]."""
    return min(max(limit, MIN_PAGE_SIZE), MAX_PAGE_SIZE)


def merged_since(window_days: int, now: datetime | None = None) -> str:
    """Lower merge-date bound (YYYY-MM-DD, UTC) for a lookback window."""
    now = now or datetime.now(UTC)
    return (now - timedelta(days=window_days)).date().isoformat()


async def map_with_concurrency(
    items: Sequence[T],
    limit: int,
    mapper: Callable[[T], Awaitable[R]],
) -> list[R]:
    """
    Map an async function over items with a fixed pool of `limit` workers.

    Each worker claims the next unclaimed index and only moves on once its own
    call settles. Results are written by index, so output order matches input
    order whatever the completion order.

    The first failure cancels the other workers, so nothing is left in flight
    when it propagates to the caller (unwrapped from the ExceptionGroup).
    """
    results: list[R | None] = [None] * len(items)
    next_index = 0

    async def worker() -> None:
        nonlocal next_index
        while next_index < len(items):
            index = next_index
            next_index += 1
            results[index] = await mapper(items[index])

    try:
        async with asyncio.TaskGroup() as group:
            for _ in range(min(limit, len(items))):
                group.create_task(worker())
    except ExceptionGroup as errors:
        raise errors.exceptions[0] from None
    return results  # type: ignore[return-value]


@dataclass
class BatchFetchResult:
    """PRs gathered by a batch run and the branches that were searched."""

    branches: list[str]
    pull_requests: list[RawPullRequest]


class BatchSourceFetcher:
    """Collects every qualifying merged PR across the live release branches."""

    PRIMARY_BRANCH = "main"
    CANDIDATE_BRANCHES: tuple[str, ...] = ("main", "canary", "nightly")

    def __init__(self, github: GitHubReadOperations, label: str, window_days: int):
        self.github = github
        self.label = label
        self.window_days = window_days

    async def resolve_branches(self) -> list[str]:
        """The primary branch, plus any other candidate that exists on the remote."""
        branches: list[str] = []
        for branch in self.CANDIDATE_BRANCHES:
            if branch == self.PRIMARY_BRANCH or await self.github.branch_exists(branch):
                branches.append(branch)
            else:
                logger.info(f"Branch {branch} not found on {self.github.repo}, skipping")
        return branches

    async def fetch(self, now: datetime | None = None) -> BatchFetchResult:
        """
        Search every branch, then fetch full PR details.

        Raises:
            GitHubAPIError: Any failed search or detail request aborts the run
        """
        branches = await self.resolve_branches()
        since = merged_since(self.window_days, now)

        hits = []
        for branch in branches:
            hits.extend(await self.github.search_merged_pulls(branch, self.label, since))

        pull_requests = await map_with_concurrency(
            hits,
            MAX_CONCURRENT_DETAIL_FETCHES,
            self.github.get_pull_request,
        )
        logger.info(f"Fetched details for {len(pull_requests)} PRs across {branches}")
        return BatchFetchResult(branches=branches, pull_requests=pull_requests)


class ServiceSourceFetcher:
    """One GraphQL page of merged PRs per request."""

    def __init__(
        self,
        github: GitHubGraphQLOperations,
        repo: str,
        label: str,
        branch: str = "main",
    ):
        self.github = github
        self.repo = repo
        self.label = label
        self.branch = branch

    def build_query(self, window_days: int, now: datetime | None = None) -> str:
        """GitHub search string for merged, labeled PRs within the window."""
        return (
            f"repo:{self.repo} is:pr is:merged label:{self.label} "
            f"base:{self.branch} merged:>={merged_since(window_days, now)}"
        )

    async def fetch_page(
        self,
        window_days: int,
        limit: int,
        cursor: str | None = None,
    ) -> PullRequestPage:
        """
        Fetch a single page. Window and page size are clamped here regardless
        of what the caller asked for.

        Raises:
            GitHubAPIError: If the query fails (no partial results)
        """
        query = self.build_query(clamp_window_days(window_days))
        return await self.github.search_pull_requests(
            query,
            first=clamp_page_size(limit),
            after=cursor,
        )
