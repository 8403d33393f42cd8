"""
GitHub REST read operations used by the batch changelog generator.

Provides:
- Branch existence checks
- Merged PR search (paginated through every page)
- Single PR detail (the search endpoint lacks full body text)
"""

import logging
from datetime import UTC, datetime
from typing import Any

import httpx

from changefeed.services.github.exceptions import GitHubAPIError
from changefeed.services.github.helpers import handle_error_response, label_names
from changefeed.services.github.http_client import get_github_client
from changefeed.services.github.types import RawPullRequest, SearchHit

logger = logging.getLogger(__name__)


class GitHubReadOperations:
    """
    Read-only REST operations for a single GitHub repository.

    Uses the shared HTTP client singleton for connection pooling.
    """

    BASE_URL = "https://api.github.com"
    API_VERSION = "2022-11-28"
    SEARCH_PAGE_SIZE = 100

    def __init__(self, token: str, repo: str):
        self.token = token
        self.repo = repo
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": self.API_VERSION,
        }

    async def _get_json(
        self,
        path: str,
        params: dict[str, str | int] | None = None,
    ) -> Any | None:
        """
        GET a REST resource and decode its JSON body.

        Returns:
            Decoded JSON, or None if GitHub answered 404

        Raises:
            GitHubAPIError: On transport failure or any other non-2xx response
        """
        client = get_github_client()
        try:
            response = await client.get(
                f"{self.BASE_URL}{path}",
                headers=self._headers,
                params=params,
            )
        except httpx.HTTPError as e:
            raise GitHubAPIError(f"GitHub request failed: {e}") from e

        if response.status_code == 404:
            return None

        handle_error_response(response, f"{self.repo} {path}")
        return response.json()

    async def branch_exists(self, branch: str) -> bool:
        """Check whether a branch exists on the remote."""
        data = await self._get_json(f"/repos/{self.repo}/branches/{branch}")
        return data is not None

    async def search_merged_pulls(
        self,
        branch: str,
        label: str,
        merged_since: str,
    ) -> list[SearchHit]:
        """
        Search merged, labeled PRs against one base branch, following every page.

        Args:
            branch: Base branch name
            label: Required label
            merged_since: Lower bound for merge date (YYYY-MM-DD, inclusive)

        Returns:
            Search hits in search-result order
        """
        query = (
            f"repo:{self.repo} is:pr is:merged label:{label} "
            f"base:{branch} merged:>={merged_since}"
        )
        hits: list[SearchHit] = []
        page = 1

        while True:
            data = await self._get_json(
                "/search/issues",
                params={"q": query, "per_page": self.SEARCH_PAGE_SIZE, "page": page},
            )
            items = (data or {}).get("items") or []
            hits.extend(self._normalize_search_item(item) for item in items)

            if len(items) < self.SEARCH_PAGE_SIZE:
                break
            page += 1

        logger.info(f"Found {len(hits)} merged PRs on {self.repo}@{branch} since {merged_since}")
        return hits

    async def get_pull_request(self, hit: SearchHit) -> RawPullRequest:
        """
        Fetch full PR detail for a search hit.

        Fields missing from the detail payload (or a 404) fall back to the
        search hit's values.
        """
        data = await self._get_json(f"/repos/{self.repo}/pulls/{hit.number}") or {}
        return self._normalize_pull_request(data, hit)

    def _normalize_search_item(self, data: dict[str, Any]) -> SearchHit:
        """Convert a search API item to a SearchHit."""
        return SearchHit(
            number=data.get("number") or 0,
            title=data.get("title") or "",
            url=data.get("html_url") or "",
            closed_at=data.get("closed_at"),
        )

    def _normalize_pull_request(self, data: dict[str, Any], hit: SearchHit) -> RawPullRequest:
        """Convert a PR detail payload to RawPullRequest."""
        user = data.get("user") or {}
        base = data.get("base") or {}

        return RawPullRequest(
            number=data.get("number") or hit.number,
            title=data.get("title") or hit.title,
            body=data.get("body") or "",
            merged_at=data.get("merged_at") or hit.closed_at or datetime.now(UTC).isoformat(),
            base_ref=base.get("ref"),
            url=data.get("html_url") or hit.url,
            labels=label_names(data.get("labels")),
            author_login=user.get("login"),
            author_url=user.get("html_url"),
        )
