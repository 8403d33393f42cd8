"""
GitHub GraphQL operations used by the live changelog service.

A single `search` query returns one page of merged PRs with the body text
already inlined, so the service never needs per-PR detail fetches.
"""

import logging
from typing import Any

import httpx

from changefeed.services.github.exceptions import GitHubAPIError
from changefeed.services.github.helpers import handle_error_response, label_names
from changefeed.services.github.http_client import get_github_client
from changefeed.services.github.types import PullRequestPage, RawPullRequest

logger = logging.getLogger(__name__)

CHANGELOG_SEARCH_QUERY = """
query Changelog($query: String!, $first: Int!, $after: String) {
  search(type: ISSUE, query: $query, first: $first, after: $after) {
    pageInfo { hasNextPage endCursor }
    nodes {
      ... on PullRequest {
        number
        title
        url
        mergedAt
        baseRefName
        bodyText
        author { login }
        labels(first: 50) { nodes { name } }
      }
    }
  }
}
"""


class GitHubGraphQLOperations:
    """GraphQL queries against the GitHub v4 API."""

    GRAPHQL_URL = "https://api.github.com/graphql"
    PROFILE_BASE_URL = "https://github.com"

    def __init__(self, token: str):
        self.token = token
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    async def execute(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """
        Run a GraphQL query and return its `data` object.

        Raises:
            GitHubAPIError: On transport failure, non-2xx, or a non-empty `errors` list
        """
        client = get_github_client()
        try:
            response = await client.post(
                self.GRAPHQL_URL,
                headers=self._headers,
                json={"query": query, "variables": variables},
            )
        except httpx.HTTPError as e:
            raise GitHubAPIError(f"GitHub request failed: {e}") from e

        handle_error_response(response, "graphql")

        payload = response.json() or {}
        errors = payload.get("errors")
        if errors:
            logger.warning(f"GitHub GraphQL returned errors: {errors}")
            raise GitHubAPIError("GitHub GraphQL query failed", 502)

        return payload.get("data") or {}

    async def search_pull_requests(
        self,
        search_query: str,
        first: int,
        after: str | None = None,
    ) -> PullRequestPage:
        """
        Fetch one page of PRs matching a search query.

        Args:
            search_query: GitHub search syntax (e.g. "repo:o/r is:pr is:merged")
            first: Page size
            after: Opaque cursor from a previous page's endCursor

        Returns:
            PullRequestPage with normalized PRs and page info
        """
        data = await self.execute(
            CHANGELOG_SEARCH_QUERY,
            {"query": search_query, "first": first, "after": after},
        )
        search = data.get("search") or {}
        page_info = search.get("pageInfo") or {}
        nodes = search.get("nodes") or []

        return PullRequestPage(
            pull_requests=[self._normalize_node(node) for node in nodes if node],
            has_next_page=bool(page_info.get("hasNextPage")),
            end_cursor=page_info.get("endCursor"),
        )

    def _normalize_node(self, node: dict[str, Any]) -> RawPullRequest:
        """Convert a GraphQL PullRequest node to RawPullRequest."""
        author = node.get("author") or {}
        login = author.get("login")
        label_nodes = (node.get("labels") or {}).get("nodes") or []

        return RawPullRequest(
            number=node.get("number") or 0,
            title=node.get("title") or "",
            body=node.get("bodyText") or "",
            merged_at=node.get("mergedAt") or "",
            base_ref=node.get("baseRefName"),
            url=node.get("url") or "",
            labels=label_names(label_nodes),
            author_login=login,
            author_url=f"{self.PROFILE_BASE_URL}/{login}" if login else None,
        )
