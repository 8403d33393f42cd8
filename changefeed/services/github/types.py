"""Data types for GitHub API responses."""

from dataclasses import dataclass, field


@dataclass
class RawPullRequest:
    """Normalized merged pull request, as returned by either the REST or GraphQL API."""

    number: int
    title: str
    body: str
    merged_at: str
    base_ref: str | None
    url: str
    labels: list[str] = field(default_factory=list)
    author_login: str | None = None
    author_url: str | None = None


@dataclass
class SearchHit:
    """Single item from the REST issue search (lacks full body text)."""

    number: int
    title: str
    url: str
    closed_at: str | None


@dataclass
class PullRequestPage:
    """One page of the GraphQL PR search."""

    pull_requests: list[RawPullRequest]
    has_next_page: bool
    end_cursor: str | None  # Opaque, passed through verbatim
