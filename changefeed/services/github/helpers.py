"""
Error translation for GitHub responses.

Every non-2xx answer becomes a GitHubAPIError; a 403 caused by an exhausted
rate limit carries the reset time so the API layer can tell callers when to
retry.
"""

import logging
from dataclasses import dataclass

import httpx

from changefeed.services.github.exceptions import GitHubAPIError

logger = logging.getLogger(__name__)


def _int_header(response: httpx.Response, name: str) -> int | None:
    value = response.headers.get(name)
    try:
        return int(value) if value else None
    except ValueError:
        return None


@dataclass(frozen=True)
class RateLimitInfo:
    """Parsed X-RateLimit-* headers."""

    remaining: int | None
    reset_timestamp: int | None  # Unix seconds

    @classmethod
    def from_response(cls, response: httpx.Response) -> "RateLimitInfo":
        return cls(
            remaining=_int_header(response, "X-RateLimit-Remaining"),
            reset_timestamp=_int_header(response, "X-RateLimit-Reset"),
        )

    @property
    def is_exhausted(self) -> bool:
        return self.remaining == 0


def handle_error_response(response: httpx.Response, context: str) -> None:
    """
    Raise for any non-2xx response from the GitHub API.

    Args:
        response: The HTTP response from GitHub API
        context: What was being fetched, for the error message (e.g. "owner/repo#12")

    Raises:
        GitHubAPIError: For authentication, authorization, or other API errors
    """
    if response.is_success:
        return

    code = response.status_code
    if code == 401:
        raise GitHubAPIError("Invalid or expired GitHub token", 401)
    if code == 404:
        raise GitHubAPIError(f"Resource not found: {context}", 404)
    if code == 403:
        rate_info = RateLimitInfo.from_response(response)
        if rate_info.is_exhausted:
            raise GitHubAPIError(
                "GitHub API rate limit exceeded",
                403,
                rate_limit_reset=rate_info.reset_timestamp,
            )
        raise GitHubAPIError("GitHub API forbidden", 403)

    logger.warning(f"GitHub API error {code} for {context}: {response.text[:200]}")
    raise GitHubAPIError(f"GitHub API error: {code}", code)


def label_names(labels: list[dict] | None) -> list[str]:
    """Names from a REST or GraphQL label list, skipping null entries and names."""
    return [str(label["name"]) for label in labels or [] if label and label.get("name")]
