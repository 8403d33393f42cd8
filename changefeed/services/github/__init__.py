"""
GitHub service package.

Usage: `from changefeed.services.github import GitHubReadOperations, GitHubAPIError`

Module structure:
- read_operations.py: REST search/detail/branch calls (batch generator)
- graphql_operations.py: GraphQL PR search (live service)
- http_client.py: Shared pooled AsyncClient
- helpers.py: Rate limit handling and error utilities
- types.py: Data types and response models
- exceptions.py: Custom exceptions
"""

from changefeed.services.github.exceptions import GitHubAPIError
from changefeed.services.github.graphql_operations import GitHubGraphQLOperations
from changefeed.services.github.helpers import RateLimitInfo, handle_error_response, label_names
from changefeed.services.github.http_client import close_github_client, get_github_client
from changefeed.services.github.read_operations import GitHubReadOperations
from changefeed.services.github.types import PullRequestPage, RawPullRequest, SearchHit

__all__ = [
    # Operation classes
    "GitHubReadOperations",
    "GitHubGraphQLOperations",
    # HTTP client lifecycle
    "get_github_client",
    "close_github_client",
    # Utilities
    "handle_error_response",
    "label_names",
    "RateLimitInfo",
    # Exceptions
    "GitHubAPIError",
    # Types
    "PullRequestPage",
    "RawPullRequest",
    "SearchHit",
]
