"""API dependencies."""

from typing import Annotated

from fastapi import Depends, Request

from changefeed.config.settings import Settings
from changefeed.core.exceptions import ConfigurationError
from changefeed.schemas.changelog import ChangelogFeed
from changefeed.services.changelog.cache import ResponseCache
from changefeed.services.changelog.fetcher import ServiceSourceFetcher
from changefeed.services.changelog.service import ChangelogService
from changefeed.services.github.graphql_operations import GitHubGraphQLOperations


def get_settings(request: Request) -> Settings:
    """Settings the app was created with."""
    return request.app.state.settings


def get_changelog_cache(request: Request) -> ResponseCache[ChangelogFeed]:
    """The app's single ResponseCache, built in create_app."""
    return request.app.state.changelog_cache


def get_changelog_service(
    settings: Annotated[Settings, Depends(get_settings)],
    cache: Annotated[ResponseCache[ChangelogFeed], Depends(get_changelog_cache)],
) -> ChangelogService:
    """
    Build the per-request changelog service.

    Raises:
        ConfigurationError: If GITHUB_TOKEN is unset (before any network call)
    """
    if not settings.github_configured:
        raise ConfigurationError("GITHUB_TOKEN not configured")

    fetcher = ServiceSourceFetcher(
        GitHubGraphQLOperations(settings.github_token),
        repo=settings.changelog_repo,
        label=settings.changelog_label,
        branch=settings.service_branch,
    )
    return ChangelogService(fetcher, cache)


ChangelogServiceDep = Annotated[ChangelogService, Depends(get_changelog_service)]
