"""Unit tests for the snapshot generator task."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from changefeed.services.changelog.fetcher import BatchFetchResult
from changefeed.services.github.exceptions import GitHubAPIError
from changefeed.tasks.generate_changelog import generate_changelog, run
from tests.helpers.factories import REPO, make_raw_pr

FETCH = "changefeed.tasks.generate_changelog.BatchSourceFetcher.fetch"
CLOSE_CLIENT = "changefeed.tasks.generate_changelog.close_github_client"


def _result() -> BatchFetchResult:
    return BatchFetchResult(
        branches=["main", "nightly"],
        pull_requests=[
            make_raw_pr(1, merged_at="2026-01-01T00:00:00Z"),
            make_raw_pr(2, merged_at="2026-01-03T00:00:00Z", base_ref="nightly", body=""),
            make_raw_pr(3, merged_at="2026-01-02T00:00:00Z", base_ref="release"),
            make_raw_pr(1, merged_at="2026-01-01T00:00:00Z"),
        ],
    )


class TestGenerateChangelog:
    """Feed assembly for the snapshot."""

    @patch(FETCH, new_callable=AsyncMock)
    @pytest.mark.anyio
    async def test_builds_batch_feed(self, mock_fetch, test_settings):
        mock_fetch.return_value = _result()

        feed = await generate_changelog(test_settings)

        assert [item.id for item in feed.items] == [2, 3, 1]
        assert [item.channel for item in feed.items] == ["nightly", "unknown", "stable"]
        assert feed.items[0].summary is None
        assert feed.source.branches == ["main", "nightly"]
        assert feed.source.branch is None
        assert feed.source.window_days == 365
        assert feed.next_cursor is None


class TestRun:
    """Exit codes and file output."""

    @patch(CLOSE_CLIENT, new_callable=AsyncMock)
    @patch(FETCH, new_callable=AsyncMock)
    @pytest.mark.anyio
    async def test_writes_snapshot(self, mock_fetch, mock_close, test_settings):
        mock_fetch.return_value = _result()

        assert await run(test_settings) == 0

        path = Path(test_settings.snapshot_path)
        text = path.read_text(encoding="utf-8")
        assert text.endswith("}\n")
        assert text.startswith('{\n  "generatedAt"')

        payload = json.loads(text)
        assert "nextCursor" not in payload
        assert payload["source"]["repo"] == REPO
        assert payload["source"]["branches"] == ["main", "nightly"]
        assert [item["id"] for item in payload["items"]] == [2, 3, 1]
        assert payload["items"][0]["summary"] is None
        assert all("area" not in item for item in payload["items"])
        mock_close.assert_awaited_once()

    @patch(CLOSE_CLIENT, new_callable=AsyncMock)
    @patch(FETCH, new_callable=AsyncMock)
    @pytest.mark.anyio
    async def test_missing_token_fails_without_network(self, mock_fetch, mock_close, test_settings):
        settings = test_settings.model_copy(update={"github_token": ""})

        assert await run(settings) == 1

        mock_fetch.assert_not_called()
        assert not Path(settings.snapshot_path).exists()

    @patch(CLOSE_CLIENT, new_callable=AsyncMock)
    @patch(FETCH, new_callable=AsyncMock)
    @pytest.mark.anyio
    async def test_github_failure_leaves_no_file(self, mock_fetch, mock_close, test_settings):
        mock_fetch.side_effect = GitHubAPIError("GitHub API rate limit exceeded", 403)

        assert await run(test_settings) == 1

        assert not Path(test_settings.snapshot_path).exists()
        mock_close.assert_awaited_once()

    @patch(CLOSE_CLIENT, new_callable=AsyncMock)
    @patch(FETCH, new_callable=AsyncMock)
    @pytest.mark.anyio
    async def test_overwrites_existing_snapshot(self, mock_fetch, mock_close, test_settings):
        mock_fetch.return_value = BatchFetchResult(branches=["main"], pull_requests=[])
        path = Path(test_settings.snapshot_path)
        path.parent.mkdir(parents=True)
        path.write_text("stale", encoding="utf-8")

        assert await run(test_settings) == 0

        assert json.loads(path.read_text(encoding="utf-8"))["items"] == []
