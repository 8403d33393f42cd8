"""Root conftest: shared fixtures for all tests.

Provides:
- anyio backend pinned to asyncio
- Settings fixture with a dummy GitHub token
- FakeClock for deterministic cache expiry
"""

from __future__ import annotations

import pytest

from changefeed.config.settings import Settings


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        github_token="ghp_test_token_12345",
        changelog_repo="flux-lang/flux",
        changelog_label="changelog",
        allowed_origins="https://fluxspec.org,https://cbassuarez.github.io",
        snapshot_path=str(tmp_path / "public" / "changelog.json"),
    )
