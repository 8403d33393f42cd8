"""Unit tests for Settings: env loading and derived origin lists."""

from __future__ import annotations

from changefeed.config.settings import Settings


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestDefaults:
    def test_defaults(self, monkeypatch):
        for name in ("GITHUB_TOKEN", "CHANGELOG_REPO", "CHANGELOG_LABEL", "ALLOWED_ORIGINS"):
            monkeypatch.delenv(name, raising=False)

        settings = _settings()

        assert settings.github_configured is False
        assert settings.changelog_repo == "flux-lang/flux"
        assert settings.changelog_label == "changelog"
        assert settings.batch_window_days == 365
        assert settings.cache_ttl_seconds == 60.0
        assert settings.allowed_origin_list == []

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_env")
        monkeypatch.setenv("CHANGELOG_REPO", "acme/widgets")

        settings = _settings()

        assert settings.github_configured is True
        assert settings.changelog_repo == "acme/widgets"


class TestOrigins:
    """ALLOWED_ORIGINS parsing and the required-origin check."""

    def test_splits_and_trims(self):
        settings = _settings(allowed_origins=" https://a.example , ,https://b.example")
        assert settings.allowed_origin_list == ["https://a.example", "https://b.example"]

    def test_missing_required_origins(self):
        settings = _settings(allowed_origins="https://fluxspec.org")
        assert settings.missing_required_origins == ["https://cbassuarez.github.io"]

    def test_all_required_present(self, test_settings):
        assert test_settings.missing_required_origins == []
