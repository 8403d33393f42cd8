from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # GitHub - bearer token for REST and GraphQL calls
    # Empty string = service answers 500 and the batch generator exits before any request
    github_token: str = ""

    # Changelog source
    changelog_repo: str = "flux-lang/flux"
    changelog_label: str = "changelog"
    # Branch queried by the live service (the batch generator discovers its own)
    service_branch: str = "main"

    # Batch snapshot
    batch_window_days: int = 365
    snapshot_path: str = "public/changelog.json"

    # Live service
    cache_ttl_seconds: float = 60.0
    # Comma-separated list of origins allowed to read the feed cross-origin
    allowed_origins: str = ""
    # Origins the deployed site needs; a warning is logged at startup if any is missing
    required_origins: str = "https://fluxspec.org,https://cbassuarez.github.io"

    # Application
    debug: bool = False

    @property
    def allowed_origin_list(self) -> list[str]:
        """Parsed ALLOWED_ORIGINS."""
        return _split_csv(self.allowed_origins)

    @property
    def required_origin_list(self) -> list[str]:
        """Parsed REQUIRED_ORIGINS."""
        return _split_csv(self.required_origins)

    @property
    def missing_required_origins(self) -> list[str]:
        """Required origins absent from the allow-list."""
        allowed = set(self.allowed_origin_list)
        return [origin for origin in self.required_origin_list if origin not in allowed]

    @property
    def github_configured(self) -> bool:
        """Check if a GitHub token is set."""
        return bool(self.github_token)


def _split_csv(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


settings = Settings()
