"""Configuration package."""

from changefeed.config.settings import Settings, settings

__all__ = [
    "Settings",
    "settings",
]
