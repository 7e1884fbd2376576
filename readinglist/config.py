"""
ReadingList Sync v1 - Configuration Module

This module provides centralized configuration for the sync tool.
It loads settings from environment variables and provides typed access.
"""

from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SETTINGS_PATH = Path("~/.readinglist_instapaper")
DEFAULT_BOOKMARKS_PATH = Path("~/Library/Safari/Bookmarks.plist")


class PathSettings(BaseSettings):
    """Filesystem locations used by a sync run"""
    settings_path: Path = Field(default=DEFAULT_SETTINGS_PATH, alias="READINGLIST_SETTINGS_PATH")
    bookmarks_path: Path = Field(default=DEFAULT_BOOKMARKS_PATH, alias="SAFARI_BOOKMARKS_PATH")
    plutil_path: str = Field(default="/usr/bin/plutil", alias="PLUTIL_PATH")
    icon_path: Path | None = Field(default=None, alias="INSTAPAPER_ICON_PATH")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    def expanded(self) -> "PathSettings":
        """Return a copy with ``~`` expanded in every path"""
        return self.model_copy(
            update={
                "settings_path": self.settings_path.expanduser(),
                "bookmarks_path": self.bookmarks_path.expanduser(),
                "icon_path": self.icon_path.expanduser() if self.icon_path else None,
            }
        )


class InstapaperSettings(BaseSettings):
    """Remote API configuration"""
    api_base: str = Field(default="https://www.instapaper.com", alias="INSTAPAPER_API_BASE")
    timeout: float = Field(default=30.0, alias="INSTAPAPER_TIMEOUT")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)


class AppSettings(BaseSettings):
    """General application settings"""
    log_level: str = Field(default="WARNING", alias="LOG_LEVEL")
    notifications_enabled: bool = Field(default=True, alias="NOTIFICATIONS_ENABLED")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)


class SyncConfig:
    """Main configuration object handed to the sync orchestrator"""

    def __init__(
        self,
        paths: PathSettings | None = None,
        instapaper: InstapaperSettings | None = None,
        app: AppSettings | None = None,
    ):
        self.paths = (paths or PathSettings()).expanded()
        self.instapaper = instapaper or InstapaperSettings()
        self.app = app or AppSettings()

    @property
    def settings_path(self) -> Path:
        return self.paths.settings_path

    @property
    def bookmarks_path(self) -> Path:
        return self.paths.bookmarks_path

    @property
    def icon_path(self) -> Path | None:
        return self.paths.icon_path


def load_config() -> SyncConfig:
    """Build a configuration from the current environment"""
    return SyncConfig()

