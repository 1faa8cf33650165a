"""Application settings loaded from the environment."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from platformdirs import user_data_dir
from pydantic import Field
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

APP_NAME = "g22-study-bot"
APP_AUTHOR = "arzg"


def default_data_dir() -> Path:
    """Per-platform data directory for the bot's persistent state."""
    return Path(user_data_dir(APP_NAME, APP_AUTHOR))


class Settings(BaseSettings):
    """Bot configuration.

    Values are read from environment variables (case-insensitive) and an
    optional ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    discord_token: str = ""
    command_prefix: str = "~"

    # Fixed channels of the study group guild
    for_review_channel_id: int = 793720525250756639
    flash_cards_channel_id: int = 771593804057673767
    calendar_channel_id: int = 771595328029589544

    contributor_role_name: str = "contributor"
    deck_extension: str = ".apkg"
    vote_emoji: str = "👍"

    # Year used for calendar due dates; the current year when unset
    calendar_year: int | None = None

    data_dir: Path = Field(default_factory=default_data_dir)
    log_level: str = "INFO"

    @property
    def calendar_path(self) -> Path:
        """File holding the serialized calendar."""
        return self.data_dir / "calendar"


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
