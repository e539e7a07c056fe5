"""Application configuration."""

from pathlib import Path

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables (RACKOFF_*)."""

    # Where preferences and the undo log live
    state_dir: Path = Path("~/.rackoff")

    # Used until the user picks their own folders
    default_source_directory: Path = Path("~/Desktop")
    default_archive_directory: Path = Path("~/Documents/Archive")

    # Engine tuning
    yield_every: int = 10  # files between cooperative yields
    save_debounce_seconds: float = 0.5

    log_level: str = "INFO"

    @property
    def preferences_file(self) -> Path:
        return self.state_dir.expanduser() / "preferences.json"

    @property
    def undo_log_file(self) -> Path:
        return self.state_dir.expanduser() / "undo.json"

    model_config = ConfigDict(
        env_prefix="RACKOFF_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra fields from .env
    )


def get_settings() -> Settings:
    """Read settings fresh from the environment."""
    return Settings()
