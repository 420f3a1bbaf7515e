"""
Settings loaded from environment variables (prefix CHESS_) or a .env file.
"""

import logging
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    database_url: str = "sqlite:///./chess.db"
    database_echo: bool = False
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="CHESS_", env_file=".env", env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


def configure_logging(settings: Settings) -> None:
    """Set up the root logger once, at application start-up."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
