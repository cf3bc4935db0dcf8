"""Application configuration using Pydantic settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Book Ratings Service"
    debug: bool = False

    # Storage
    storage_backend: Literal["file", "memory"] = "file"
    data_file: Path = Path("books.json")  # relative to the working directory
    seed_titles: list[str] = ["The Great Gatsby", "To Kill a Mockingbird", "1984"]

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    workers: int = 1


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
