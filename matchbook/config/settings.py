"""Configuration management using Pydantic Settings.

The configuration is organized into logical groups:
- StorageConfig: Data directory and backing file names of the match stores
- MatchingConfig: Match level and criteria recorded for accepted matches
- SearchConfig: Library search limits used when proposing candidates
- DatabaseConfig: Provider track cache connection settings
- JellyfinConfig: Library server connection settings
- LoggingConfig: Logging levels and files
"""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from matchbook.domain.entities.match import MatchCriteria, MatchLevel


class StorageConfig(BaseModel):
    """Location of the JSON backed match stores."""

    data_dir: Path = Path("data")
    verified_matches_file: str = "verified_matches.json"
    manual_map_file: str = "manual_track_map.json"


class MatchingConfig(BaseModel):
    """Active matching configuration, stamped onto every accepted match."""

    item_match_level: MatchLevel = MatchLevel.DEFAULT
    item_match_criteria: MatchCriteria = MatchCriteria.TRACK_NAME

    @field_validator("item_match_level", mode="before")
    @classmethod
    def parse_level(cls, value: Any) -> MatchLevel:
        """Accept level names in any case ("strict", "STRICT")."""
        return MatchLevel.parse(value)

    @field_validator("item_match_criteria", mode="before")
    @classmethod
    def parse_criteria(cls, value: Any) -> MatchCriteria:
        """Accept flag names ("TrackName, Artists") as well as integers."""
        return MatchCriteria.parse(value)


class SearchConfig(BaseModel):
    """Library index search settings."""

    result_limit: int = 20
    max_query_length: int = 50
    media_type: str = "Audio"


class DatabaseConfig(BaseModel):
    """Provider track cache connection configuration."""

    url: str = "sqlite+aiosqlite:///data/provider_tracks.db"
    echo: bool = False


class JellyfinConfig(BaseModel):
    """Jellyfin server used as the library index."""

    url: str = "http://localhost:8096"
    api_key: str = ""
    timeout_seconds: float = 10.0
    retry_count: int = 3


class LoggingConfig(BaseModel):
    """Logging configuration for console and file output."""

    console_level: str = "INFO"
    file_level: str = "DEBUG"
    log_file: Path = Path("matchbook.log")


class Settings(BaseSettings):
    """Main application settings with environment variable support.

    Nested values use a double underscore, e.g. ``JELLYFIN__API_KEY`` or
    ``MATCHING__ITEM_MATCH_CRITERIA="TrackName, Artists"``.
    The .env file is automatically loaded for development convenience.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    storage: StorageConfig = StorageConfig()
    matching: MatchingConfig = MatchingConfig()
    search: SearchConfig = SearchConfig()
    database: DatabaseConfig = DatabaseConfig()
    jellyfin: JellyfinConfig = JellyfinConfig()
    logging: LoggingConfig = LoggingConfig()


# Singleton instance for application use
settings = Settings()
