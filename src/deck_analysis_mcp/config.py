"""Configuration management using Pydantic settings."""

from datetime import date
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Card catalog API
    pokemon_tcg_api_url: str = Field(
        default="https://api.pokemontcg.io/v2", description="Pokemon TCG API endpoint"
    )
    pokemon_tcg_api_key: str | None = Field(
        default=None, description="Optional API key sent as X-Api-Key"
    )
    request_timeout: float = Field(default=30.0, description="HTTP timeout in seconds")

    # Analysis defaults
    default_format: Literal["standard", "expanded"] = Field(
        default="standard", description="Format used when a request does not name one"
    )
    include_rotation: bool = Field(
        default=True, description="Whether rotation impact is assessed by default"
    )
    rotation_cutoff: date = Field(
        default=date(2022, 1, 1),
        description="Cards from sets released before this date are treated as rotating",
    )
    max_recommendations: int = Field(
        default=10, description="Maximum recommendations attached to a report"
    )

    # Result cache
    cache_ttl_seconds: int = Field(default=3600, description="Analysis cache time-to-live")
    database_path: str = Field(
        default="~/.deck_analysis.db", description="Path to DuckDB database for cached analyses"
    )

    log_level: str = Field(default="INFO", description="Root log level for the server")


# Global settings instance
settings = Settings()
