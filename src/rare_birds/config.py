"""
Application settings.

Values come from environment variables prefixed with ``RARE_BIRDS_`` (or a
local ``.env`` file), e.g. ``RARE_BIRDS_API_URL=https://birds.example.com``.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the sightings pipeline."""

    model_config = SettingsConfigDict(
        env_prefix="RARE_BIRDS_",
        env_file=".env",
        extra="ignore",
    )

    app_name: str = "rare-birds"
    app_env: str = "development"
    debug: bool = False

    # Backend proxy in front of the eBird API (serves /api/birds)
    api_url: str = "http://localhost:3000"
    photo_lookup_url: str = "https://app.birdweather.com/api/v1/species/lookup"

    # Shared HTTP session
    http_timeout: float = Field(default=30.0, gt=0)
    http_retries: int = Field(default=3, ge=0)

    # Initial map center (Santa Cruz, CA)
    default_lat: float = Field(default=36.9741, ge=-90, le=90)
    default_lng: float = Field(default=-122.0308, ge=-180, le=180)

    # Pans shorter than this (from the last successful fetch) don't re-query
    min_move_km: float = Field(default=3.0, ge=0)


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
