"""Lightweight configuration for the War Odds tools."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Minimal application settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="WAR_ODDS_"
    )

    log_level: str = Field(default="INFO", description="Root logging level for the CLI and server")
    default_round_count: int = Field(
        default=20, ge=0, description="Rounds used when a request does not specify any"
    )
    max_round_count: int = Field(
        default=500,
        ge=0,
        description="Upper bound on rounds accepted over HTTP; each round costs a full grid pass",
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:8080", "http://127.0.0.1:8080"],
        description="Origins allowed to call the HTTP API",
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    return Settings()
