"""
Purpose:
- Centralized configuration using pydantic-settings.
- Reads from environment variables and optional .env file.
- Keeps upstream endpoints, limits, timeouts and cache windows tunable without code changes.
"""

from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Pydantic v2 config (env file + ignore unexpected env vars)
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",          # <-- prevents crashes if extra env vars exist
    )

    # API host/port
    host: str = Field(default="0.0.0.0", description="Bind address for FastAPI/Uvicorn")
    port: int = Field(default=8000, description="Port for FastAPI/Uvicorn")
    log_level: str = Field(default="INFO", description="Root log level (DEBUG shows skipped candidates)")

    # --- Upstream archive ---
    archive_base_url: str = Field(default="https://archive.org", description="Base for search/metadata/download")
    archive_domain: str = Field(
        default="archive.org",
        description="Only https URLs on this host (or its subdomains) may be proxied."
    )
    user_agent: str = Field(default="archive-player/0.1.0", description="User-Agent sent upstream")

    # --- Search config ---
    search_default_limit: int = Field(default=10, description="Used when limit is missing or not a positive number")
    search_max_limit: int = Field(default=25, description="Hard cap on results per search")
    # over-fetch: rows = min(limit * 2, ceiling); not every candidate has a playable file
    search_rows_ceiling: int = Field(default=50, description="Max candidates requested from the search index")
    candidate_concurrency: int = Field(default=6, ge=1, description="Parallel metadata fetches per search")
    upstream_timeout_seconds: float = Field(default=10.0, description="Timeout for search and metadata calls")

    # --- Stream proxy ---
    stream_connect_timeout_seconds: float = Field(default=5.0)
    stream_read_timeout_seconds: float = Field(default=300.0)   # long reads: audio bodies trickle
    stream_shared_max_age: int = Field(default=86400, description="s-maxage for non-ranged GETs")
    stream_stale_while_revalidate: int = Field(default=600)

    # CORS preflight cache
    cors_max_age: int = Field(default=86400)

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
