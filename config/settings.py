"""Configuration management using pydantic-settings."""
from datetime import timedelta
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Content repository
    database_url: str = "sqlite:///./sitemap.db"
    live_workspace: str = "live"
    default_workspace: str = "default"
    system_user: str = "system"

    # Sitemap file cache
    # Accepts seconds ("14400") or ISO 8601 ("PT4H")
    sitemap_cache_duration: timedelta = timedelta(hours=4)
    sitemap_cache_name: str = "sitemap-cache"
    sitemap_cache_template: str = "default"

    # Volatile output cache
    output_cache_ttl_seconds: int = 3600
    output_cache_max_entries: int = 1000

    # Site
    site_base_url: str = "http://localhost:8000"
    site_locales: List[str] = ["en"]

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
