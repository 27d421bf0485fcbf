"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    api_token: str
    off_base_url: str = "https://world.openfoodfacts.org"
    off_user_agent: str = "nutrition-entry-engine/0.1"
    search_page_size: int = 20
    search_timeout_seconds: float = 8.0
    search_debounce_seconds: float = 0.5
    search_cache_ttl_seconds: int = 3600
    min_query_length: int = 2
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
