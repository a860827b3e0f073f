"""Application settings using Pydantic."""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Provider credentials are optional. A missing URL or key fails only the
    stage that needs it.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Analysis provider (stages A, B, C, E)
    mino_api_url: Optional[str] = None
    mino_api_key: Optional[str] = None

    # Trends provider (stage D)
    perplexity_api_key: Optional[str] = None
    perplexity_url: str = "https://api.perplexity.ai/chat/completions"
    perplexity_model: str = "sonar-pro"
    perplexity_temperature: float = 0.3
    perplexity_structured_output: bool = False

    # Processing Configuration
    request_timeout: float = 120.0
    stage_timeout_seconds: Optional[float] = None
    max_content_length: int = 12000

    # Logging
    log_level: str = "INFO"
    log_json: bool = True


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
