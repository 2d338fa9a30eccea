"""
Configuration settings for the Tasha's Hideous Calculator API
Loads environment variables and provides application settings
"""

from typing import Optional
from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # API Configuration
    api_key: str = Field(default="test-key")
    environment: str = Field(default="production")
    port: int = Field(default=8000)

    # Cache Configuration
    cache_ttl: int = Field(default=3600)  # 1 hour default

    # Logging
    log_level: str = Field(default="INFO")

    # Timeout Configuration
    external_api_timeout: int = Field(default=25)
    external_api_connect_timeout: int = Field(default=8)
    external_api_write_timeout: int = Field(default=8)

    # External Services
    # Scryfall doesn't require API key, only a descriptive User-Agent
    scryfall_api_base: str = Field(default="https://api.scryfall.com")
    scryfall_max_concurrency: int = Field(default=10, ge=1)
    mtgtop8_base_url: str = Field(default="https://mtgtop8.com/")
    # Optional fetch proxy template, e.g. "https://api.allorigins.win/raw?url={url}"
    deck_proxy_url: Optional[str] = Field(default=None)
    user_agent: str = Field(default="TashasHideousCalculator/1.0")

    # CORS Configuration
    allowed_origins: list = Field(default=["*"])


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings"""
    return Settings()


# Global settings instance
settings = get_settings()
