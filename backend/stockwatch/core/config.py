"""
Application Configuration

All settings loaded from environment variables.
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "StockWatch Backend"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS (Frontend URL)
    frontend_url: str = "http://localhost:3000"
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Market data
    market_timezone: str = "America/New_York"
    default_lookback_days: int = 100
    alert_proximity_threshold: float = 0.05  # Alert within 5% of target
    live_price_timeout_seconds: float = 15.0

    # LLM Providers
    anthropic_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    llm_primary_provider: str = "gemini"  # Options: gemini, anthropic, openai
    llm_reasoning_model: str = "gemini-2.5-flash"
    llm_explanation_model: str = "gemini-2.5-flash"
    llm_temperature: float = 0.3
    llm_output_language: str = "Traditional Chinese (繁體中文)"

    # Feature Flags
    enable_live_prices: bool = True
    enable_yahoo_prices: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
