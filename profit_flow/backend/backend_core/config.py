"""
Configuration settings for the Profit Flow backend.

Uses environment variables (and a local .env file) with sensible defaults.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    # Server
    ENVIRONMENT: str = "development"  # development | production
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"  # DEBUG, INFO, WARNING, ERROR

    # CORS - supports comma-separated list from env or defaults to localhost
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:3001"

    # Database - SQLite for local, any SQLAlchemy URL in production
    DATABASE_URL: str = "sqlite:///./profit_flow.db"
    RUN_DB_STARTUP: bool = True

    # OpenAI
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o"
    OPENAI_TIMEOUT_SECONDS: float = 60.0

    # Conversation window sent to the model
    MAX_CONVERSATION_MESSAGES: int = 20

    # Direct (no-tool) answers are not written to the chat log unless enabled
    LOG_DIRECT_ANSWERS: bool = False

    # Company knowledge base
    COMPANY_NAME: str = "Profit Flow"
    COMPANY_INFO_PATH: Optional[str] = "config/company_info.yaml"

    # Market data
    MARKET_DATA_SOURCE: str = "yfinance"
    EQUITY_EXCHANGE_SUFFIX: str = ".NS"
    CRYPTO_QUOTE_CURRENCY: str = "USD"
    TRENDING_DEFAULT_LIMIT: int = 2
    HISTORY_LOOKBACK_DAYS: int = 7
    NEWS_HIGHLIGHTS_LIMIT: int = 5
    UPSTREAM_TIMEOUT_SECONDS: float = 10.0
    NSE_BASE_URL: str = "https://www.nseindia.com"
    COINGECKO_BASE_URL: str = "https://api.coingecko.com/api/v3"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)

        # Parse CORS_ORIGINS from string to list
        if isinstance(self.CORS_ORIGINS, str):
            self.CORS_ORIGINS = [origin.strip() for origin in self.CORS_ORIGINS.split(',') if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    def market_data_config(self) -> dict:
        """Config dict for market_core.data.factory.create_market_gateway."""
        return {
            "timeout": self.UPSTREAM_TIMEOUT_SECONDS,
            "nse_base_url": self.NSE_BASE_URL,
            "coingecko_base_url": self.COINGECKO_BASE_URL,
        }


settings = Settings()
