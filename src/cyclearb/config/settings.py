"""
Application settings with environment variable support.

Uses Pydantic Settings for type-safe configuration with automatic
environment variable loading and validation.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cyclearb.config.constants import (
    COINGECKO_API_URL,
    DEFAULT_API_HOST,
    DEFAULT_API_PORT,
    DEFAULT_BASE_ASSET,
    DEFAULT_EXCHANGE_ID,
    DEFAULT_MAX_PATH_LENGTH,
    DEFAULT_MAX_TICKER_PAGES,
    DEFAULT_REQUEST_TIMEOUT,
    MAX_ALLOWED_PATH_LENGTH,
    STABLE_ASSETS,
)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Sensitive values use SecretStr for safe handling.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Market Data Source
    # =========================================================================

    coingecko_api_url: str = Field(
        default=COINGECKO_API_URL,
        description="Base URL of the CoinGecko REST API",
    )
    coingecko_api_key: SecretStr | None = Field(
        default=None,
        description="Optional CoinGecko demo API key",
    )
    exchange_id: str = Field(
        default=DEFAULT_EXCHANGE_ID,
        min_length=1,
        description="CoinGecko exchange id whose tickers form the graph",
    )
    max_ticker_pages: int = Field(
        default=DEFAULT_MAX_TICKER_PAGES,
        ge=1,
        le=50,
        description="Maximum number of ticker pages fetched per detection run",
    )
    request_timeout_seconds: float = Field(
        default=DEFAULT_REQUEST_TIMEOUT,
        gt=0.0,
        description="Total timeout for a single HTTP request",
    )

    # =========================================================================
    # Detection Configuration
    # =========================================================================

    default_base_asset: str = Field(
        default=DEFAULT_BASE_ASSET,
        min_length=1,
        description="Asset that cycles start and end at when none is given",
    )
    max_path_length: int = Field(
        default=DEFAULT_MAX_PATH_LENGTH,
        ge=1,
        le=MAX_ALLOWED_PATH_LENGTH,
        description="Default maximum number of nodes in a searched path",
    )
    stable_assets: frozenset[str] = Field(
        default=STABLE_ASSETS,
        description="Assets eligible for a natural-return closure",
    )
    search_timeout_seconds: float | None = Field(
        default=None,
        gt=0.0,
        description="Optional deadline for a single cycle search",
    )

    # =========================================================================
    # Operation Mode
    # =========================================================================

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: Path | None = Field(
        default=None,
        description="Optional log file path",
    )

    api_host: str = Field(default=DEFAULT_API_HOST, description="HTTP bind host")
    api_port: int = Field(default=DEFAULT_API_PORT, ge=1, le=65535, description="HTTP bind port")

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("default_base_asset", "exchange_id", mode="after")
    @classmethod
    def normalize_identifier(cls, v: str) -> str:
        """Asset and exchange ids are matched lowercase."""
        v = v.strip().lower()
        if not v:
            raise ValueError("Identifier cannot be empty")
        return v

    @field_validator("stable_assets", mode="after")
    @classmethod
    def normalize_stable_assets(cls, v: frozenset[str]) -> frozenset[str]:
        """Lowercase stable asset ids and drop blanks."""
        normalized = frozenset(a.strip().lower() for a in v if a.strip())
        if not normalized:
            raise ValueError("At least one stable asset is required")
        return normalized

    @field_validator("coingecko_api_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Endpoints are appended with a leading slash."""
        return v.rstrip("/")

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def api_key(self) -> str | None:
        """Plain CoinGecko API key, if configured."""
        if self.coingecko_api_key is None:
            return None
        return self.coingecko_api_key.get_secret_value() or None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are loaded only once.
    Clear cache with `get_settings.cache_clear()` if needed.
    """
    return Settings()
