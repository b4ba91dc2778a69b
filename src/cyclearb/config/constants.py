"""
Detection constants and configuration values.

This module contains all hardcoded values used throughout the detector.
Values are organized by category for easy maintenance and auditing.
"""

from typing import Final


# =============================================================================
# CoinGecko API Endpoints
# =============================================================================

COINGECKO_API_URL: Final[str] = "https://api.coingecko.com/api/v3"

# API Endpoints
ENDPOINT_EXCHANGE_TICKERS: Final[str] = "/exchanges/{exchange_id}/tickers"
ENDPOINT_PING: Final[str] = "/ping"

# Header carrying the public demo API key
COINGECKO_DEMO_KEY_HEADER: Final[str] = "x-cg-demo-api-key"

DEFAULT_EXCHANGE_ID: Final[str] = "binance"

DEFAULT_MAX_TICKER_PAGES: Final[int] = 5

DEFAULT_REQUEST_TIMEOUT: Final[float] = 15.0  # seconds


# =============================================================================
# Cycle Search
# =============================================================================

# Assets eligible for a natural-return closure
STABLE_ASSETS: Final[frozenset[str]] = frozenset(
    {
        "usdt",
        "usdc",
        "busd",
        "dai",
    }
)

DEFAULT_BASE_ASSET: Final[str] = "usdt"

# start -> X -> start, counting the repeated start
MIN_CYCLE_PATH_LENGTH: Final[int] = 3
DEFAULT_MAX_PATH_LENGTH: Final[int] = 4

# Search cost is O(branching ** depth); keep depth small
MAX_ALLOWED_PATH_LENGTH: Final[int] = 8


# =============================================================================
# Precision & Formatting
# =============================================================================

PERCENTAGE_PRECISION: Final[int] = 4


# =============================================================================
# HTTP Server
# =============================================================================

DEFAULT_API_HOST: Final[str] = "127.0.0.1"
DEFAULT_API_PORT: Final[int] = 8000


# =============================================================================
# Logging & Telemetry
# =============================================================================

LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

# Maximum log queue size
MAX_LOG_QUEUE_SIZE: Final[int] = 10_000

# Third-party loggers capped at WARNING
QUIET_LOGGERS: Final[tuple[str, ...]] = ("aiohttp", "asyncio", "uvicorn.access")
