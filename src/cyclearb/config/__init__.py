"""Configuration module for the cycle arbitrage detector."""

from cyclearb.config.constants import (
    COINGECKO_API_URL,
    DEFAULT_MAX_PATH_LENGTH,
    MIN_CYCLE_PATH_LENGTH,
    STABLE_ASSETS,
)
from cyclearb.config.settings import Settings, get_settings


__all__ = [
    "Settings",
    "get_settings",
    "COINGECKO_API_URL",
    "DEFAULT_MAX_PATH_LENGTH",
    "MIN_CYCLE_PATH_LENGTH",
    "STABLE_ASSETS",
]
