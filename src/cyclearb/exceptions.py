"""
Domain exceptions for the detector.

The search core never raises; these cover the collaborators around it.
The HTTP layer translates MarketDataError into a 502 response.
"""


class ArbitrageError(Exception):
    """Base exception for detector errors."""


class ConfigurationError(ArbitrageError):
    """Invalid user-supplied input such as a malformed pairs file."""


class MarketDataError(ArbitrageError):
    """Upstream market data could not be fetched."""

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class CoinGeckoClientError(MarketDataError):
    """Network or decoding failure talking to CoinGecko."""


class CoinGeckoAPIError(CoinGeckoClientError):
    """CoinGecko answered with an error status."""
