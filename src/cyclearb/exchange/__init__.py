"""Market data integration module for CoinGecko."""

from cyclearb.exchange.client import CoinGeckoClient
from cyclearb.exchange.models import Ticker, TickerMarket, TickersResponse


__all__ = [
    "CoinGeckoClient",
    "Ticker",
    "TickerMarket",
    "TickersResponse",
]
