"""
Pydantic models for CoinGecko API responses.

These models provide type-safe parsing of exchange ticker responses
with automatic validation.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

from cyclearb.core.types import ExchangePair


class TickerMarket(BaseModel):
    """Market (exchange) a ticker is quoted on."""

    name: str
    identifier: str
    has_trading_incentive: bool = False


class Ticker(BaseModel):
    """Single trading pair quote from an exchange."""

    base: str
    target: str
    market: TickerMarket | None = None
    last: float | None = None
    volume: float | None = None
    trust_score: str | None = None
    is_anomaly: bool = False
    is_stale: bool = False
    coin_id: str | None = None
    target_coin_id: str | None = None

    @property
    def is_usable(self) -> bool:
        """Check if the ticker carries a fresh, positive last price."""
        return (
            not self.is_anomaly
            and not self.is_stale
            and self.last is not None
            and self.last > 0
            and bool(self.base.strip())
            and bool(self.target.strip())
        )

    def to_exchange_pair(self) -> ExchangePair:
        """Convert to the detector's input type."""
        return ExchangePair(
            base=self.base,
            target=self.target,
            rate=Decimal(str(self.last)),
        )


class TickersResponse(BaseModel):
    """One page of `/exchanges/{id}/tickers`."""

    name: str = ""
    tickers: list[Ticker] = Field(default_factory=list)

    def usable_pairs(self) -> list[ExchangePair]:
        """Exchange pairs for every usable ticker on the page."""
        return [t.to_exchange_pair() for t in self.tickers if t.is_usable]
