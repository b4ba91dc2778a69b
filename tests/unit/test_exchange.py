"""
Unit tests for the CoinGecko models and client.

The client runs against FakeSession, so no network is touched.
"""

from decimal import Decimal

import aiohttp
import pytest

from cyclearb.core.types import ExchangePair
from cyclearb.exceptions import CoinGeckoAPIError, CoinGeckoClientError, MarketDataError
from cyclearb.exchange.client import CoinGeckoClient
from cyclearb.exchange.models import Ticker, TickersResponse
from tests.mocks import FakeSession
from tests.mocks.exchange import make_ticker


class TestTickerModels:
    """Tests for ticker parsing and filtering."""

    def test_parse_ticker(self) -> None:
        ticker = Ticker.model_validate(make_ticker("ETH", "BTC", 0.05))

        assert ticker.base == "ETH"
        assert ticker.market is not None
        assert ticker.market.identifier == "binance"
        assert ticker.is_usable

    def test_to_exchange_pair_keeps_decimal_text(self) -> None:
        """Float prices convert through their shortest repr."""
        ticker = Ticker.model_validate(make_ticker("USDT", "ETH", 0.0005))

        assert ticker.to_exchange_pair() == ExchangePair("USDT", "ETH", Decimal("0.0005"))

    @pytest.mark.parametrize(
        "overrides",
        [
            {"is_stale": True},
            {"is_anomaly": True},
            {"last": None},
            {"last": 0},
            {"base": "  "},
        ],
    )
    def test_unusable_tickers(self, overrides: dict) -> None:
        payload = make_ticker("ETH", "BTC", 0.05)
        payload.update(overrides)

        assert not Ticker.model_validate(payload).is_usable

    def test_minimal_ticker(self) -> None:
        """Only base and target are required."""
        ticker = Ticker.model_validate({"base": "SOL", "target": "USDT", "last": 150.5})

        assert ticker.is_usable
        assert ticker.market is None

    def test_usable_pairs(self) -> None:
        page = TickersResponse.model_validate(
            {
                "name": "Binance",
                "tickers": [
                    make_ticker("ETH", "BTC", 0.05),
                    make_ticker("BTC", "USDT", 42000, is_stale=True),
                    make_ticker("BNB", "USDT", 600),
                ],
            }
        )

        assert [(p.base, p.target) for p in page.usable_pairs()] == [
            ("ETH", "BTC"),
            ("BNB", "USDT"),
        ]


class TestCoinGeckoClient:
    """Tests for CoinGeckoClient."""

    @pytest.mark.asyncio
    async def test_get_exchange_pairs_paginates(self) -> None:
        """Pages are fetched until an empty one is returned."""
        session = FakeSession(
            pages={
                1: {"name": "Binance", "tickers": [make_ticker("ETH", "BTC", 0.05)]},
                2: {"name": "Binance", "tickers": [make_ticker("BTC", "USDT", 42000)]},
            }
        )
        client = CoinGeckoClient(exchange_id="binance", max_pages=5, session=session)

        pairs = await client.get_exchange_pairs()

        assert pairs == [
            ExchangePair("ETH", "BTC", Decimal("0.05")),
            ExchangePair("BTC", "USDT", Decimal("42000")),
        ]
        assert [params["page"] for _, params in session.requests] == [1, 2, 3]
        assert session.requests[0][0].endswith("/exchanges/binance/tickers")

    @pytest.mark.asyncio
    async def test_page_limit(self) -> None:
        """No more than max_pages requests are made."""
        page = {"name": "Binance", "tickers": [make_ticker("ETH", "BTC", 0.05)]}
        session = FakeSession(pages={1: page, 2: page, 3: page})
        client = CoinGeckoClient(max_pages=2, session=session)

        pairs = await client.get_exchange_pairs()

        assert len(pairs) == 2
        assert len(session.requests) == 2

    @pytest.mark.asyncio
    async def test_unusable_tickers_dropped(self) -> None:
        session = FakeSession(
            pages={
                1: {
                    "tickers": [
                        make_ticker("ETH", "BTC", 0.05, is_anomaly=True),
                        make_ticker("BTC", "USDT", None),
                    ]
                }
            }
        )
        client = CoinGeckoClient(session=session)

        assert await client.get_exchange_pairs() == []

    @pytest.mark.asyncio
    async def test_api_error_status(self) -> None:
        session = FakeSession(status=429, raw_body='{"error": "rate limited"}')
        client = CoinGeckoClient(session=session)

        with pytest.raises(CoinGeckoAPIError) as exc_info:
            await client.get_exchange_pairs()

        assert exc_info.value.code == 429
        assert isinstance(exc_info.value, MarketDataError)

    @pytest.mark.asyncio
    async def test_invalid_json(self) -> None:
        session = FakeSession(raw_body="<html>not json</html>")
        client = CoinGeckoClient(session=session)

        with pytest.raises(CoinGeckoClientError, match="Invalid JSON"):
            await client.get_tickers_page(1)

    @pytest.mark.asyncio
    async def test_unexpected_payload(self) -> None:
        session = FakeSession(raw_body='{"tickers": "nope"}')
        client = CoinGeckoClient(session=session)

        with pytest.raises(CoinGeckoClientError, match="Unexpected tickers payload"):
            await client.get_tickers_page(1)

    @pytest.mark.asyncio
    async def test_network_error_wrapped(self) -> None:
        session = FakeSession(error=aiohttp.ClientConnectionError("connection refused"))
        client = CoinGeckoClient(session=session)

        with pytest.raises(CoinGeckoClientError, match="Network error"):
            await client.get_exchange_pairs()

    @pytest.mark.asyncio
    async def test_timeout_wrapped(self) -> None:
        session = FakeSession(error=TimeoutError())
        client = CoinGeckoClient(session=session)

        with pytest.raises(CoinGeckoClientError, match="timed out"):
            await client.get_exchange_pairs()

    @pytest.mark.asyncio
    async def test_ping(self) -> None:
        session = FakeSession(raw_body='{"gecko_says": "(V3) To the Moon!"}')
        client = CoinGeckoClient(session=session)

        assert await client.ping()

    @pytest.mark.asyncio
    async def test_external_session_not_closed(self) -> None:
        session = FakeSession()

        async with CoinGeckoClient(session=session) as client:
            await client.get_exchange_pairs()

        assert not session.closed

    def test_from_settings(self, settings) -> None:
        client = CoinGeckoClient.from_settings(settings, exchange_id="kraken")

        assert client.exchange_id == "kraken"
        assert CoinGeckoClient.from_settings(settings).exchange_id == settings.exchange_id
