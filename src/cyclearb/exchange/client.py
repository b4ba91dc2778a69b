"""
Async CoinGecko REST API client.

Fetches exchange tickers and exposes them as exchange pairs:
- Single session with connection pooling
- Fast JSON parsing with orjson
- Pagination until an empty page or the page limit
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import aiohttp
import orjson

from cyclearb.config.constants import (
    COINGECKO_API_URL,
    COINGECKO_DEMO_KEY_HEADER,
    DEFAULT_EXCHANGE_ID,
    DEFAULT_MAX_TICKER_PAGES,
    DEFAULT_REQUEST_TIMEOUT,
    ENDPOINT_EXCHANGE_TICKERS,
    ENDPOINT_PING,
)
from cyclearb.config.settings import Settings
from cyclearb.core.types import ExchangePair
from cyclearb.exceptions import CoinGeckoAPIError, CoinGeckoClientError
from cyclearb.exchange.models import TickersResponse


logger = logging.getLogger(__name__)


class CoinGeckoClient:
    """
    Async CoinGecko REST API client.

    Implements the ExchangePairProvider protocol for one exchange.
    """

    def __init__(
        self,
        exchange_id: str = DEFAULT_EXCHANGE_ID,
        api_url: str = COINGECKO_API_URL,
        api_key: str | None = None,
        max_pages: int = DEFAULT_MAX_TICKER_PAGES,
        timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        """
        Initialize the CoinGecko client.

        Args:
            exchange_id: CoinGecko exchange id (e.g. "binance").
            api_url: API base URL.
            api_key: Optional demo API key.
            max_pages: Maximum ticker pages per fetch.
            timeout_seconds: Total timeout per request.
            session: Optional externally owned session.
        """
        self._exchange_id = exchange_id
        self._base_url = api_url.rstrip("/")
        self._api_key = api_key
        self._max_pages = max_pages
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._session = session
        self._owns_session = session is None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        exchange_id: str | None = None,
    ) -> "CoinGeckoClient":
        """
        Create a client from application settings.

        Args:
            settings: Application settings.
            exchange_id: Overrides settings.exchange_id when given.
        """
        return cls(
            exchange_id=exchange_id or settings.exchange_id,
            api_url=settings.coingecko_api_url,
            api_key=settings.api_key,
            max_pages=settings.max_ticker_pages,
            timeout_seconds=settings.request_timeout_seconds,
        )

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=10,
                keepalive_timeout=30,
            )

            headers = {"Accept": "application/json"}
            if self._api_key:
                headers[COINGECKO_DEMO_KEY_HEADER] = self._api_key

            self._session = aiohttp.ClientSession(
                connector=connector,
                headers=headers,
                timeout=self._timeout,
            )
            self._owns_session = True

        return self._session

    async def close(self) -> None:
        """Close the client session if this client created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    @asynccontextmanager
    async def _request_context(self) -> AsyncIterator[aiohttp.ClientSession]:
        """Context manager for making requests."""
        session = await self._get_session()
        try:
            yield session
        except aiohttp.ClientError as e:
            raise CoinGeckoClientError(f"Network error: {e}") from e
        except asyncio.TimeoutError as e:
            raise CoinGeckoClientError("Request timed out") from e

    async def _get(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        """
        Make a GET request.

        Args:
            endpoint: API endpoint.
            params: Query parameters.

        Returns:
            Parsed JSON response.

        Raises:
            CoinGeckoAPIError: On API error response.
            CoinGeckoClientError: On network or other errors.
        """
        url = f"{self._base_url}{endpoint}"

        async with self._request_context() as session:
            async with session.get(url, params=params or {}) as response:
                return await self._handle_response(response)

    async def _handle_response(self, response: aiohttp.ClientResponse) -> Any:
        """Parse and validate response."""
        text = await response.text()

        if response.status >= 400:
            raise CoinGeckoAPIError(
                f"API error {response.status}: {text[:200]}",
                code=response.status,
            )

        try:
            return orjson.loads(text)
        except orjson.JSONDecodeError as e:
            raise CoinGeckoClientError(f"Invalid JSON response: {e}") from e

    # =========================================================================
    # Public Endpoints
    # =========================================================================

    async def ping(self) -> bool:
        """Check that the API is reachable."""
        data = await self._get(ENDPOINT_PING)
        return isinstance(data, dict) and "gecko_says" in data

    async def get_tickers_page(self, page: int) -> TickersResponse:
        """
        Get one page of tickers for the configured exchange.

        Args:
            page: 1-based page number.

        Returns:
            Validated tickers page.
        """
        endpoint = ENDPOINT_EXCHANGE_TICKERS.format(exchange_id=self._exchange_id)
        data = await self._get(endpoint, {"page": page})

        try:
            return TickersResponse.model_validate(data)
        except ValueError as e:
            raise CoinGeckoClientError(f"Unexpected tickers payload: {e}") from e

    async def get_exchange_pairs(self) -> list[ExchangePair]:
        """
        Get (base, target, last) for all tickers on the exchange.

        Stale, anomalous and unpriced tickers are dropped.

        Returns:
            Exchange pairs across all fetched pages.
        """
        pairs: list[ExchangePair] = []

        for page in range(1, self._max_pages + 1):
            response = await self.get_tickers_page(page)
            if not response.tickers:
                break

            usable = response.usable_pairs()
            pairs.extend(usable)
            logger.debug(
                f"Page {page}: {len(usable)}/{len(response.tickers)} usable tickers "
                f"from {self._exchange_id}"
            )

        logger.info(f"Loaded {len(pairs)} exchange pairs from {self._exchange_id}")
        return pairs

    @property
    def exchange_id(self) -> str:
        """CoinGecko exchange id."""
        return self._exchange_id

    async def __aenter__(self) -> "CoinGeckoClient":
        """Async context manager entry."""
        await self._get_session()
        return self

    async def __aexit__(self, *args: object) -> None:
        """Async context manager exit."""
        await self.close()
