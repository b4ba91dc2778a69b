"""
FastAPI server exposing arbitrage detection over HTTP.

The service is created in the lifespan hook and stored on app.state,
so tests can inject any ExchangePairProvider.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import FastAPI, HTTPException, Path, Query, Request
from pydantic import BaseModel

from cyclearb import __version__
from cyclearb.config.constants import MAX_ALLOWED_PATH_LENGTH
from cyclearb.config.settings import Settings, get_settings
from cyclearb.core.types import ArbitrageOpportunity, ExchangePairProvider
from cyclearb.exceptions import MarketDataError
from cyclearb.exchange.client import CoinGeckoClient
from cyclearb.strategy.service import ArbitrageService


logger = logging.getLogger(__name__)


class OpportunityModel(BaseModel):
    """Serialized arbitrage opportunity."""

    path: list[str]
    profit_percentage: str

    @classmethod
    def from_opportunity(cls, opportunity: ArbitrageOpportunity) -> "OpportunityModel":
        return cls(**opportunity.to_dict())


class OpportunitiesResponse(BaseModel):
    """Response of the detection endpoint."""

    base_asset: str
    max_path_length: int
    count: int
    opportunities: list[OpportunityModel]


def create_app(
    settings: Settings | None = None,
    provider: ExchangePairProvider | None = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Application settings (default: cached env settings).
        provider: Exchange pair source (default: CoinGecko client).

    Returns:
        Configured application.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app_settings = settings or get_settings()
        client: CoinGeckoClient | None = None

        if provider is None:
            client = CoinGeckoClient.from_settings(app_settings)
            pair_provider: ExchangePairProvider = client
        else:
            pair_provider = provider

        app.state.settings = app_settings
        app.state.service = ArbitrageService(
            pair_provider,
            stable_assets=app_settings.stable_assets,
            search_timeout_seconds=app_settings.search_timeout_seconds,
        )
        yield

        if client is not None:
            await client.close()

    app = FastAPI(title="Cycle Arbitrage Detector", version=__version__, lifespan=lifespan)
    app.get("/health")(get_health)
    app.get("/api/arbitrage/{base_asset_id}", response_model=OpportunitiesResponse)(
        get_opportunities
    )
    return app


async def get_health() -> dict[str, str]:
    return {"status": "ok"}


async def get_opportunities(
    request: Request,
    base_asset_id: Annotated[str, Path(min_length=1)],
    max_path_length: Annotated[int | None, Query(ge=1, le=MAX_ALLOWED_PATH_LENGTH)] = None,
) -> OpportunitiesResponse:
    """Find arbitrage cycles starting and ending at `base_asset_id`."""
    service: ArbitrageService = request.app.state.service
    settings: Settings = request.app.state.settings

    path_length = max_path_length if max_path_length is not None else settings.max_path_length
    base_asset = base_asset_id.strip().lower()

    try:
        opportunities = await service.find_arbitrage_opportunities(base_asset, path_length)
    except MarketDataError as e:
        logger.error(f"Market data unavailable: {e}")
        raise HTTPException(status_code=502, detail=f"Market data unavailable: {e}") from e

    return OpportunitiesResponse(
        base_asset=base_asset,
        max_path_length=path_length,
        count=len(opportunities),
        opportunities=[OpportunityModel.from_opportunity(o) for o in opportunities],
    )


def main(host: str | None = None, port: int | None = None) -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=host or settings.api_host,
        port=port or settings.api_port,
        log_level="warning",
    )


if __name__ == "__main__":
    main()
