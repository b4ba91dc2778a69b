"""HTTP API for arbitrage detection."""

from cyclearb.api.server import create_app


__all__ = [
    "create_app",
]
