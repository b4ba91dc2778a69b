"""Utility functions for the cycle arbitrage detector."""

from cyclearb.utils.math import (
    format_profit,
    invert_rate,
    profit_percentage,
    to_rate,
)
from cyclearb.utils.time import (
    LatencyTimer,
    format_duration_us,
    get_timestamp_us,
    seconds_to_us,
)


__all__ = [
    "LatencyTimer",
    "format_duration_us",
    "format_profit",
    "get_timestamp_us",
    "invert_rate",
    "profit_percentage",
    "seconds_to_us",
    "to_rate",
]
