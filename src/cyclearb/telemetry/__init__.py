"""Telemetry module for logging and reporting."""

from cyclearb.telemetry.logger import AsyncLogger, setup_logging
from cyclearb.telemetry.reporter import OpportunityReporter


__all__ = [
    "AsyncLogger",
    "OpportunityReporter",
    "setup_logging",
]
