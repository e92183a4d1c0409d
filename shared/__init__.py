"""Shared utilities package."""

from .exceptions import (
    DashboardError,
    FetchError,
    GeolocationUnavailable,
    HistoricalDataUnavailable,
    InvalidInput,
    InvalidState,
    LocationNotFound,
    StaleRequest,
)
from .logging_config import get_logger, setup_logging
from .utils import validate_url

__all__ = [
    "DashboardError",
    "FetchError",
    "GeolocationUnavailable",
    "HistoricalDataUnavailable",
    "InvalidInput",
    "InvalidState",
    "LocationNotFound",
    "StaleRequest",
    "get_logger",
    "setup_logging",
    "validate_url",
]
