"""OpenWeather one-call clients, schemas and mock generator."""

from servers.openweather.ow_api_client import GeocodingClient, OneCallClient
from servers.openweather.ow_mock import MockGenerator
from servers.openweather.ow_schemas import (
    Alert,
    Coordinates,
    DailyReading,
    HourlyReading,
    InstantReading,
    Location,
    Snapshot,
    WeatherCondition,
)

__all__ = [
    "GeocodingClient",
    "OneCallClient",
    "MockGenerator",
    "Alert",
    "Coordinates",
    "DailyReading",
    "HourlyReading",
    "InstantReading",
    "Location",
    "Snapshot",
    "WeatherCondition",
]
