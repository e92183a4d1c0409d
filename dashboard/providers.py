"""
Provider abstraction over where weather data comes from.

Each concern (location lookup, forecast, history) has a remote variant
backed by the OpenWeather clients and a mock variant backed by
``MockGenerator``. ``build_providers`` picks one backend for all three at
construction time.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Optional, Union

import httpx

from config.settings import Settings, get_settings
from dashboard.units import UnitSystem
from servers.openweather.ow_api_client import GeocodingClient, OneCallClient
from servers.openweather.ow_mock import MOCK_COUNTRY, MOCK_LATITUDE, MOCK_LONGITUDE, MockGenerator
from servers.openweather.ow_schemas import Coordinates, InstantReading, Location, Snapshot
from shared.exceptions import (
    FetchError,
    HistoricalDataUnavailable,
    InvalidInput,
    LocationNotFound,
)
from shared.logging_config import get_logger
from shared.utils import start_of_day_timestamp

logger = get_logger(__name__)

DEVICE_LOCATION_LABEL = "Your Location"

LocationQuery = Union[str, Coordinates]


class LocationResolver(ABC):
    """Turns a city name or device coordinates into a Location."""

    async def resolve(self, query: LocationQuery) -> Location:
        """
        Resolve a query into a Location.

        Raises:
            InvalidInput: Blank city name; no lookup is issued
            LocationNotFound: Geocoding found no match
            FetchError: Lookup failed
        """
        if isinstance(query, Coordinates):
            return await self.resolve_coordinates(query)

        name = (query or "").strip()
        if not name:
            raise InvalidInput("Empty city name", user_message="Please enter a city name.")
        return await self.resolve_name(name)

    @abstractmethod
    async def resolve_name(self, name: str) -> Location:
        ...

    @abstractmethod
    async def resolve_coordinates(self, coordinates: Coordinates) -> Location:
        ...


class RemoteLocationResolver(LocationResolver):
    def __init__(self, client: GeocodingClient):
        self.client = client

    async def resolve_name(self, name: str) -> Location:
        locations = await self.client.search_location(name, limit=1)
        if not locations:
            raise LocationNotFound(f"No geocoding match for {name!r}")
        return locations[0]

    async def resolve_coordinates(self, coordinates: Coordinates) -> Location:
        # Naming is cosmetic; the forecast only needs the coordinates.
        try:
            locations = await self.client.reverse(coordinates.lat, coordinates.lon, limit=1)
        except FetchError as e:
            logger.warning("reverse_geocoding_fallback", error=str(e))
            locations = []

        if locations and locations[0].name:
            return locations[0]
        return Location(
            lat=coordinates.lat,
            lon=coordinates.lon,
            name=DEVICE_LOCATION_LABEL,
            country=locations[0].country if locations else "",
        )


class MockLocationResolver(LocationResolver):
    """Pins every query to the mock coordinates; never fails."""

    async def resolve_name(self, name: str) -> Location:
        return Location(lat=MOCK_LATITUDE, lon=MOCK_LONGITUDE, name=name, country=MOCK_COUNTRY)

    async def resolve_coordinates(self, coordinates: Coordinates) -> Location:
        return await self.resolve_name(DEVICE_LOCATION_LABEL)


class WeatherProvider(ABC):
    """Fetches a complete Snapshot for a resolved location."""

    @abstractmethod
    async def fetch(self, location: Location, unit: UnitSystem) -> Snapshot:
        ...


class RemoteWeatherProvider(WeatherProvider):
    def __init__(self, client: OneCallClient):
        self.client = client

    async def fetch(self, location: Location, unit: UnitSystem) -> Snapshot:
        return await self.client.get_onecall(location.lat, location.lon, unit.value)


class MockWeatherProvider(WeatherProvider):
    """Generated snapshots after a fixed simulated latency."""

    def __init__(self, generator: MockGenerator, delay: float):
        self.generator = generator
        self.delay = delay

    async def fetch(self, location: Location, unit: UnitSystem) -> Snapshot:
        await asyncio.sleep(self.delay)
        snapshot = self.generator.snapshot()
        logger.info("mock_snapshot_generated", location=location.name, unit=unit.value)
        return snapshot


class HistoricalProvider(ABC):
    """Fetches a single reading for a location on a past date."""

    @abstractmethod
    async def fetch_historical(
        self, location: Location, on_date: date, unit: UnitSystem
    ) -> InstantReading:
        """
        Raises:
            HistoricalDataUnavailable: The provider has no reading for the date
            FetchError: The call failed
        """


class RemoteHistoricalProvider(HistoricalProvider):
    def __init__(self, client: OneCallClient):
        self.client = client

    async def fetch_historical(
        self, location: Location, on_date: date, unit: UnitSystem
    ) -> InstantReading:
        timestamp = start_of_day_timestamp(on_date)
        payload = await self.client.get_historical(location.lat, location.lon, timestamp, unit.value)
        reading = payload.reading
        if reading is None:
            logger.info("historical_unavailable", date=on_date.isoformat(), location=location.name)
            raise HistoricalDataUnavailable(f"No reading for {on_date.isoformat()}")
        return reading


class MockHistoricalProvider(HistoricalProvider):
    def __init__(self, generator: MockGenerator, delay: float):
        self.generator = generator
        self.delay = delay

    async def fetch_historical(
        self, location: Location, on_date: date, unit: UnitSystem
    ) -> InstantReading:
        await asyncio.sleep(self.delay)
        return self.generator.historical(on_date)


@dataclass
class ProviderBundle:
    """Resolver and providers sharing one backend."""

    resolver: LocationResolver
    weather: WeatherProvider
    historical: HistoricalProvider
    is_mock: bool
    http_client: Optional[httpx.AsyncClient] = None

    async def close(self) -> None:
        """Close the shared HTTP client, if any."""
        if self.http_client is not None:
            await self.http_client.aclose()


def build_providers(
    settings: Optional[Settings] = None,
    generator: Optional[MockGenerator] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> ProviderBundle:
    """
    Build the resolver and providers for the configured backend.

    Args:
        settings: Settings; defaults to the cached instance
        generator: Mock generator, e.g. a seeded one in tests
        http_client: HTTP client for the remote backend

    Returns:
        ProviderBundle with either all-mock or all-remote members
    """
    settings = settings or get_settings()

    if settings.use_mock_api:
        generator = generator or MockGenerator()
        logger.info("providers_built", backend="mock", delay=settings.mock_api_delay)
        return ProviderBundle(
            resolver=MockLocationResolver(),
            weather=MockWeatherProvider(generator, settings.mock_api_delay),
            historical=MockHistoricalProvider(generator, settings.mock_api_delay),
            is_mock=True,
        )

    http_client = http_client or httpx.AsyncClient(timeout=settings.openweather_timeout)
    onecall = OneCallClient(settings=settings, client=http_client)
    logger.info("providers_built", backend="openweather")
    return ProviderBundle(
        resolver=RemoteLocationResolver(GeocodingClient(settings=settings, client=http_client)),
        weather=RemoteWeatherProvider(onecall),
        historical=RemoteHistoricalProvider(onecall),
        is_mock=False,
        http_client=http_client,
    )
