"""API clients for OpenWeather geocoding and one-call services."""

from typing import Any, Optional

import httpx
from pydantic import ValidationError

from config.settings import Settings, get_settings
from shared.exceptions import FetchError
from shared.logging_config import get_logger
from servers.openweather.ow_schemas import (
    HistoricalPayload,
    Location,
    Snapshot,
)

logger = get_logger(__name__)


class OpenWeatherHTTPClient:
    """Shared request handling for OpenWeather endpoints."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings or get_settings()
        self.api_key = self.settings.openweather_api_key
        self.timeout = self.settings.openweather_timeout
        self.client = client or httpx.AsyncClient(timeout=self.timeout)

    async def _get_json(self, url: str, params: dict[str, Any], event: str) -> Any:
        """
        Issue a GET request and decode the JSON body.

        Args:
            url: Endpoint URL
            params: Query parameters, without the API key
            event: Log event prefix

        Returns:
            Decoded JSON body

        Raises:
            FetchError: On transport, HTTP status or JSON failures
        """
        logger.debug(f"{event}_request", url=url, **params)
        try:
            response = await self.client.get(url, params={**params, "appid": self.api_key})
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            logger.error(f"{event}_error", error=str(e))
            raise FetchError(f"{event} failed: {e}") from e
        except ValueError as e:
            logger.error(f"{event}_decode_error", error=str(e))
            raise FetchError(f"{event} returned invalid JSON: {e}") from e

    async def close(self):
        """Close HTTP client."""
        await self.client.aclose()


class GeocodingClient(OpenWeatherHTTPClient):
    """Client for the OpenWeather direct and reverse geocoding API."""

    async def search_location(self, query: str, limit: int = 1) -> list[Location]:
        """
        Search for locations by name.

        Args:
            query: Location name to search
            limit: Maximum number of results

        Returns:
            List of Location objects, empty when nothing matched
        """
        url = f"{self.settings.openweather_geocode_url}/direct"
        data = await self._get_json(url, {"q": query, "limit": limit}, "geocoding")
        locations = self._parse_locations(data, "geocoding")

        if not locations:
            logger.warning("geocoding_no_results", query=query)
        else:
            logger.info("geocoding_success", query=query, count=len(locations))
        return locations

    async def reverse(self, lat: float, lon: float, limit: int = 1) -> list[Location]:
        """
        Look up place names for coordinates.

        Returned locations keep the requested coordinates rather than the
        centroid of the named place.
        """
        url = f"{self.settings.openweather_geocode_url}/reverse"
        data = await self._get_json(
            url, {"lat": lat, "lon": lon, "limit": limit}, "reverse_geocoding"
        )
        locations = [
            loc.model_copy(update={"lat": lat, "lon": lon})
            for loc in self._parse_locations(data, "reverse_geocoding")
        ]
        logger.info("reverse_geocoding_success", lat=lat, lon=lon, count=len(locations))
        return locations

    def _parse_locations(self, data: Any, event: str) -> list[Location]:
        if not isinstance(data, list):
            logger.error(f"{event}_decode_error", error="expected a JSON array")
            raise FetchError(f"{event} returned an unexpected payload")
        try:
            return [
                Location(
                    lat=result["lat"],
                    lon=result["lon"],
                    name=result.get("name", ""),
                    country=result.get("country", ""),
                )
                for result in data
            ]
        except (KeyError, TypeError, ValidationError) as e:
            logger.error(f"{event}_decode_error", error=str(e))
            raise FetchError(f"{event} returned malformed results: {e}") from e


class OneCallClient(OpenWeatherHTTPClient):
    """Client for the one-call weather and time-machine endpoints."""

    async def get_onecall(self, latitude: float, longitude: float, units: str) -> Snapshot:
        """
        Get current, hourly, daily and alert data for coordinates.

        Args:
            latitude: Latitude
            longitude: Longitude
            units: ``metric`` or ``imperial``

        Returns:
            Validated Snapshot
        """
        url = f"{self.settings.openweather_base_url}/onecall"
        params = {
            "lat": latitude,
            "lon": longitude,
            "exclude": "minutely",
            "units": units,
        }
        data = await self._get_json(url, params, "onecall")

        try:
            snapshot = Snapshot.model_validate(data)
        except ValidationError as e:
            logger.error("onecall_decode_error", error=str(e))
            raise FetchError(f"Weather payload failed validation: {e}") from e

        logger.info(
            "onecall_success",
            latitude=latitude,
            longitude=longitude,
            hourly=len(snapshot.hourly),
            daily=len(snapshot.daily),
        )
        return snapshot

    async def get_historical(
        self, latitude: float, longitude: float, timestamp: int, units: str
    ) -> HistoricalPayload:
        """Get the time-machine reading closest to ``timestamp``."""
        params = {
            "lat": latitude,
            "lon": longitude,
            "dt": timestamp,
            "units": units,
        }
        data = await self._get_json(self.settings.openweather_history_url, params, "historical")
        if not data:
            return HistoricalPayload()

        try:
            payload = HistoricalPayload.model_validate(data)
        except ValidationError as e:
            logger.error("historical_decode_error", error=str(e))
            raise FetchError(f"Historical payload failed validation: {e}") from e

        logger.info("historical_success", timestamp=timestamp, found=payload.reading is not None)
        return payload
