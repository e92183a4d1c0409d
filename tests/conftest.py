"""Shared fixtures: settings for both backends, snapshot factory, fake OpenWeather API."""

from datetime import date
from typing import Any, Optional

import httpx
import pytest
import pytest_asyncio

from config.settings import Settings
from dashboard.providers import build_providers
from servers.openweather.ow_mock import MockGenerator
from servers.openweather.ow_schemas import (
    DailyFeelsLike,
    DailyReading,
    DailyTemperature,
    HourlyReading,
    InstantReading,
    Snapshot,
    WeatherCondition,
)

NOW = 1_700_000_000
KATHMANDU = {"name": "Kathmandu", "lat": 27.7172, "lon": 85.324, "country": "NP"}
LONDON = {"name": "London", "lat": 51.5073, "lon": -0.1276, "country": "GB"}


@pytest.fixture
def mock_settings() -> Settings:
    return Settings(_env_file=None, use_mock_api=True, mock_api_delay=0)


@pytest.fixture
def remote_settings() -> Settings:
    return Settings(_env_file=None, use_mock_api=False, openweather_api_key="test-key")


@pytest.fixture
def snapshot_factory():
    """Build hand-made snapshots with predictable values."""

    def make(
        hourly_count: int = 24,
        daily_count: int = 5,
        alerts: Optional[list] = None,
        main: str = "Clear",
        icon: str = "01d",
        temp: float = 21.4,
        feels_like: float = 19.6,
        wind_speed: float = 5.0,
        pop: float = 0.3,
        offset: int = 0,
        now: int = 0,
    ) -> Snapshot:
        condition = WeatherCondition(id=800, main=main, description=f"{main.lower()} sky", icon=icon)
        common: dict[str, Any] = dict(
            pressure=1012,
            humidity=55,
            dew_point=10.0,
            uvi=3.0,
            clouds=20,
            wind_speed=wind_speed,
            wind_deg=90,
            weather=[condition],
        )
        return Snapshot(
            lat=27.7172,
            lon=85.324,
            timezone="Asia/Kathmandu",
            timezone_offset=offset,
            current=InstantReading(dt=now, temp=temp, feels_like=feels_like, visibility=10000, **common),
            hourly=[
                HourlyReading(dt=now + i * 3600, temp=temp + i, feels_like=feels_like + i, pop=pop, **common)
                for i in range(hourly_count)
            ],
            daily=[
                DailyReading(
                    dt=now + i * 86400,
                    sunrise=now + i * 86400 - 36000,
                    sunset=now + i * 86400 + 36000,
                    temp=DailyTemperature(day=20, min=11.4, max=20.5, night=12, eve=16, morn=13),
                    feels_like=DailyFeelsLike(day=19, night=11, eve=15, morn=12),
                    pop=pop,
                    **common,
                )
                for i in range(daily_count)
            ],
            alerts=alerts,
        )

    return make


class FakeOpenWeather:
    """httpx.MockTransport handler imitating the OpenWeather endpoints."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.places = {"kathmandu": [KATHMANDU], "london": [LONDON]}
        self.reverse_payload: Any = [KATHMANDU]
        self.onecall_payload: Any = MockGenerator(seed=42).snapshot(now=NOW).model_dump(mode="json")
        self.history_payload: Any = {
            "lat": KATHMANDU["lat"],
            "lon": KATHMANDU["lon"],
            "timezone": "Asia/Kathmandu",
            "timezone_offset": 20700,
            "current": MockGenerator(seed=3).historical(date(2024, 1, 15)).model_dump(mode="json"),
        }
        self.failing: set[str] = set()

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        params = request.url.params

        for suffix in self.failing:
            if path.endswith(suffix):
                return httpx.Response(500, json={"cod": 500, "message": "internal error"})

        if path.endswith("/geo/1.0/direct"):
            return httpx.Response(200, json=self.places.get(params["q"].lower(), []))
        if path.endswith("/geo/1.0/reverse"):
            return httpx.Response(200, json=self.reverse_payload)
        if path.endswith("/onecall/timemachine"):
            return httpx.Response(200, json=self.history_payload)
        if path.endswith("/onecall"):
            return httpx.Response(200, json=self.onecall_payload)
        return httpx.Response(404, json={"cod": 404, "message": "not found"})

    def calls(self, suffix: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith(suffix)]


@pytest.fixture
def fake_api() -> FakeOpenWeather:
    return FakeOpenWeather()


@pytest_asyncio.fixture
async def http_client(fake_api):
    client = httpx.AsyncClient(transport=httpx.MockTransport(fake_api))
    yield client
    await client.aclose()


@pytest.fixture
def remote_providers(remote_settings, http_client):
    return build_providers(remote_settings, http_client=http_client)


@pytest.fixture
def mock_providers(mock_settings):
    return build_providers(mock_settings, generator=MockGenerator(seed=11))
