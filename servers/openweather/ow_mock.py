"""
Mock weather generator.

Produces snapshots and historical readings with the same schema as the
one-call API so the dashboard can run without network access. Values are
random but shaped: hourly temperatures follow a diurnal sine curve, daily
facets trend smoothly across days, and hourly icons follow the time of day.
"""

import math
import random
import time
from datetime import date
from typing import Optional

from servers.openweather.ow_schemas import (
    Alert,
    DailyFeelsLike,
    DailyReading,
    DailyTemperature,
    HourlyReading,
    InstantReading,
    Snapshot,
    WeatherCondition,
)
from shared.utils import round_half_up, start_of_day_timestamp

MOCK_LATITUDE = 51.5074
MOCK_LONGITUDE = -0.1278
MOCK_COUNTRY = "Nepal"

HOUR = 3600
DAY = 86400
HALF_DAYLIGHT = 36000

FORECAST_CONDITIONS = (
    WeatherCondition(id=800, main="Clear", description="clear sky", icon="01d"),
    WeatherCondition(id=801, main="Clouds", description="few clouds", icon="02d"),
    WeatherCondition(id=803, main="Clouds", description="broken clouds", icon="04d"),
    WeatherCondition(id=500, main="Rain", description="light rain", icon="10d"),
    WeatherCondition(id=600, main="Snow", description="light snow", icon="13d"),
    WeatherCondition(id=200, main="Thunderstorm", description="thunderstorm", icon="11d"),
)

HISTORICAL_CONDITIONS = (
    FORECAST_CONDITIONS[0],
    FORECAST_CONDITIONS[1],
    FORECAST_CONDITIONS[3],
)

NIGHT_CONDITION = WeatherCondition(id=800, main="Clear", description="clear sky", icon="01n")
DAY_CONDITION = WeatherCondition(id=801, main="Clouds", description="few clouds", icon="02d")

ALERT_EVENTS = ("Heat Wave", "Storm Warning", "Flood Alert")
ALERT_DESCRIPTION = (
    "Severe weather conditions expected in your area. "
    "Please take necessary precautions."
)
ALERT_PROBABILITY = 0.3
PRECIPITATION_PROBABILITY = 0.3

# (base, amplitude, noise) per facet, applied as base + amplitude*sin(day) + U[0, noise)
DAILY_TEMP_CURVES = {
    "day": (15, 5, 3),
    "min": (10, 3, 2),
    "max": (20, 5, 3),
    "night": (12, 3, 2),
    "eve": (16, 4, 2),
    "morn": (13, 3, 2),
}
DAILY_FEELS_LIKE_CURVES = {
    "day": (14, 5, 3),
    "night": (11, 3, 2),
    "eve": (15, 4, 2),
    "morn": (12, 3, 2),
}


def is_night_hour(index: int) -> bool:
    """Hour slots rendered with the clear-night icon."""
    return index > 18 or index < 6


class MockGenerator:
    """Synthesizes schema-valid weather records."""

    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random(seed)

    def snapshot(self, now: Optional[int] = None) -> Snapshot:
        """Generate a full snapshot: current, 24 hourly, 5 daily, maybe one alert."""
        now = int(time.time()) if now is None else now
        current = self._instant(
            dt=now,
            temp_base=15,
            feels_like_base=14,
            dew_point_base=10,
            conditions=FORECAST_CONDITIONS,
        )
        return Snapshot(
            lat=MOCK_LATITUDE,
            lon=MOCK_LONGITUDE,
            timezone="Asia/Kathmandu",
            timezone_offset=3600,
            current=current,
            hourly=tuple(self._hourly(now, i) for i in range(24)),
            daily=tuple(self._daily(now, i) for i in range(5)),
            alerts=self._alerts(now),
        )

    def historical(self, on_date: date) -> InstantReading:
        """Generate a single reading for local midnight of ``on_date``."""
        return self._instant(
            dt=start_of_day_timestamp(on_date),
            temp_base=10,
            feels_like_base=9,
            dew_point_base=5,
            conditions=HISTORICAL_CONDITIONS,
        )

    def _uniform(self, width: float) -> float:
        return self.rng.random() * width

    def _instant(
        self,
        dt: int,
        temp_base: float,
        feels_like_base: float,
        dew_point_base: float,
        conditions: tuple[WeatherCondition, ...],
    ) -> InstantReading:
        return InstantReading(
            dt=dt,
            sunrise=dt - HALF_DAYLIGHT,
            sunset=dt + HALF_DAYLIGHT,
            temp=round_half_up(temp_base + self._uniform(15)),
            feels_like=round_half_up(feels_like_base + self._uniform(15)),
            pressure=1000 + self.rng.randrange(20),
            humidity=40 + self.rng.randrange(50),
            dew_point=dew_point_base + self._uniform(5),
            uvi=self._uniform(8),
            clouds=self._uniform(100),
            visibility=10000,
            wind_speed=self._uniform(10),
            wind_deg=self._uniform(360),
            weather=(self.rng.choice(conditions),),
        )

    def _hourly(self, now: int, i: int) -> HourlyReading:
        curve = math.sin(i / 4) * 8
        return HourlyReading(
            dt=now + i * HOUR,
            temp=round_half_up(12 + curve + self._uniform(3)),
            feels_like=round_half_up(11 + curve + self._uniform(3)),
            pressure=1000 + self.rng.randrange(20),
            humidity=40 + self.rng.randrange(50),
            dew_point=10 + self._uniform(5),
            uvi=max(0, 5 - abs(12 - i)),
            clouds=self._uniform(100),
            visibility=10000,
            wind_speed=self._uniform(10),
            wind_deg=self._uniform(360),
            weather=(NIGHT_CONDITION if is_night_hour(i) else DAY_CONDITION,),
            pop=self._maybe_precipitation(0.5),
        )

    def _daily(self, now: int, i: int) -> DailyReading:
        dt = now + i * DAY
        return DailyReading(
            dt=dt,
            sunrise=dt - HALF_DAYLIGHT,
            sunset=dt + HALF_DAYLIGHT,
            temp=DailyTemperature(**self._facets(DAILY_TEMP_CURVES, i)),
            feels_like=DailyFeelsLike(**self._facets(DAILY_FEELS_LIKE_CURVES, i)),
            pressure=1000 + self.rng.randrange(20),
            humidity=40 + self.rng.randrange(50),
            dew_point=10 + self._uniform(5),
            wind_speed=self._uniform(10),
            wind_deg=self._uniform(360),
            weather=(self.rng.choice(FORECAST_CONDITIONS),),
            clouds=self._uniform(100),
            pop=self._maybe_precipitation(0.7),
            uvi=5 + self._uniform(3),
        )

    def _facets(self, curves: dict[str, tuple[int, int, int]], i: int) -> dict[str, int]:
        return {
            name: round_half_up(base + math.sin(i) * amplitude + self._uniform(noise))
            for name, (base, amplitude, noise) in curves.items()
        }

    def _maybe_precipitation(self, ceiling: float) -> float:
        if self.rng.random() < PRECIPITATION_PROBABILITY:
            return self._uniform(ceiling)
        return 0.0

    def _alerts(self, now: int) -> Optional[tuple[Alert, ...]]:
        if self.rng.random() >= ALERT_PROBABILITY:
            return None
        return (
            Alert(
                sender_name="Weather Service",
                event=self.rng.choice(ALERT_EVENTS),
                start=now,
                end=now + DAY,
                description=ALERT_DESCRIPTION,
            ),
        )
