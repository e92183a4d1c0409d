"""
Snapshot presentation.

Maps validated snapshots and readings into display-ready view models:
rounded temperatures with a degree mark, unit-aware wind speed, percentage
strings, icon URLs and chart datasets. Nothing here performs I/O or keeps
state, so the same input always yields the same view.
"""

from datetime import date
from typing import Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from dashboard.units import (
    UnitSystem,
    display_wind_speed,
    temperature_symbol,
    wind_speed_label,
)
from servers.openweather.ow_schemas import (
    Alert,
    DailyReading,
    HourlyReading,
    InstantReading,
    Location,
    Snapshot,
    WeatherCondition,
)
from shared.utils import (
    format_date,
    format_datetime,
    format_day,
    format_time,
    round_half_up,
    to_local_datetime,
)

DEFAULT_ICON_URL = "https://openweathermap.org/img/wn/{icon}{suffix}.png"
HOURLY_ITEMS = 12
DAILY_ITEMS = 5
CHART_HOURS = 24
NO_ALERTS_MESSAGE = "No active alerts for your location."
NO_HISTORY_MESSAGE = "No historical data available for this date."


class ViewModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class CurrentView(ViewModel):
    city_label: str
    temperature: str
    feels_like: str
    description: str
    humidity: str
    wind: str
    pressure: str
    icon_url: str
    icon_alt: str


class AlertView(ViewModel):
    event: str
    sender_name: str
    description: str
    start_label: str
    end_label: str


class HourlyItemView(ViewModel):
    time_label: str
    icon_url: str
    description: str
    temperature: str
    precipitation: str


class DailyItemView(ViewModel):
    day_label: str
    icon_url: str
    description: str
    temperature_range: str
    precipitation: str


class TemperatureChart(ViewModel):
    """Line chart of the next 24 hours."""

    labels: list[str]
    temperature_label: str
    temperature: list[int]
    feels_like_label: str
    feels_like: list[int]


class PrecipitationChart(ViewModel):
    """Bar chart of daily precipitation probability in percent."""

    labels: list[str]
    label: str = "Precipitation Probability (%)"
    probability: list[int]


class ChartsView(ViewModel):
    temperature: TemperatureChart
    precipitation: PrecipitationChart


class DashboardView(ViewModel):
    """Everything the dashboard renders for one snapshot."""

    unit: UnitSystem
    theme: str = Field(..., description="Lower-cased condition group, e.g. 'rain'")
    effect: Optional[str] = Field(None, description="Ambient effect: 'snow', 'rain' or none")
    current: CurrentView
    alerts: list[AlertView]
    alerts_message: Optional[str]
    hourly: list[HourlyItemView]
    daily: list[DailyItemView]
    charts: ChartsView
    notice: Optional[str] = Field(None, description="Non-fatal message shown alongside the data")


class HistoricalDetails(ViewModel):
    temperature: str
    feels_like: str
    humidity: str
    wind: str
    pressure: str
    conditions: str
    uv_index: str
    icon_url: str


class HistoricalView(ViewModel):
    date_label: str
    title: str
    available: bool
    message: Optional[str] = None
    details: Optional[HistoricalDetails] = None


def effect_for_theme(theme: str) -> Optional[str]:
    """Ambient animation matching a condition group."""
    if "snow" in theme:
        return "snow"
    if "rain" in theme or "drizzle" in theme:
        return "rain"
    return None


def format_temperature(value: float) -> str:
    return f"{round_half_up(value)}°"


def format_percentage(probability: float) -> str:
    return f"{round_half_up(probability * 100)}%"


class SnapshotPresenter:
    """Builds view models; holds only the icon URL template."""

    def __init__(self, icon_template: str = DEFAULT_ICON_URL):
        self.icon_template = icon_template

    def icon_url(self, code: str, large: bool = False) -> str:
        """Icon reference for a condition code; unknown codes pass through unchanged."""
        return self.icon_template.format(icon=code, suffix="@2x" if large else "")

    def present(self, snapshot: Snapshot, location: Location, unit: UnitSystem) -> DashboardView:
        """
        Build the dashboard view for a snapshot.

        Args:
            snapshot: Validated snapshot
            location: Location the snapshot was fetched for
            unit: Unit system the snapshot was fetched with

        Returns:
            DashboardView
        """
        condition = snapshot.current.weather[0]
        theme = condition.main.lower()
        offset = snapshot.timezone_offset
        alerts = [self._alert(alert, offset) for alert in snapshot.alerts or ()]

        return DashboardView(
            unit=unit,
            theme=theme,
            effect=effect_for_theme(theme),
            current=self._current(snapshot.current, location, unit),
            alerts=alerts,
            alerts_message=None if alerts else NO_ALERTS_MESSAGE,
            hourly=[self._hourly(hour, offset) for hour in snapshot.hourly[:HOURLY_ITEMS]],
            daily=[self._daily(day, offset) for day in snapshot.daily[:DAILY_ITEMS]],
            charts=ChartsView(
                temperature=self.temperature_chart(snapshot.hourly[:CHART_HOURS], offset, unit),
                precipitation=self.precipitation_chart(snapshot.daily, offset),
            ),
        )

    def present_historical(
        self, reading: InstantReading, on_date: date, unit: UnitSystem
    ) -> HistoricalView:
        """Build the historical panel from a single reading."""
        condition = reading.weather[0]
        date_label = format_date(on_date)
        return HistoricalView(
            date_label=date_label,
            title=f"Weather on {date_label}",
            available=True,
            details=HistoricalDetails(
                temperature=format_temperature(reading.temp),
                feels_like=format_temperature(reading.feels_like),
                humidity=f"{reading.humidity}%",
                wind=self._wind(reading.wind_speed, unit),
                pressure=f"{reading.pressure} hPa",
                conditions=condition.description,
                uv_index=f"{round(reading.uvi, 1):g}",
                icon_url=self.icon_url(condition.icon),
            ),
        )

    def historical_unavailable(self, on_date: date) -> HistoricalView:
        date_label = format_date(on_date)
        return HistoricalView(
            date_label=date_label,
            title=f"Weather on {date_label}",
            available=False,
            message=NO_HISTORY_MESSAGE,
        )

    def temperature_chart(
        self, hourly: Sequence[HourlyReading], offset: int, unit: UnitSystem
    ) -> TemperatureChart:
        symbol = temperature_symbol(unit)
        return TemperatureChart(
            labels=[format_time(to_local_datetime(hour.dt, offset)) for hour in hourly],
            temperature_label=f"Temperature ({symbol})",
            temperature=[round_half_up(hour.temp) for hour in hourly],
            feels_like_label=f"Feels Like ({symbol})",
            feels_like=[round_half_up(hour.feels_like) for hour in hourly],
        )

    def precipitation_chart(self, daily: Sequence[DailyReading], offset: int) -> PrecipitationChart:
        return PrecipitationChart(
            labels=[format_day(to_local_datetime(day.dt, offset)) for day in daily],
            probability=[round_half_up(day.pop * 100) for day in daily],
        )

    def _current(self, current: InstantReading, location: Location, unit: UnitSystem) -> CurrentView:
        condition = current.weather[0]
        city_label = f"{location.name}, {location.country}" if location.country else location.name
        return CurrentView(
            city_label=city_label,
            temperature=format_temperature(current.temp),
            feels_like=format_temperature(current.feels_like),
            description=condition.description,
            humidity=f"{current.humidity}%",
            wind=self._wind(current.wind_speed, unit),
            pressure=f"{current.pressure} hPa",
            icon_url=self.icon_url(condition.icon, large=True),
            icon_alt=condition.description,
        )

    def _alert(self, alert: Alert, offset: int) -> AlertView:
        return AlertView(
            event=alert.event,
            sender_name=alert.sender_name,
            description=alert.description,
            start_label=format_datetime(to_local_datetime(alert.start, offset)),
            end_label=format_datetime(to_local_datetime(alert.end, offset)),
        )

    def _hourly(self, hour: HourlyReading, offset: int) -> HourlyItemView:
        condition: WeatherCondition = hour.weather[0]
        return HourlyItemView(
            time_label=format_time(to_local_datetime(hour.dt, offset)),
            icon_url=self.icon_url(condition.icon),
            description=condition.description,
            temperature=format_temperature(hour.temp),
            precipitation=format_percentage(hour.pop),
        )

    def _daily(self, day: DailyReading, offset: int) -> DailyItemView:
        condition = day.weather[0]
        return DailyItemView(
            day_label=format_day(to_local_datetime(day.dt, offset)),
            icon_url=self.icon_url(condition.icon),
            description=condition.description,
            temperature_range=f"{format_temperature(day.temp.max)} / {format_temperature(day.temp.min)}",
            precipitation=format_percentage(day.pop),
        )

    @staticmethod
    def _wind(speed: float, unit: UnitSystem) -> str:
        return f"{display_wind_speed(speed, unit)} {wind_speed_label(unit)}"
