"""Data schemas for the OpenWeather one-call family of endpoints."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FrozenModel(BaseModel):
    """Immutable once validated."""

    model_config = ConfigDict(frozen=True)


class Coordinates(FrozenModel):
    """Device position."""

    lat: float = Field(..., ge=-90, le=90, description="Latitude")
    lon: float = Field(..., ge=-180, le=180, description="Longitude")


class Location(FrozenModel):
    """Resolved location, replaced wholesale on every new query."""

    lat: float = Field(..., description="Latitude")
    lon: float = Field(..., description="Longitude")
    name: str = Field(..., description="Location name")
    country: str = Field(default="", description="Country name or code")


class WeatherCondition(FrozenModel):
    """One weather condition entry; only the first per reading is displayed."""

    id: int = Field(..., description="Condition code")
    main: str = Field(..., description="Condition group (Clear, Clouds, Rain, ...)")
    description: str = Field(..., description="Human-readable condition")
    icon: str = Field(..., description="Icon code, e.g. 01d")


class ReadingBase(FrozenModel):
    """Fields shared by instant, hourly and daily readings."""

    dt: int = Field(..., description="Unix timestamp")
    pressure: int = Field(..., description="Sea level pressure in hPa")
    humidity: int = Field(..., ge=0, le=100, description="Relative humidity percentage")
    dew_point: float = Field(..., description="Dew point")
    uvi: float = Field(..., ge=0, description="UV index")
    clouds: float = Field(..., ge=0, le=100, description="Cloud cover percentage")
    wind_speed: float = Field(..., ge=0, description="Wind speed in the unit of the request")
    wind_deg: float = Field(..., description="Wind direction in degrees [0, 360)")
    weather: tuple[WeatherCondition, ...] = Field(..., min_length=1)

    @field_validator("wind_deg")
    @classmethod
    def normalize_wind_deg(cls, v: float) -> float:
        """Providers report north as either 0 or 360."""
        if v < 0:
            raise ValueError("wind_deg must not be negative")
        return v % 360


class InstantReading(ReadingBase):
    """Current conditions, also used for historical readings."""

    temp: float = Field(..., description="Temperature")
    feels_like: float = Field(..., description="Feels-like temperature")
    visibility: Optional[float] = Field(None, description="Visibility in metres")
    sunrise: Optional[int] = Field(None, description="Sunrise unix timestamp")
    sunset: Optional[int] = Field(None, description="Sunset unix timestamp")


class HourlyReading(InstantReading):
    """Hourly forecast slot."""

    pop: float = Field(default=0.0, ge=0, le=1, description="Precipitation probability")


class DailyTemperature(FrozenModel):
    """Temperature facets of one forecast day."""

    day: float
    min: float
    max: float
    night: float
    eve: float
    morn: float


class DailyFeelsLike(FrozenModel):
    """Feels-like facets of one forecast day; the provider omits min/max."""

    day: float
    night: float
    eve: float
    morn: float
    min: Optional[float] = None
    max: Optional[float] = None


class DailyReading(ReadingBase):
    """Daily forecast slot."""

    sunrise: int
    sunset: int
    temp: DailyTemperature
    feels_like: DailyFeelsLike
    pop: float = Field(default=0.0, ge=0, le=1, description="Precipitation probability")


class Alert(FrozenModel):
    """Weather alert/warning."""

    sender_name: str = Field(..., description="Issuing agency")
    event: str = Field(..., description="Alert type")
    start: int = Field(..., description="Start unix timestamp")
    end: int = Field(..., description="End unix timestamp")
    description: str = Field(..., description="Detailed description")


class Snapshot(FrozenModel):
    """One complete weather dataset for a location."""

    lat: float
    lon: float
    timezone: str
    timezone_offset: int = Field(default=0, description="Offset from UTC in seconds")
    current: InstantReading
    hourly: tuple[HourlyReading, ...] = Field(default_factory=tuple)
    daily: tuple[DailyReading, ...] = Field(default_factory=tuple)
    alerts: Optional[tuple[Alert, ...]] = None


class HistoricalPayload(FrozenModel):
    """
    Envelope of the historical endpoint.

    Older API versions answer with ``current``, newer ones with a ``data``
    list; both are empty when the provider has nothing for the date.
    """

    lat: Optional[float] = None
    lon: Optional[float] = None
    timezone: Optional[str] = None
    timezone_offset: int = 0
    current: Optional[InstantReading] = None
    data: tuple[InstantReading, ...] = Field(default_factory=tuple)

    @property
    def reading(self) -> Optional[InstantReading]:
        if self.current is not None:
            return self.current
        return self.data[0] if self.data else None
