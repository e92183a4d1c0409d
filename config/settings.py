"""Central configuration management using Pydantic."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.utils import validate_url

MOCK_API_KEY = "mock-key"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Backend selection
    use_mock_api: bool = Field(default=True, description="Serve generated data instead of OpenWeather")
    mock_api_delay: float = Field(default=0.5, ge=0, le=10, description="Simulated latency in seconds")

    # OpenWeather Configuration
    openweather_api_key: str = Field(default=MOCK_API_KEY)
    openweather_base_url: str = Field(default="https://api.openweathermap.org/data/2.5")
    openweather_geocode_url: str = Field(default="https://api.openweathermap.org/geo/1.0")
    openweather_history_url: str = Field(
        default="https://api.openweathermap.org/data/2.5/onecall/timemachine"
    )
    openweather_icon_url: str = Field(
        default="https://openweathermap.org/img/wn/{icon}{suffix}.png",
        description="Icon template, filled with the condition icon code",
    )
    openweather_timeout: int = Field(default=30, ge=5, le=120)

    # Dashboard
    default_city: str = Field(default="Kathmandu", min_length=1)
    fallback_city: str = Field(default="London", min_length=1)
    dashboard_log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    dashboard_json_logs: bool = Field(default=False)

    @field_validator(
        "openweather_base_url",
        "openweather_geocode_url",
        "openweather_history_url",
    )
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Ensure endpoints are absolute URLs without trailing slash."""
        if not validate_url(v):
            raise ValueError(f"Invalid endpoint URL: {v}")
        return v.rstrip("/")

    @field_validator("openweather_icon_url")
    @classmethod
    def validate_icon_template(cls, v: str) -> str:
        if "{icon}" not in v:
            raise ValueError("OPENWEATHER_ICON_URL must contain an {icon} placeholder")
        return v

    @model_validator(mode="after")
    def validate_api_key(self) -> "Settings":
        """A real key is required once the mock backend is switched off."""
        if not self.use_mock_api and (
            not self.openweather_api_key or self.openweather_api_key == MOCK_API_KEY
        ):
            raise ValueError("OPENWEATHER_API_KEY must be set when USE_MOCK_API is false")
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
