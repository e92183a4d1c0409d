"""Error taxonomy shared by providers, the session and the bindings."""

from typing import Optional


class DashboardError(Exception):
    """Base error carrying a message fit for display to the user."""

    default_message = "Something went wrong. Please try again."

    def __init__(self, detail: str = "", user_message: Optional[str] = None):
        super().__init__(detail or user_message or self.default_message)
        self.user_message = user_message or self.default_message


class InvalidInput(DashboardError):
    """Empty city name, missing or out-of-range date, unknown unit."""

    default_message = "Please enter a valid value."


class InvalidState(DashboardError):
    """Operation needs a resolved location and there is none."""

    default_message = "Please select a location first"


class LocationNotFound(DashboardError):
    """Geocoding returned no match."""

    default_message = "City not found. Please try another location."


class FetchError(DashboardError):
    """Transport, HTTP status or decode failure of an external call."""

    default_message = "Error fetching weather data. Please try again."


class HistoricalDataUnavailable(DashboardError):
    """Historical call succeeded but carried no reading for the date."""

    default_message = "No historical data available for this date."


class GeolocationUnavailable(DashboardError):
    """Device position denied by the user or unsupported."""

    default_message = "Unable to retrieve your location. Using default city."


class StaleRequest(DashboardError):
    """A fetch completed after a newer one was issued and was discarded."""

    default_message = "A newer request replaced this one."
