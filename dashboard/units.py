"""Measurement unit handling. Conversions are for display only."""

from enum import Enum

from shared.exceptions import InvalidInput
from shared.utils import round_half_up


class UnitSystem(str, Enum):
    """Unit system sent to the provider and used for display."""

    METRIC = "metric"
    IMPERIAL = "imperial"


UNIT_ALIASES = {
    "metric": UnitSystem.METRIC,
    "c": UnitSystem.METRIC,
    "celsius": UnitSystem.METRIC,
    "imperial": UnitSystem.IMPERIAL,
    "f": UnitSystem.IMPERIAL,
    "fahrenheit": UnitSystem.IMPERIAL,
}

MS_TO_KMH = 3.6


def parse_unit(text: str) -> UnitSystem:
    """Parse a unit name or alias (``c``, ``fahrenheit``, ...)."""
    unit = UNIT_ALIASES.get(text.strip().lower())
    if unit is None:
        raise InvalidInput(
            f"Unknown unit system: {text!r}",
            user_message="Unit must be 'metric' or 'imperial'.",
        )
    return unit


def temperature_symbol(unit: UnitSystem) -> str:
    return "°C" if unit == UnitSystem.METRIC else "°F"


def wind_speed_label(unit: UnitSystem) -> str:
    return "km/h" if unit == UnitSystem.METRIC else "mph"


def display_wind_speed(value: float, unit: UnitSystem) -> int:
    """
    Wind speed as shown to the user.

    Metric responses carry m/s and are shown in km/h. Imperial responses
    already carry mph and are only rounded.
    """
    if unit == UnitSystem.METRIC:
        return round_half_up(value * MS_TO_KMH)
    return round_half_up(value)
