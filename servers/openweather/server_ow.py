"""MCP Server exposing the weather dashboard over OpenWeather or mock data."""

from datetime import date
from typing import Any, Optional

from mcp.server.fastmcp import Context, FastMCP
from mcp.server.session import ServerSession
from pydantic import ValidationError

from dashboard.session_manager import DashboardSession
from dashboard.units import parse_unit
from servers.openweather.ow_schemas import Coordinates
from shared.exceptions import DashboardError, InvalidInput, StaleRequest
from shared.logging_config import get_logger

logger = get_logger(__name__)

# Create MCP server
mcp = FastMCP(
    name="WeatherDashboard",
    instructions=(
        "Provides current conditions, hourly and daily forecasts, alerts and "
        "historical readings for any city, rendered as dashboard view models"
    ),
)

# One session per server process, like one browser tab
session = DashboardSession()


def _failure(error: DashboardError) -> dict[str, Any]:
    return {"success": False, "error": error.user_message}


@mcp.tool()
async def search_weather(city_name: str, ctx: Context[ServerSession, None] = None) -> dict[str, Any]:
    """
    Get the weather dashboard for a city.

    Args:
        city_name: City to look up (e.g. "Kathmandu").
    Returns:
        Current conditions, 12 hourly and 5 daily items, alerts and chart datasets.
    """
    if ctx:
        await ctx.info(f"Searching weather for: {city_name}")
    try:
        view = await session.search(city_name)
    except DashboardError as e:
        if ctx and not isinstance(e, StaleRequest):
            await ctx.error(f"Weather search failed: {e}")
        return _failure(e)
    return {"success": True, **view.model_dump(mode="json")}


@mcp.tool()
async def locate_me(
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    ctx: Context[ServerSession, None] = None,
) -> dict[str, Any]:
    """
    Get the weather dashboard for the device position.

    Args:
        latitude: Device latitude; omit when the position is unavailable.
        longitude: Device longitude; omit when the position is unavailable.
    Returns:
        Dashboard for the position, or for the fallback city with a notice.
    """
    try:
        coordinates = None
        if (latitude is None) != (longitude is None):
            raise InvalidInput(
                "Only one coordinate given",
                user_message="Provide both latitude and longitude, or neither.",
            )
        if latitude is not None:
            try:
                coordinates = Coordinates(lat=latitude, lon=longitude)
            except ValidationError as e:
                raise InvalidInput(str(e), user_message="Coordinates are out of range.") from e
        view = await session.locate(coordinates)
    except DashboardError as e:
        if ctx:
            await ctx.error(f"Location weather failed: {e}")
        return _failure(e)
    return {"success": True, **view.model_dump(mode="json")}


@mcp.tool()
async def switch_unit(unit: str, ctx: Context[ServerSession, None] = None) -> dict[str, Any]:
    """
    Switch between metric and imperial units.

    Args:
        unit: "metric" or "imperial" (aliases "c" and "f" accepted).
    Returns:
        The refetched dashboard, or only the new unit when nothing was on screen.
    """
    try:
        view = await session.switch_unit(parse_unit(unit))
    except DashboardError as e:
        if ctx:
            await ctx.error(f"Unit switch failed: {e}")
        return _failure(e)
    if view is None:
        return {"success": True, "unit": session.unit.value}
    return {"success": True, **view.model_dump(mode="json")}


@mcp.tool()
async def get_historical_weather(
    on_date: str, ctx: Context[ServerSession, None] = None
) -> dict[str, Any]:
    """
    Get the weather on a past date for the location last searched.

    Args:
        on_date: Date as YYYY-MM-DD, at the latest yesterday.
    Returns:
        Historical reading, or a message when the provider has no data.
    """
    try:
        try:
            parsed = date.fromisoformat(on_date)
        except ValueError as e:
            raise InvalidInput(str(e), user_message="Please select a date (YYYY-MM-DD).") from e
        view = await session.get_history(parsed)
    except DashboardError as e:
        if ctx:
            await ctx.error(f"Historical weather failed: {e}")
        return _failure(e)
    return {"success": True, **view.model_dump(mode="json")}


@mcp.resource("weather://current/{city}")
async def current_weather_resource(city: str) -> str:
    """
    Get a plain-text summary of the current weather in a city.

    Args:
        city: City name

    Returns:
        Formatted current weather string
    """
    try:
        view = await session.search(city)
    except DashboardError as e:
        logger.error("current_weather_resource_error", error=str(e), city=city)
        return f"Error retrieving weather for {city}: {e.user_message}"

    current = view.current
    alerts = ", ".join(alert.event for alert in view.alerts) or view.alerts_message
    return f"""Current Weather for {current.city_label}
                Temperature: {current.temperature} (feels like {current.feels_like})
                Weather: {current.description}
                Humidity: {current.humidity}
                Wind: {current.wind}
                Pressure: {current.pressure}
                Alerts: {alerts}
                """


class WeatherDashboardServer:
    """Wrapper class for the Weather Dashboard MCP Server."""

    def __init__(self):
        """Initialize Weather Dashboard server."""
        self.mcp = mcp
        self.session = session
        logger.info("weather_dashboard_server_initialized", mock=session.providers.is_mock)

    async def start(self):
        """Start the server."""
        logger.info("weather_dashboard_server_started")

    async def stop(self):
        """Stop the server and cleanup."""
        await self.session.close()
        logger.info("weather_dashboard_server_stopped")

    def get_mcp_server(self) -> FastMCP:
        """Get the FastMCP server instance."""
        return self.mcp


if __name__ == "__main__":
    """Run server in stdio mode for MCP client connection."""
    import asyncio
    from config.settings import get_settings
    from shared.logging_config import setup_logging

    settings = get_settings()
    setup_logging(settings.dashboard_log_level, settings.dashboard_json_logs)

    async def run_server():
        """Run the MCP server in stdio mode."""
        server = WeatherDashboardServer()
        await server.start()
        await mcp.run_stdio_async()
        await server.stop()

    asyncio.run(run_server())
