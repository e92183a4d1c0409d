"""
Terminal weather dashboard.

Features:
- City search by typing a name
- Device location lookup with fallback city
- Metric/imperial toggle (refetches from the provider)
- Historical reading for a past date
- Alerts, hourly and daily strips rendered with rich
"""

import asyncio
import sys
from datetime import date
from typing import Optional

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from config.settings import get_settings
from dashboard.presenter import DashboardView, HistoricalView
from dashboard.session_manager import DashboardSession
from dashboard.units import parse_unit, temperature_symbol
from servers.openweather.ow_schemas import Coordinates
from shared.exceptions import DashboardError, InvalidInput, StaleRequest
from shared.logging_config import get_logger, setup_logging
from shared.utils import format_date, max_history_date

logger = get_logger(__name__)

THEME_STYLES = {
    "clear": "yellow",
    "clouds": "white",
    "rain": "blue",
    "drizzle": "blue",
    "snow": "bright_white",
    "thunderstorm": "magenta",
}

HELP_TEXT = """
# Available Commands

- **<city name>** - Show the weather for a city
- **/locate [lat lon]** - Weather at your position (fallback city without coordinates)
- **/unit metric|imperial** - Switch units and refetch
- **/history YYYY-MM-DD** - Weather on a past date for the current location
- **/alerts** - Show active alerts
- **/help** - Show this help message
- **/quit** or **/exit** - Exit the application
"""


class DashboardInterface:
    """Interactive terminal interface over a DashboardSession."""

    def __init__(self, session: DashboardSession, console: Optional[Console] = None):
        self.session = session
        self.console = console or Console()

        self.commands = {
            "/help": self._cmd_help,
            "/quit": self._cmd_quit,
            "/exit": self._cmd_quit,
            "/locate": self._cmd_locate,
            "/unit": self._cmd_unit,
            "/history": self._cmd_history,
            "/alerts": self._cmd_alerts,
        }

        self.running = True

    async def run(self):
        """Run the interface loop."""
        self.console.print(Panel(Markdown(HELP_TEXT), title="Weather Dashboard", border_style="green"))
        await self._guarded(self.session.load_default())

        while self.running:
            try:
                user_input = Prompt.ask("\n[bold cyan]City[/bold cyan]")

                if not user_input.strip():
                    self.console.print("[yellow]Please enter a city name.[/yellow]")
                    continue

                if user_input.startswith("/"):
                    await self._handle_command(user_input)
                    continue

                await self._guarded(self.session.search(user_input))

            except KeyboardInterrupt:
                self.console.print("\n\n[yellow]Interrupted by user[/yellow]")
                break
            except EOFError:
                break

    async def _guarded(self, operation) -> None:
        """Await a session operation and render its view or its user message."""
        try:
            with self.console.status("[bold green]Fetching weather...", spinner="dots"):
                view = await operation
        except StaleRequest:
            return
        except DashboardError as e:
            self.console.print(f"[red]{e.user_message}[/red]")
            return

        if isinstance(view, HistoricalView):
            self.render_historical(view)
        elif isinstance(view, DashboardView):
            self.render(view)

    async def _handle_command(self, command: str):
        """Handle slash commands."""
        parts = command.split()
        cmd = parts[0].lower()
        args = parts[1:]

        if cmd in self.commands:
            await self.commands[cmd](args)
        else:
            self.console.print(f"[red]Unknown command: {cmd}[/red]")
            self.console.print("Type [cyan]/help[/cyan] for available commands")

    async def _cmd_help(self, args):
        self.console.print(Markdown(HELP_TEXT))

    async def _cmd_quit(self, args):
        self.console.print("\n[yellow]Goodbye![/yellow]")
        self.running = False

    async def _cmd_locate(self, args):
        coordinates = None
        if args:
            try:
                if len(args) != 2:
                    raise ValueError("expected latitude and longitude")
                coordinates = Coordinates(lat=float(args[0]), lon=float(args[1]))
            except ValueError:
                self.console.print("[red]Usage: /locate \\[lat lon][/red]")
                return
        await self._guarded(self.session.locate(coordinates))

    async def _cmd_unit(self, args):
        if not args:
            self.console.print(f"Current unit: [cyan]{self.session.unit.value}[/cyan]")
            return
        try:
            unit = parse_unit(args[0])
        except InvalidInput as e:
            self.console.print(f"[red]{e.user_message}[/red]")
            return

        if unit == self.session.unit:
            return
        if self.session.location is None:
            await self.session.switch_unit(unit)
            self.console.print(f"[green]Units set to {unit.value}[/green]")
            return
        await self._guarded(self.session.switch_unit(unit))

    async def _cmd_history(self, args):
        if not args:
            self.console.print(
                f"[red]Please select a date (latest {format_date(max_history_date())}).[/red]"
            )
            return
        try:
            on_date = date.fromisoformat(args[0])
        except ValueError:
            self.console.print("[red]Dates must look like YYYY-MM-DD.[/red]")
            return
        await self._guarded(self.session.get_history(on_date))

    async def _cmd_alerts(self, args):
        view = self.session.current_view()
        if view is None:
            self.console.print("[yellow]Please select a location first[/yellow]")
            return
        self.render_alerts(view)

    def render(self, view: DashboardView):
        """Render a full dashboard view."""
        if view.notice:
            self.console.print(f"[yellow]{view.notice}[/yellow]")

        current = view.current
        style = THEME_STYLES.get(view.theme, "cyan")
        body = (
            f"[bold]{current.temperature}[/bold]  {current.description}\n"
            f"Feels like {current.feels_like}   Humidity {current.humidity}\n"
            f"Wind {current.wind}   Pressure {current.pressure}"
        )
        if view.effect:
            body += f"\n[dim]({view.effect} falling)[/dim]"
        self.console.print(Panel(body, title=current.city_label, border_style=style))

        self.render_alerts(view)

        hourly = Table(title="Next 12 hours")
        for item in view.hourly:
            hourly.add_column(item.time_label, justify="center")
        hourly.add_row(*(item.temperature for item in view.hourly))
        hourly.add_row(*(item.description for item in view.hourly))
        hourly.add_row(*(item.precipitation for item in view.hourly))
        self.console.print(hourly)

        daily = Table(title="5-day forecast")
        daily.add_column("Day", style="cyan")
        daily.add_column(f"High / Low ({temperature_symbol(view.unit)})")
        daily.add_column("Conditions")
        daily.add_column("Precip.", justify="right")
        for item in view.daily:
            daily.add_row(item.day_label, item.temperature_range, item.description, item.precipitation)
        self.console.print(daily)

    def render_alerts(self, view: DashboardView):
        if not view.alerts:
            self.console.print(f"[green]{view.alerts_message}[/green]")
            return
        for alert in view.alerts:
            self.console.print(Panel(
                f"{alert.description}\n[dim]From: {alert.start_label} - To: {alert.end_label}[/dim]",
                title=alert.event,
                border_style="red",
            ))

    def render_historical(self, view: HistoricalView):
        if not view.available or view.details is None:
            self.console.print(Panel(view.message or "", title=view.title, border_style="yellow"))
            return

        details = view.details
        table = Table(title=view.title, show_header=False)
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        table.add_row("Temperature", details.temperature)
        table.add_row("Feels Like", details.feels_like)
        table.add_row("Humidity", details.humidity)
        table.add_row("Wind", details.wind)
        table.add_row("Pressure", details.pressure)
        table.add_row("Conditions", details.conditions)
        table.add_row("UV Index", details.uv_index)
        self.console.print(table)


async def main():
    """Main entry point."""
    settings = get_settings()
    setup_logging(
        log_level=settings.dashboard_log_level,
        json_logs=settings.dashboard_json_logs,
    )

    logger.info("application_starting", mock=settings.use_mock_api)

    session = None
    try:
        session = DashboardSession(settings=settings)
        interface = DashboardInterface(session)
        await interface.run()
    except KeyboardInterrupt:
        logger.info("application_interrupted")
    except Exception as e:
        logger.error("application_error", error=str(e))
        print(f"\nFatal error: {e}")
        sys.exit(1)
    finally:
        if session:
            logger.info("shutting_down")
            await session.close()

        logger.info("application_stopped")


def cli():
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    cli()
