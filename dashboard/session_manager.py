"""Dashboard session: the single writer of the current query state."""

from datetime import date, datetime
from typing import Callable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from config.settings import Settings, get_settings
from dashboard.presenter import DashboardView, HistoricalView, SnapshotPresenter
from dashboard.providers import (
    DEVICE_LOCATION_LABEL,
    LocationQuery,
    ProviderBundle,
    build_providers,
)
from dashboard.units import UnitSystem
from servers.openweather.ow_schemas import Coordinates, Location, Snapshot
from shared.exceptions import (
    DashboardError,
    FetchError,
    GeolocationUnavailable,
    HistoricalDataUnavailable,
    InvalidInput,
    InvalidState,
    StaleRequest,
)
from shared.logging_config import get_logger
from shared.utils import max_history_date

logger = get_logger(__name__)


class SessionState(BaseModel):
    """Current unit, location and snapshot. Replaced wholesale, never patched."""

    model_config = ConfigDict(frozen=True)

    unit: UnitSystem = Field(default=UnitSystem.METRIC)
    location: Optional[Location] = Field(default=None)
    snapshot: Optional[Snapshot] = Field(default=None)
    query: Optional[Union[Coordinates, str]] = Field(
        default=None, description="Query that produced the location, replayed on unit switches"
    )
    updated_at: Optional[datetime] = Field(default=None)


StateListener = Callable[[SessionState], None]


class DashboardSession:
    """
    Orchestrates resolve, fetch, commit and present.

    Every successful fetch replaces unit, location and snapshot in a single
    assignment. Failed fetches raise a ``DashboardError`` and leave the state
    as it was. When fetches overlap, only the most recently issued one may
    commit; earlier ones finishing late, whether they succeeded or failed,
    raise ``StaleRequest``.
    """

    def __init__(
        self,
        providers: Optional[ProviderBundle] = None,
        settings: Optional[Settings] = None,
        presenter: Optional[SnapshotPresenter] = None,
        unit: UnitSystem = UnitSystem.METRIC,
    ):
        self.settings = settings or get_settings()
        self.providers = providers or build_providers(self.settings)
        self.presenter = presenter or SnapshotPresenter(self.settings.openweather_icon_url)
        self._state = SessionState(unit=unit)
        self._generation = 0
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def unit(self) -> UnitSystem:
        return self._state.unit

    @property
    def location(self) -> Optional[Location]:
        return self._state.location

    @property
    def snapshot(self) -> Optional[Snapshot]:
        return self._state.snapshot

    def add_listener(self, listener: StateListener) -> None:
        """Register a callback run after every commit."""
        self._listeners.append(listener)

    async def load_default(self) -> DashboardView:
        """Initial fetch for the configured default city."""
        return await self.search(self.settings.default_city)

    async def search(self, city: str) -> DashboardView:
        """
        Fetch and present the weather for a city name.

        Raises:
            InvalidInput: Blank city name, nothing is fetched
            LocationNotFound: No geocoding match
            FetchError: Any call failed
            StaleRequest: A newer fetch was issued meanwhile
        """
        name = (city or "").strip()
        if not name:
            raise InvalidInput("Empty city name", user_message="Please enter a city name.")
        return await self._fetch(name, self._state.unit)

    async def locate(self, coordinates: Optional[Coordinates]) -> DashboardView:
        """
        Fetch the weather for the device position.

        ``None`` means the position is unavailable (denied or unsupported).
        The mock backend then uses its device label; the remote backend falls
        back to the configured fallback city, as it also does when the
        coordinate fetch fails.
        """
        unit = self._state.unit
        if coordinates is None:
            logger.warning("geolocation_unavailable", mock=self.providers.is_mock)
            if self.providers.is_mock:
                return await self._fetch(DEVICE_LOCATION_LABEL, unit)
            return await self._fallback(GeolocationUnavailable().user_message)

        try:
            return await self._fetch(coordinates, unit)
        except FetchError as e:
            logger.warning("device_location_weather_failed", error=str(e))
            return await self._fallback("Error getting your location weather. Using default city.")

    async def switch_unit(self, unit: UnitSystem) -> Optional[DashboardView]:
        """
        Change the unit system.

        With a location on screen this refetches through the full pipeline
        so feels-like values come from the provider's own conversion; the
        new unit is committed together with the new snapshot. Returns
        ``None`` when nothing had to be fetched.
        """
        if unit == self._state.unit:
            return None

        query = self._state.query
        if query is None:
            self._state = self._state.model_copy(update={"unit": unit})
            logger.info("unit_switched", unit=unit.value, refetched=False)
            return None

        logger.info("unit_switched", unit=unit.value, refetched=True)
        return await self._fetch(query, unit)

    async def get_history(self, on_date: Optional[date]) -> HistoricalView:
        """
        Fetch and present the reading for a past date at the current location.

        Does not modify the session state.

        Raises:
            InvalidState: No location resolved yet, nothing is fetched
            InvalidInput: Date missing or not before today
            FetchError: The call failed
        """
        location = self._state.location
        if location is None:
            raise InvalidState("History requested without a location")
        if on_date is None:
            raise InvalidInput("Missing date", user_message="Please select a date")
        if isinstance(on_date, datetime):
            on_date = on_date.date()
        if on_date > max_history_date():
            raise InvalidInput(
                f"Date {on_date.isoformat()} is not in the past",
                user_message="Please select a date before today.",
            )

        unit = self._state.unit
        try:
            reading = await self.providers.historical.fetch_historical(location, on_date, unit)
        except HistoricalDataUnavailable:
            return self.presenter.historical_unavailable(on_date)
        except DashboardError as e:
            logger.warning("historical_fetch_failed", error=str(e), date=on_date.isoformat())
            raise

        logger.info("historical_presented", location=location.name, date=on_date.isoformat())
        return self.presenter.present_historical(reading, on_date, unit)

    def current_view(self) -> Optional[DashboardView]:
        """Present the committed snapshot again, or ``None`` before the first fetch."""
        state = self._state
        if state.snapshot is None or state.location is None:
            return None
        return self.presenter.present(state.snapshot, state.location, state.unit)

    async def close(self) -> None:
        await self.providers.close()

    async def _fallback(self, notice: str) -> DashboardView:
        view = await self.search(self.settings.fallback_city)
        return view.model_copy(update={"notice": notice})

    async def _fetch(self, query: LocationQuery, unit: UnitSystem) -> DashboardView:
        self._generation += 1
        generation = self._generation
        try:
            location = await self.providers.resolver.resolve(query)
            snapshot = await self.providers.weather.fetch(location, unit)
        except DashboardError as e:
            if generation != self._generation:
                logger.info("stale_fetch_failed", generation=generation, error_type=type(e).__name__)
                raise StaleRequest(f"Fetch {generation} superseded by {self._generation}") from e
            logger.warning(
                "weather_fetch_failed",
                error=str(e),
                error_type=type(e).__name__,
                query=str(query),
            )
            raise

        replay = query if isinstance(query, Coordinates) else location.name
        self._commit(generation, SessionState(
            unit=unit,
            location=location,
            snapshot=snapshot,
            query=replay,
            updated_at=datetime.now(),
        ))
        return self.presenter.present(snapshot, location, unit)

    def _commit(self, generation: int, state: SessionState) -> None:
        if generation != self._generation:
            logger.info("stale_fetch_discarded", generation=generation, latest=self._generation)
            raise StaleRequest(f"Fetch {generation} superseded by {self._generation}")

        self._state = state
        logger.info(
            "session_updated",
            location=state.location.name if state.location else None,
            unit=state.unit.value,
        )
        for listener in self._listeners:
            try:
                listener(state)
            except Exception as e:
                logger.error("state_listener_error", error=str(e))
