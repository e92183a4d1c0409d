"""Tests for the snapshot presenter."""

from datetime import date

import pytest

from dashboard.presenter import (
    NO_ALERTS_MESSAGE,
    NO_HISTORY_MESSAGE,
    SnapshotPresenter,
    effect_for_theme,
)
from dashboard.units import UnitSystem
from servers.openweather.ow_mock import MockGenerator
from servers.openweather.ow_schemas import Alert, Location

KATHMANDU = Location(lat=27.7172, lon=85.324, name="Kathmandu", country="Nepal")


@pytest.fixture
def presenter():
    return SnapshotPresenter()


class TestCurrentView:
    def test_metric_fields(self, presenter, snapshot_factory):
        view = presenter.present(snapshot_factory(), KATHMANDU, UnitSystem.METRIC)
        current = view.current

        assert current.city_label == "Kathmandu, Nepal"
        assert current.temperature == "21°"
        assert current.feels_like == "20°"
        assert current.description == "clear sky"
        assert current.humidity == "55%"
        assert current.wind == "18 km/h"
        assert current.pressure == "1012 hPa"
        assert current.icon_url == "https://openweathermap.org/img/wn/01d@2x.png"
        assert current.icon_alt == "clear sky"

    def test_imperial_wind_is_only_rounded(self, presenter, snapshot_factory):
        view = presenter.present(snapshot_factory(wind_speed=7.6), KATHMANDU, UnitSystem.IMPERIAL)
        assert view.current.wind == "8 mph"

    def test_halves_round_up(self, presenter, snapshot_factory):
        view = presenter.present(snapshot_factory(temp=20.5, feels_like=-0.5), KATHMANDU, UnitSystem.METRIC)
        assert view.current.temperature == "21°"
        assert view.current.feels_like == "0°"

    def test_location_without_country(self, presenter, snapshot_factory):
        here = Location(lat=1.0, lon=2.0, name="Your Location", country="")
        view = presenter.present(snapshot_factory(), here, UnitSystem.METRIC)
        assert view.current.city_label == "Your Location"


class TestThemeAndEffect:
    @pytest.mark.parametrize(
        "main, theme, effect",
        [
            ("Clear", "clear", None),
            ("Snow", "snow", "snow"),
            ("Rain", "rain", "rain"),
            ("Drizzle", "drizzle", "rain"),
            ("Thunderstorm", "thunderstorm", None),
        ],
    )
    def test_theme(self, presenter, snapshot_factory, main, theme, effect):
        view = presenter.present(snapshot_factory(main=main), KATHMANDU, UnitSystem.METRIC)
        assert view.theme == theme
        assert view.effect == effect

    def test_effect_for_unknown_group(self):
        assert effect_for_theme("mist") is None


class TestAlerts:
    def test_no_alerts_message(self, presenter, snapshot_factory):
        view = presenter.present(snapshot_factory(alerts=None), KATHMANDU, UnitSystem.METRIC)
        assert view.alerts == []
        assert view.alerts_message == NO_ALERTS_MESSAGE

    def test_empty_alert_list_counts_as_none(self, presenter, snapshot_factory):
        view = presenter.present(snapshot_factory(alerts=[]), KATHMANDU, UnitSystem.METRIC)
        assert view.alerts_message == NO_ALERTS_MESSAGE

    def test_alert_view(self, presenter, snapshot_factory):
        alert = Alert(
            sender_name="Weather Service",
            event="Flood Alert",
            start=0,
            end=86400,
            description="Rivers rising.",
        )
        view = presenter.present(snapshot_factory(alerts=[alert], offset=3600), KATHMANDU, UnitSystem.METRIC)

        assert view.alerts_message is None
        assert len(view.alerts) == 1
        assert view.alerts[0].event == "Flood Alert"
        assert view.alerts[0].start_label == "1970-01-01 01:00"
        assert view.alerts[0].end_label == "1970-01-02 01:00"


class TestForecastStrips:
    def test_hourly_items(self, presenter, snapshot_factory):
        view = presenter.present(snapshot_factory(offset=3600), KATHMANDU, UnitSystem.METRIC)

        assert len(view.hourly) == 12
        first = view.hourly[0]
        assert first.time_label == "01:00"
        assert first.temperature == "21°"
        assert first.precipitation == "30%"
        assert first.icon_url == "https://openweathermap.org/img/wn/01d.png"
        assert view.hourly[1].time_label == "02:00"

    def test_daily_items(self, presenter, snapshot_factory):
        view = presenter.present(snapshot_factory(pop=0.0), KATHMANDU, UnitSystem.METRIC)

        assert len(view.daily) == 5
        assert view.daily[0].day_label == "Thu"
        assert view.daily[1].day_label == "Fri"
        assert view.daily[0].temperature_range == "21° / 11°"
        assert view.daily[0].precipitation == "0%"

    def test_short_sequences_are_presented_as_is(self, presenter, snapshot_factory):
        view = presenter.present(
            snapshot_factory(hourly_count=5, daily_count=3), KATHMANDU, UnitSystem.METRIC
        )
        assert len(view.hourly) == 5
        assert len(view.daily) == 3
        assert len(view.charts.temperature.labels) == 5
        assert len(view.charts.precipitation.labels) == 3

    def test_empty_sequences(self, presenter, snapshot_factory):
        view = presenter.present(
            snapshot_factory(hourly_count=0, daily_count=0), KATHMANDU, UnitSystem.METRIC
        )
        assert view.hourly == []
        assert view.daily == []

    def test_long_sequences_are_truncated(self, presenter, snapshot_factory):
        view = presenter.present(
            snapshot_factory(hourly_count=48, daily_count=8), KATHMANDU, UnitSystem.METRIC
        )
        assert len(view.hourly) == 12
        assert len(view.daily) == 5


class TestCharts:
    def test_temperature_chart_covers_24_hours(self, presenter, snapshot_factory):
        chart = presenter.present(
            snapshot_factory(hourly_count=48), KATHMANDU, UnitSystem.METRIC
        ).charts.temperature

        assert len(chart.labels) == 24
        assert chart.temperature[:3] == [21, 22, 23]
        assert chart.feels_like[:3] == [20, 21, 22]
        assert chart.temperature_label == "Temperature (°C)"

    def test_imperial_legend(self, presenter, snapshot_factory):
        chart = presenter.present(snapshot_factory(), KATHMANDU, UnitSystem.IMPERIAL).charts.temperature
        assert chart.feels_like_label == "Feels Like (°F)"

    def test_precipitation_chart_uses_every_day(self, presenter, snapshot_factory):
        chart = presenter.present(
            snapshot_factory(daily_count=8, pop=0.45), KATHMANDU, UnitSystem.METRIC
        ).charts.precipitation

        assert len(chart.labels) == 8
        assert chart.probability == [45] * 8


class TestIcons:
    def test_unknown_code_passes_through(self, presenter):
        assert presenter.icon_url("zz99") == "https://openweathermap.org/img/wn/zz99.png"

    def test_custom_template(self):
        presenter = SnapshotPresenter(icon_template="https://icons.example/{icon}{suffix}.svg")
        assert presenter.icon_url("10n", large=True) == "https://icons.example/10n@2x.svg"


class TestPurity:
    def test_same_input_same_output(self, presenter):
        snapshot = MockGenerator(seed=1).snapshot(now=1_700_000_000)
        first = presenter.present(snapshot, KATHMANDU, UnitSystem.METRIC)
        second = presenter.present(snapshot, KATHMANDU, UnitSystem.METRIC)
        assert first == second

    def test_snapshot_not_modified(self, presenter):
        snapshot = MockGenerator(seed=2).snapshot(now=1_700_000_000)
        before = snapshot.model_dump()
        presenter.present(snapshot, KATHMANDU, UnitSystem.IMPERIAL)
        presenter.present(snapshot, KATHMANDU, UnitSystem.METRIC)
        assert snapshot.model_dump() == before


class TestHistorical:
    def test_details_from_single_reading(self, presenter):
        reading = MockGenerator(seed=4).historical(date(2024, 1, 15))
        view = presenter.present_historical(reading, date(2024, 1, 15), UnitSystem.METRIC)

        assert view.available is True
        assert view.title == "Weather on 2024-01-15"
        details = view.details
        assert details.temperature == f"{int(reading.temp)}°"
        assert details.humidity == f"{reading.humidity}%"
        assert details.pressure == f"{reading.pressure} hPa"
        assert details.conditions == reading.weather[0].description
        assert details.wind.endswith(" km/h")
        assert float(details.uv_index) == pytest.approx(reading.uvi, abs=0.05)

    def test_unavailable(self, presenter):
        view = presenter.historical_unavailable(date(1990, 5, 1))
        assert view.available is False
        assert view.details is None
        assert view.message == NO_HISTORY_MESSAGE
        assert view.title == "Weather on 1990-05-01"
