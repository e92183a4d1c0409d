"""Tests for the mock weather generator."""

from datetime import date

import pytest

from servers.openweather.ow_mock import (
    ALERT_EVENTS,
    FORECAST_CONDITIONS,
    HISTORICAL_CONDITIONS,
    MOCK_LATITUDE,
    MOCK_LONGITUDE,
    MockGenerator,
    is_night_hour,
)
from shared.utils import start_of_day_timestamp

NOW = 1_700_000_000


@pytest.fixture(scope="module")
def snapshots():
    generator = MockGenerator(seed=2024)
    return [generator.snapshot(now=NOW) for _ in range(1000)]


class TestSnapshotShape:
    """Structure holds for every generated snapshot."""

    def test_sequence_lengths(self, snapshots):
        assert all(len(s.hourly) == 24 for s in snapshots)
        assert all(len(s.daily) == 5 for s in snapshots)

    def test_every_reading_has_a_condition(self, snapshots):
        for s in snapshots:
            readings = [s.current, *s.hourly, *s.daily]
            assert all(len(r.weather) >= 1 for r in readings)

    def test_ranges(self, snapshots):
        for s in snapshots:
            for r in [s.current, *s.hourly, *s.daily]:
                assert 0 <= r.humidity <= 100
                assert 0 <= r.clouds <= 100
                assert 0 <= r.wind_deg < 360
                assert r.wind_speed >= 0
                assert r.uvi >= 0
            for r in [*s.hourly, *s.daily]:
                assert 0 <= r.pop <= 1

    def test_fixed_coordinates(self, snapshots):
        assert {(s.lat, s.lon) for s in snapshots} == {(MOCK_LATITUDE, MOCK_LONGITUDE)}


class TestCurrent:
    def test_temperature_bands(self, snapshots):
        for s in snapshots:
            assert 15 <= s.current.temp <= 30
            assert 14 <= s.current.feels_like <= 29
            assert s.current.temp == int(s.current.temp)

    def test_condition_from_forecast_catalog(self, snapshots):
        assert {s.current.weather[0] for s in snapshots} <= set(FORECAST_CONDITIONS)

    def test_sun_times_bracket_now(self, snapshots):
        current = snapshots[0].current
        assert current.sunrise == NOW - 36000
        assert current.sunset == NOW + 36000


class TestHourly:
    def test_timestamps_step_one_hour(self, snapshots):
        assert [h.dt for h in snapshots[0].hourly] == [NOW + i * 3600 for i in range(24)]

    def test_condition_follows_hour_of_day(self, snapshots):
        for s in snapshots[:50]:
            for i, hour in enumerate(s.hourly):
                expected = "01n" if is_night_hour(i) else "02d"
                assert hour.weather[0].icon == expected

    def test_night_window(self):
        assert [i for i in range(24) if is_night_hour(i)] == [0, 1, 2, 3, 4, 5, 19, 20, 21, 22, 23]

    def test_temperatures_follow_curve(self, snapshots):
        for s in snapshots:
            assert all(4 <= h.temp <= 23 for h in s.hourly)

    def test_uv_peaks_at_noon(self, snapshots):
        uvi = [h.uvi for h in snapshots[0].hourly]
        assert uvi[12] == 5
        assert uvi[0] == 0
        assert uvi[10] == 3

    def test_precipitation_mostly_dry(self, snapshots):
        pops = [h.pop for s in snapshots for h in s.hourly]
        dry = sum(1 for p in pops if p == 0)
        assert dry / len(pops) > 0.6
        assert max(pops) < 0.5


class TestDaily:
    def test_timestamps_step_one_day(self, snapshots):
        assert [d.dt for d in snapshots[0].daily] == [NOW + i * 86400 for i in range(5)]

    def test_facets_within_curves(self, snapshots):
        for s in snapshots:
            for day in s.daily:
                assert 5 <= day.temp.min <= 15
                assert 15 <= day.temp.max <= 28
                assert day.feels_like.min is None

    def test_condition_is_random_per_day(self, snapshots):
        seen = {d.weather[0] for s in snapshots for d in s.daily}
        assert seen == set(FORECAST_CONDITIONS)


class TestAlerts:
    def test_alert_shape(self, snapshots):
        with_alerts = [s for s in snapshots if s.alerts is not None]
        assert with_alerts
        for s in with_alerts:
            assert len(s.alerts) == 1
            alert = s.alerts[0]
            assert alert.event in ALERT_EVENTS
            assert alert.start == NOW
            assert alert.end == NOW + 86400

    def test_alert_frequency(self, snapshots):
        count = sum(1 for s in snapshots if s.alerts)
        assert 200 < count < 400


class TestHistorical:
    def test_keyed_to_start_of_day(self):
        on_date = date(2024, 3, 10)
        reading = MockGenerator(seed=5).historical(on_date)
        assert reading.dt == start_of_day_timestamp(on_date)

    def test_bands_and_catalog(self):
        generator = MockGenerator(seed=9)
        readings = [generator.historical(date(2023, 7, 1)) for _ in range(300)]
        assert all(10 <= r.temp <= 25 for r in readings)
        assert all(9 <= r.feels_like <= 24 for r in readings)
        assert all(0 <= r.humidity <= 100 for r in readings)
        assert {r.weather[0] for r in readings} <= set(HISTORICAL_CONDITIONS)


def test_seeded_generators_repeat():
    first = MockGenerator(seed=7).snapshot(now=NOW)
    second = MockGenerator(seed=7).snapshot(now=NOW)
    assert first == second
