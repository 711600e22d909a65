"""Tests for TelemetryNormalizer."""

from __future__ import annotations

import math

import pytest

from racing_radar.telemetry.models import ConnectionStatus, NormalizedTick
from racing_radar.telemetry.normalizer import (
    TelemetryNormalizer,
    parse_track_length_m,
    placeholder_tick,
)

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

NOW_MS = 1_700_000_000_000


def make_raw(telemetry: dict | None = None, session: dict | None = None) -> dict:
    """Return a minimal valid raw sample with four cars, player index 0."""
    tel = {
        "PlayerCarIdx": 0,
        "CarIdxLapDistPct": [0.50, 0.51, 0.45, 0.90],
        "CarIdxTrackSurface": [3, 3, 3, 3],
        "CarIdxPosition": [1, 2, 3, 4],
        "CarIdxLap": [5, 5, 4, 5],
        "CarLeftRight": 1,
        "Speed": 100.0,
        "RPM": 7200.0,
        "Gear": 4,
        "Throttle": 0.9,
        "Brake": 0.0,
        "Clutch": 0.0,
        "SteeringWheelAngle": 90.0,
        "LapBestLapTime": 30.1,
        "LapLastLapTime": 30.4,
        "LapDeltaToBestLap": 0.3,
        "LapCurrentLapTime": 12.0,
        "PlayerCarPosition": 1,
        "FuelLevel": 40.0,
        "FuelUsePerHour": 60.0,
    }
    tel.update(telemetry or {})
    sess = {
        "WeekendInfo": {
            "TrackName": "charlotte",
            "TrackDisplayName": "Charlotte Motor Speedway",
            "TrackLength": "1.00 km",
        },
        "SessionInfo": {"Sessions": [{"SessionType": "Race", "SessionLaps": "50"}]},
        "DriverInfo": {
            "Drivers": [
                {"CarIdx": 0, "UserName": "Me", "CarNumber": "1", "CarClassID": 10, "IRating": 2500},
                {"CarIdx": 1, "UserName": "Alice", "CarNumber": "12", "CarClassID": 10, "IRating": 3100},
                {"CarIdx": 3, "UserName": "Bob", "CarNumber": "77", "CarClassID": 10, "IRating": 1800},
            ]
        },
    }
    sess.update(session or {})
    return {"telemetry": tel, "session": sess}


@pytest.fixture
def normalizer() -> TelemetryNormalizer:
    return TelemetryNormalizer()


# ---------------------------------------------------------------------------
# Track length parsing
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "text, expected",
    [
        ("5.891 km", 5891.0),
        ("2.5 mi", 4023.35),
        ("2.5 MI", 4023.35),
        ("3.2KM", 3200.0),
        ("unknown", 4000.0),
        ("", 4000.0),
    ],
)
def test_parse_track_length(text, expected):
    assert parse_track_length_m(text) == pytest.approx(expected, abs=1e-6)


def test_parse_track_length_non_string_returns_default():
    assert parse_track_length_m(None) == 4000.0
    assert parse_track_length_m(12.0, default=1234.0) == 1234.0


# ---------------------------------------------------------------------------
# Player state
# ---------------------------------------------------------------------------


def test_normalize_returns_connected_tick(normalizer):
    tick = normalizer.normalize(make_raw(), now_ms=NOW_MS)
    assert isinstance(tick, NormalizedTick)
    assert tick.connection_status is ConnectionStatus.CONNECTED
    assert tick.timestamp_ms == NOW_MS


def test_player_unit_conversions(normalizer):
    tick = normalizer.normalize(make_raw(), now_ms=NOW_MS)
    assert tick.player.speed == pytest.approx(100.0 * 0.44704)
    assert tick.player.steering_angle == pytest.approx(math.pi / 2)


def test_player_scalar_fields(normalizer):
    player = normalizer.normalize(make_raw(), now_ms=NOW_MS).player
    assert player.rpm == pytest.approx(7200.0)
    assert player.gear == 4
    assert player.throttle == pytest.approx(0.9)
    assert player.position == 1
    assert player.fuel_level == pytest.approx(40.0)
    assert player.fuel_use_per_hour == pytest.approx(60.0)
    assert player.lap_dist_pct == pytest.approx(0.50)
    assert player.car_left_right == 1


def test_player_values_are_clamped(normalizer):
    raw = make_raw({"Throttle": 1.7, "Brake": -0.2, "Speed": float("nan"), "Gear": -3})
    player = normalizer.normalize(raw, now_ms=NOW_MS).player
    assert player.throttle == 1.0
    assert player.brake == 0.0
    assert player.speed == 0.0
    assert player.gear == -1


def test_missing_player_fields_default_to_zero(normalizer):
    raw = {"telemetry": {"PlayerCarIdx": 0}, "session": {}}
    tick = normalizer.normalize(raw, now_ms=NOW_MS)
    assert tick.connection_status is ConnectionStatus.CONNECTED
    assert tick.player.speed == 0.0
    assert tick.player.gear == 0
    assert tick.cars == ()


def test_player_lap_fraction_falls_back_to_scalar(normalizer):
    raw = make_raw({"CarIdxLapDistPct": None, "LapDistPct": 0.3})
    tick = normalizer.normalize(raw, now_ms=NOW_MS)
    assert tick.player.lap_dist_pct == pytest.approx(0.3)


def test_player_lap_fraction_wrapped_into_unit_interval(normalizer):
    raw = make_raw({"CarIdxLapDistPct": [1.25, 0.3, 0.3, 0.3]})
    tick = normalizer.normalize(raw, now_ms=NOW_MS)
    assert 0.0 <= tick.player.lap_dist_pct < 1.0
    assert tick.player.lap_dist_pct == pytest.approx(0.25)


# ---------------------------------------------------------------------------
# Cars
# ---------------------------------------------------------------------------


def test_cars_exclude_player_and_keep_sample_order(normalizer):
    tick = normalizer.normalize(make_raw(), now_ms=NOW_MS)
    assert [c.car_idx for c in tick.cars] == [1, 2, 3]


def test_cars_longitudinal_uses_wrapped_distance(normalizer):
    # track length 1000 m; player at 0.50
    cars = {c.car_idx: c for c in normalizer.normalize(make_raw(), now_ms=NOW_MS).cars}
    assert cars[1].longitudinal_m == pytest.approx(10.0)
    assert cars[2].longitudinal_m == pytest.approx(-50.0)
    assert cars[3].longitudinal_m == pytest.approx(400.0)


def test_cars_wrap_across_start_finish(normalizer):
    raw = make_raw({"CarIdxLapDistPct": [0.95, 0.05, 0.90, 0.90]})
    cars = {c.car_idx: c for c in normalizer.normalize(raw, now_ms=NOW_MS).cars}
    assert cars[1].longitudinal_m == pytest.approx(100.0)


def test_cars_off_track_are_excluded(normalizer):
    raw = make_raw({"CarIdxTrackSurface": [3, -1, 3]})
    tick = normalizer.normalize(raw, now_ms=NOW_MS)
    # car 1 is off world, car 3 has no surface entry at all
    assert [c.car_idx for c in tick.cars] == [2]


def test_car_numbers_from_driver_list(normalizer):
    cars = {c.car_idx: c for c in normalizer.normalize(make_raw(), now_ms=NOW_MS).cars}
    assert cars[1].car_number == "12"
    assert cars[2].car_number == "2"  # not listed → index
    assert cars[3].car_number == "77"


def test_car_distance_is_hypot(normalizer):
    for car in normalizer.normalize(make_raw(), now_ms=NOW_MS).cars:
        assert car.distance_m == pytest.approx(math.hypot(car.longitudinal_m, car.lateral_m))
        assert car.heading == 0.0


def test_car_left_code_places_every_car_left(normalizer):
    raw = make_raw({"CarLeftRight": 2})
    assert all(c.lateral_m == -2.0 for c in normalizer.normalize(raw, now_ms=NOW_MS).cars)


def test_car_fields_from_arrays(normalizer):
    cars = {c.car_idx: c for c in normalizer.normalize(make_raw(), now_ms=NOW_MS).cars}
    assert cars[2].position == 3
    assert cars[2].lap == 4
    assert cars[2].track_surface == 3


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


def test_session_info(normalizer):
    session = normalizer.normalize(make_raw(), now_ms=NOW_MS).session
    assert session is not None
    assert session.track_name == "charlotte"
    assert session.track_display_name == "Charlotte Motor Speedway"
    assert session.track_length_m == pytest.approx(1000.0)
    assert session.session_type == "Race"
    assert session.session_laps == 50
    assert [d.user_name for d in session.drivers] == ["Me", "Alice", "Bob"]
    assert session.driver(3).irating == 1800


def test_session_laps_unlimited_is_zero(normalizer):
    raw = make_raw(session={"SessionInfo": {"Sessions": [{"SessionLaps": "unlimited"}]}})
    assert normalizer.normalize(raw, now_ms=NOW_MS).session.session_laps == 0


def test_track_length_hint_used_when_length_missing(normalizer):
    raw = make_raw(session={"WeekendInfo": {"TrackName": "x"}})
    tick = normalizer.normalize(raw, now_ms=NOW_MS, track_length_hint_m=2000.0)
    assert tick.session.track_length_m == pytest.approx(2000.0)


def test_track_length_default_without_hint(normalizer):
    raw = make_raw(session={"WeekendInfo": {"TrackName": "x"}})
    tick = normalizer.normalize(raw, now_ms=NOW_MS)
    assert tick.session.track_length_m == pytest.approx(4000.0)


# ---------------------------------------------------------------------------
# Placeholder fallback
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "garbage",
        {},
        {"telemetry": {"PlayerCarIdx": 0}},
        {"session": {}},
        {"telemetry": {"PlayerCarIdx": "not-a-number"}, "session": {}},
        {"telemetry": {"PlayerCarIdx": 0, "Speed": "fast"}, "session": {}},
    ],
)
def test_unusable_sample_falls_back_to_placeholder(normalizer, raw):
    tick = normalizer.normalize(raw, now_ms=NOW_MS)
    assert tick == placeholder_tick(NOW_MS)
    assert tick.connection_status is ConnectionStatus.DISCONNECTED


def test_placeholder_is_deterministic_and_well_formed():
    a = placeholder_tick(NOW_MS)
    b = placeholder_tick(NOW_MS)
    assert a == b
    assert len(a.cars) == 3
    assert a.session.track_length_m == 1500.0
    assert 0.0 <= a.player.lap_dist_pct < 1.0


def test_placeholder_carries_given_status(normalizer):
    tick = normalizer.placeholder(NOW_MS, ConnectionStatus.WAITING)
    assert tick.connection_status is ConnectionStatus.WAITING


def test_placeholder_animates_with_time():
    assert placeholder_tick(0).player.speed != placeholder_tick(3_000).player.speed


def test_custom_lateral_estimator_is_used():
    class Fixed:
        def estimate(self, car_idx, player_car_idx, car_left_right):
            return 4.5

    tick = TelemetryNormalizer(Fixed()).normalize(make_raw(), now_ms=NOW_MS)
    assert all(c.lateral_m == 4.5 for c in tick.cars)
