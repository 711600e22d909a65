"""TelemetryNormalizer — raw iRacing sample → :class:`NormalizedTick`.

A raw sample is a mapping with two blocks, both named the way the iRacing SDK
names them::

    {
        "telemetry": {"PlayerCarIdx": 0, "Speed": 98.1, "CarIdxLapDistPct": [...], ...},
        "session": {"WeekendInfo": {...}, "SessionInfo": {"Sessions": [...]},
                    "DriverInfo": {"Drivers": [...]}},
    }

Missing fields fall back to per-field defaults.  A sample that is missing a
whole block, or that cannot be parsed at all, is replaced by a synthetic
placeholder tick so consumers always get a well-formed structure.
"""

from __future__ import annotations

import logging
import math
import re
import time
from collections.abc import Mapping, Sequence
from typing import Any

from racing_radar.constants import TRACK_LENGTH_DEFAULT_M
from racing_radar.radar.metrics import normalize_lap_fraction, wrapped_distance_m
from racing_radar.telemetry.lateral import AlongsideLateralEstimator, LateralEstimator
from racing_radar.telemetry.models import (
    CarState,
    ConnectionStatus,
    DriverInfo,
    NormalizedTick,
    PlayerState,
    SessionInfo,
)

_logger = logging.getLogger(__name__)

MPH_TO_MS = 0.44704
DEG_TO_RAD = math.pi / 180.0
KM_TO_M = 1000.0
MI_TO_M = 1609.34

_TRACK_LENGTH_PATTERNS: tuple[tuple[re.Pattern[str], float], ...] = (
    (re.compile(r"([\d.]+)\s*km", re.IGNORECASE), KM_TO_M),
    (re.compile(r"([\d.]+)\s*mi", re.IGNORECASE), MI_TO_M),
)
_LEADING_INT_RE = re.compile(r"\s*(-?\d+)")

_PARSE_ERRORS = (TypeError, ValueError, KeyError, IndexError, AttributeError, ArithmeticError)

# raw_key → (PlayerState field, scale, clamp_min, clamp_max)
# clamp_min/max of None means no bound on that side.
_PLAYER_FLOAT_FIELDS: tuple[tuple[str, str, float, float | None, float | None], ...] = (
    # raw_key               field                    scale       min   max
    ("Speed",               "speed",                 MPH_TO_MS,  0.0,  None),
    ("RPM",                 "rpm",                   1.0,        0.0,  None),
    ("Throttle",            "throttle",              1.0,        0.0,  1.0),
    ("Brake",               "brake",                 1.0,        0.0,  1.0),
    ("Clutch",              "clutch",                1.0,        0.0,  1.0),
    ("SteeringWheelAngle",  "steering_angle",        DEG_TO_RAD, None, None),
    ("LapBestLapTime",      "lap_best_lap_time",     1.0,        0.0,  None),
    ("LapLastLapTime",      "lap_last_lap_time",     1.0,        0.0,  None),
    ("LapDeltaToBestLap",   "lap_delta_to_best_lap", 1.0,        None, None),
    ("LapCurrentLapTime",   "lap_current_lap_time",  1.0,        0.0,  None),
    ("FuelLevel",           "fuel_level",            1.0,        0.0,  None),
    ("FuelUsePerHour",      "fuel_use_per_hour",     1.0,        0.0,  None),
)

_PLAYER_INT_FIELDS: tuple[tuple[str, str, int | None, int | None], ...] = (
    ("Gear",               "gear",           -1,   None),
    ("PlayerCarPosition",  "position",        0,   None),
    ("CarLeftRight",       "car_left_right",  None, None),
)


def _sanitize(value: float, lo: float | None, hi: float | None) -> float:
    """Return value clamped to [lo, hi], with NaN/Inf replaced by lo (or 0)."""
    if not math.isfinite(value):
        value = lo if lo is not None else 0.0
    if lo is not None and value < lo:
        value = lo
    if hi is not None and value > hi:
        value = hi
    return value


def _sanitize_int(value: int, lo: int | None, hi: int | None) -> int:
    if lo is not None and value < lo:
        value = lo
    if hi is not None and value > hi:
        value = hi
    return value


def _item(values: Any, idx: int) -> Any:
    """``values[idx]``, or None when *values* is missing or too short."""
    if not isinstance(values, Sequence) or isinstance(values, str):
        return None
    if 0 <= idx < len(values):
        return values[idx]
    return None


def _section(block: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = block.get(key)
    return value if isinstance(value, Mapping) else {}


def _lenient_int(value: Any) -> int:
    """Leading integer of *value* (``"20 laps"`` → 20); 0 when there is none."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    match = _LEADING_INT_RE.match(str(value)) if value is not None else None
    return int(match.group(1)) if match else 0


def _now_ms() -> int:
    return int(time.time() * 1000)


def parse_track_length_m(text: Any, default: float = TRACK_LENGTH_DEFAULT_M) -> float:
    """Parse an iRacing ``TrackLength`` string such as ``"5.89 km"`` into metres.

    Kilometres are tried before miles; the first numeric match wins and the
    unit is case-insensitive.  Anything unparsable returns *default*.

    Examples
    --------
    >>> parse_track_length_m("5 km")
    5000.0
    >>> parse_track_length_m("1 MI")
    1609.34
    >>> parse_track_length_m("n/a")
    4000.0
    """
    if not isinstance(text, str):
        return default
    for pattern, factor in _TRACK_LENGTH_PATTERNS:
        match = pattern.search(text)
        if match is None:
            continue
        try:
            return float(match.group(1)) * factor
        except ValueError:
            continue  # e.g. "..km"
    return default


def placeholder_tick(
    now_ms: int,
    status: ConnectionStatus = ConnectionStatus.DISCONNECTED,
) -> NormalizedTick:
    """Synthetic tick used when no usable sample is available.

    The values are a deterministic function of *now_ms* (speed and lap fraction
    drift slowly) so a renderer visibly animates while disconnected.
    """
    t = now_ms / 1000.0
    player = PlayerState(
        speed=60.0 + math.sin(t * 0.5) * 10.0,
        rpm=6000.0,
        gear=4,
        throttle=0.8,
        lap_best_lap_time=120.0,
        lap_last_lap_time=121.0,
        lap_delta_to_best_lap=1.0,
        lap_current_lap_time=60.0,
        position=1,
        player_car_idx=0,
        fuel_level=45.0,
        fuel_use_per_hour=3.2,
        lap_dist_pct=0.25 + (t * 0.01) % 0.5,
    )
    cars = (
        CarState.at(1, -15.0, 2.0, car_number="12", position=2, lap=5),
        CarState.at(2, 25.0, -3.0, car_number="55", position=3, lap=5),
        CarState.at(3, -80.0, 0.0, car_number="7", position=4, lap=5),
    )
    session = SessionInfo(
        track_name="Charlotte Motor Speedway",
        track_display_name="Charlotte",
        track_length_m=1500.0,
        session_type="Practice",
        session_laps=0,
    )
    return NormalizedTick(
        connection_status=status,
        player=player,
        cars=cars,
        session=session,
        timestamp_ms=now_ms,
    )


class TelemetryNormalizer:
    """Converts a raw iRacing sample into a :class:`NormalizedTick`.

    Stateless: the same sample, time and hint always give the same tick.

    Parameters
    ----------
    lateral_estimator:
        Strategy used to place other cars sideways.  Defaults to
        :class:`~racing_radar.telemetry.lateral.AlongsideLateralEstimator`.
    """

    def __init__(self, lateral_estimator: LateralEstimator | None = None) -> None:
        self._lateral = lateral_estimator or AlongsideLateralEstimator()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def normalize(
        self,
        raw: Any,
        now_ms: int | None = None,
        track_length_hint_m: float | None = None,
    ) -> NormalizedTick:
        """Normalize *raw*; never raises.

        Parameters
        ----------
        raw:
            The raw sample (see module docstring), or None.
        now_ms:
            Tick timestamp in epoch milliseconds; defaults to the wall clock.
        track_length_hint_m:
            Track length carried over from the previous session, used when
            the sample has no parsable ``TrackLength``.
        """
        if now_ms is None:
            now_ms = _now_ms()
        try:
            tick = self._normalize(raw, now_ms, track_length_hint_m)
        except _PARSE_ERRORS as exc:
            _logger.warning("Unparsable telemetry sample, using placeholder: %r", exc)
            return self.placeholder(now_ms)
        if tick is None:
            _logger.debug("Telemetry sample missing session/telemetry block")
            return self.placeholder(now_ms)
        return tick

    def placeholder(
        self,
        now_ms: int | None = None,
        status: ConnectionStatus = ConnectionStatus.DISCONNECTED,
    ) -> NormalizedTick:
        """Return the synthetic fallback tick (see :func:`placeholder_tick`)."""
        return placeholder_tick(_now_ms() if now_ms is None else now_ms, status)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _normalize(
        self,
        raw: Any,
        now_ms: int,
        track_length_hint_m: float | None,
    ) -> NormalizedTick | None:
        if not isinstance(raw, Mapping):
            return None
        telemetry = raw.get("telemetry")
        session = raw.get("session")
        if not isinstance(telemetry, Mapping) or not isinstance(session, Mapping):
            return None

        default_length = (
            track_length_hint_m
            if track_length_hint_m is not None and track_length_hint_m > 0
            else TRACK_LENGTH_DEFAULT_M
        )
        weekend = _section(session, "WeekendInfo")
        track_length_m = parse_track_length_m(weekend.get("TrackLength"), default_length)
        drivers = self._parse_drivers(session)

        player_idx = int(telemetry.get("PlayerCarIdx") or 0)
        player_pct = _item(telemetry.get("CarIdxLapDistPct"), player_idx)
        if player_pct is None:
            player_pct = telemetry.get("LapDistPct")
        player_pct = normalize_lap_fraction(float(player_pct or 0.0))

        player = self._parse_player(telemetry, player_idx, player_pct)
        cars = self._parse_cars(telemetry, player, track_length_m, drivers)

        sessions = _section(session, "SessionInfo").get("Sessions")
        first = _item(sessions, 0)
        first = first if isinstance(first, Mapping) else {}
        session_info = SessionInfo(
            track_name=str(weekend.get("TrackName") or "unknown"),
            track_display_name=str(weekend.get("TrackDisplayName") or "Unknown"),
            track_length_m=track_length_m,
            session_type=str(first.get("SessionType") or "Practice"),
            session_laps=max(0, _lenient_int(first.get("SessionLaps"))),
            drivers=drivers,
        )

        return NormalizedTick(
            connection_status=ConnectionStatus.CONNECTED,
            player=player,
            cars=cars,
            session=session_info,
            timestamp_ms=now_ms,
        )

    def _parse_player(
        self,
        telemetry: Mapping[str, Any],
        player_idx: int,
        lap_dist_pct: float,
    ) -> PlayerState:
        kwargs: dict = {}

        for raw_key, field_name, scale, lo, hi in _PLAYER_FLOAT_FIELDS:
            val = float(telemetry.get(raw_key) or 0.0) * scale
            kwargs[field_name] = _sanitize(val, lo, hi)

        for raw_key, field_name, lo, hi in _PLAYER_INT_FIELDS:
            val = int(telemetry.get(raw_key) or 0)
            kwargs[field_name] = _sanitize_int(val, lo, hi)

        return PlayerState(player_car_idx=player_idx, lap_dist_pct=lap_dist_pct, **kwargs)

    def _parse_cars(
        self,
        telemetry: Mapping[str, Any],
        player: PlayerState,
        track_length_m: float,
        drivers: tuple[DriverInfo, ...],
    ) -> tuple[CarState, ...]:
        lap_pcts = telemetry.get("CarIdxLapDistPct") or ()
        surfaces = telemetry.get("CarIdxTrackSurface")
        positions = telemetry.get("CarIdxPosition")
        laps = telemetry.get("CarIdxLap")
        numbers = {d.car_idx: d.car_number for d in drivers if d.car_number}

        cars: list[CarState] = []
        for idx in range(len(lap_pcts)):
            if idx == player.player_car_idx:
                continue
            surface = _item(surfaces, idx)
            if surface is None or int(surface) < 0:
                continue

            other_pct = normalize_lap_fraction(float(lap_pcts[idx] or 0.0))
            longitudinal = wrapped_distance_m(player.lap_dist_pct, other_pct, track_length_m)
            lateral = self._lateral.estimate(idx, player.player_car_idx, player.car_left_right)
            cars.append(
                CarState.at(
                    idx,
                    longitudinal,
                    lateral,
                    car_number=numbers.get(idx, str(idx)),
                    position=max(0, int(_item(positions, idx) or 0)),
                    track_surface=int(surface),
                    lap=int(_item(laps, idx) or 0),
                )
            )
        return tuple(cars)

    def _parse_drivers(self, session: Mapping[str, Any]) -> tuple[DriverInfo, ...]:
        entries = _section(session, "DriverInfo").get("Drivers")
        if not isinstance(entries, Sequence) or isinstance(entries, str):
            return ()
        out: list[DriverInfo] = []
        for entry in entries:
            if not isinstance(entry, Mapping):
                continue
            car_idx = entry.get("CarIdx")
            out.append(
                DriverInfo(
                    car_idx=int(car_idx) if car_idx is not None else len(out),
                    user_name=str(entry.get("UserName") or ""),
                    car_number=str(entry.get("CarNumber") or ""),
                    car_class_id=int(entry.get("CarClassID") or 0),
                    irating=int(entry.get("IRating") or 0),
                )
            )
        return tuple(out)
