"""Normalized telemetry data models.

Everything here is produced fresh by
:class:`~racing_radar.telemetry.normalizer.TelemetryNormalizer` on every tick
and is immutable afterwards.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum


class ConnectionStatus(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    WAITING = "waiting"


@dataclass(frozen=True)
class PlayerState:
    """The player's own car.

    Values are clamped to their documented ranges by the normalizer.
    """

    speed: float = 0.0
    """Vehicle speed in m/s (>= 0)."""

    rpm: float = 0.0
    gear: int = 0
    """-1 = reverse, 0 = neutral, 1.. = forward."""

    throttle: float = 0.0
    brake: float = 0.0
    clutch: float = 0.0
    steering_angle: float = 0.0
    """Steering wheel angle in radians."""

    lap_best_lap_time: float = 0.0
    lap_last_lap_time: float = 0.0
    lap_delta_to_best_lap: float = 0.0
    lap_current_lap_time: float = 0.0
    position: int = 0
    """Race position, 0 = unknown."""

    player_car_idx: int = 0
    fuel_level: float = 0.0
    """Litres."""

    fuel_use_per_hour: float = 0.0
    """Litres per hour."""

    lap_dist_pct: float = 0.0
    """Lap distance fraction in [0, 1)."""

    car_left_right: int = 0
    """Raw iRacing ``CarLeftRight`` spotter code."""


@dataclass(frozen=True)
class CarState:
    """Another car, expressed relative to the player."""

    car_idx: int
    longitudinal_m: float
    """Signed distance along the lap; positive = ahead of the player."""

    lateral_m: float
    """Signed sideways offset; positive = right of the player."""

    distance_m: float
    car_number: str
    position: int = 0
    track_surface: int = 0
    lap: int = 0
    heading: float = 0.0
    """Relative heading in radians (0 when unknown)."""

    @classmethod
    def at(cls, car_idx: int, longitudinal_m: float, lateral_m: float, **kwargs) -> CarState:
        """Build a car with ``distance_m`` derived from the two offsets."""
        kwargs.setdefault("car_number", str(car_idx))
        return cls(
            car_idx=car_idx,
            longitudinal_m=longitudinal_m,
            lateral_m=lateral_m,
            distance_m=math.hypot(longitudinal_m, lateral_m),
            **kwargs,
        )


@dataclass(frozen=True)
class DriverInfo:
    car_idx: int
    user_name: str = ""
    car_number: str = ""
    car_class_id: int = 0
    irating: int = 0


@dataclass(frozen=True)
class SessionInfo:
    track_name: str = "unknown"
    track_display_name: str = "Unknown"
    track_length_m: float = 0.0
    session_type: str = "Practice"
    session_laps: int = 0
    drivers: tuple[DriverInfo, ...] = ()

    def driver(self, car_idx: int) -> DriverInfo | None:
        """Return the driver entry for *car_idx*, if the session lists one."""
        for d in self.drivers:
            if d.car_idx == car_idx:
                return d
        return None


@dataclass(frozen=True)
class NormalizedTick:
    """One tick of normalized telemetry."""

    connection_status: ConnectionStatus
    player: PlayerState = field(default_factory=PlayerState)
    cars: tuple[CarState, ...] = ()
    """Other cars in sample order; never contains the player's own index."""

    session: SessionInfo | None = None
    timestamp_ms: int = 0
