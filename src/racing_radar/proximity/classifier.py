"""ProximityClassifier — nearest car per side and its danger level.

:func:`danger_level_from_lateral` is the only place the lateral danger
thresholds live; audio and visual indicators both go through it.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from racing_radar.constants import (
    CAR_LENGTH_M,
    CLOSE_LATERAL_M,
    DANGER_LATERAL_M,
    SIDE_LATERAL_MAX_M,
    SIDE_LATERAL_MIN_M,
    SIDE_LONGITUDINAL_CAR_LENGTHS,
)
from racing_radar.proximity.overlap import OverlapBand, compute_overlap
from racing_radar.telemetry.models import CarState


class Side(str, Enum):
    LEFT = "left"
    RIGHT = "right"

    @property
    def sign(self) -> int:
        """Lateral sign of this side (left is negative)."""
        return -1 if self is Side.LEFT else 1


class DangerLevel(str, Enum):
    FAR = "far"
    CLOSE = "close"
    DANGER = "danger"


def danger_level_from_lateral(lateral_m: float) -> DangerLevel:
    """Classify a sideways gap: < 2.0 m danger, < 3.5 m close, else far."""
    lateral = abs(lateral_m)
    if lateral < DANGER_LATERAL_M:
        return DangerLevel.DANGER
    if lateral < CLOSE_LATERAL_M:
        return DangerLevel.CLOSE
    return DangerLevel.FAR


def side_score(car: CarState) -> float:
    """Ranking score; lower is more relevant.  Lateral offset counts double."""
    return abs(car.longitudinal_m) + 2 * abs(car.lateral_m)


@dataclass(frozen=True)
class SideSummary:
    """What the side indicator and audio need for one side."""

    side: Side
    car: CarState | None = None
    level: DangerLevel | None = None
    overlap: OverlapBand | None = None

    @property
    def occupied(self) -> bool:
        return self.car is not None


class ProximityClassifier:
    """Selects the most relevant neighbouring car on each side.

    A car qualifies for a side when its lateral offset has that side's sign,
    ``lateral_min_m <= |lateral| <= lateral_max_m`` and
    ``|longitudinal| <= 2.5`` car lengths.

    Args:
        lateral_min_m: Inner edge of the lateral detection band.
        lateral_max_m: Outer edge of the lateral detection band.
        car_length_m: Car length used for the longitudinal reach and overlap.
    """

    def __init__(
        self,
        lateral_min_m: float = SIDE_LATERAL_MIN_M,
        lateral_max_m: float = SIDE_LATERAL_MAX_M,
        car_length_m: float = CAR_LENGTH_M,
    ) -> None:
        if lateral_min_m > lateral_max_m:
            raise ValueError("lateral_min_m must be <= lateral_max_m")
        self.lateral_min_m = lateral_min_m
        self.lateral_max_m = lateral_max_m
        self.car_length_m = car_length_m
        self.longitudinal_max_m = car_length_m * SIDE_LONGITUDINAL_CAR_LENGTHS

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def qualifies(self, car: CarState, side: Side) -> bool:
        """True if *car* is alongside on *side*."""
        if car.lateral_m * side.sign <= 0:
            return False
        lateral = abs(car.lateral_m)
        if lateral < self.lateral_min_m or lateral > self.lateral_max_m:
            return False
        return abs(car.longitudinal_m) <= self.longitudinal_max_m

    def closest_car(self, cars: Iterable[CarState], side: Side) -> CarState | None:
        """Lowest-scoring qualifying car on *side*; ties keep input order."""
        candidates = [c for c in cars if self.qualifies(c, side)]
        if not candidates:
            return None
        return min(candidates, key=side_score)

    def summarize(self, cars: Iterable[CarState], side: Side) -> SideSummary:
        """Closest car on *side* with its danger level and overlap band."""
        car = self.closest_car(cars, side)
        if car is None:
            return SideSummary(side=side)
        return SideSummary(
            side=side,
            car=car,
            level=danger_level_from_lateral(car.lateral_m),
            overlap=compute_overlap(-car.longitudinal_m, self.car_length_m),
        )
