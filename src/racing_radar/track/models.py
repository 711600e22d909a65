"""Track layout data structures."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

Point = tuple[float, float]
"""World ``(x, z)`` coordinates in metres."""


def cumulative_distances(centerline: Iterable[Point]) -> tuple[float, ...]:
    """Cumulative arc length at each centerline point, starting at 0.0."""
    dist: list[float] = []
    prev: Point | None = None
    for pt in centerline:
        if prev is None:
            dist.append(0.0)
        else:
            dist.append(dist[-1] + math.hypot(pt[0] - prev[0], pt[1] - prev[1]))
        prev = pt
    return tuple(dist)


@dataclass(frozen=True)
class TrackLayout:
    """A closed-loop track centerline with its cumulative-distance table.

    Layouts are built once and shared read-only between ticks.
    """

    track_id: str
    """Normalized track key (e.g. ``"charlotte"``)."""

    track_length_m: float
    """Effective lap length in metres."""

    centerline: tuple[Point, ...]
    """Centerline points; the first point is the start/finish line."""

    distances_m: tuple[float, ...]
    """Cumulative distance at each centerline point (same length, non-decreasing)."""

    def __post_init__(self) -> None:
        if len(self.distances_m) != len(self.centerline):
            raise ValueError(
                f"distance table has {len(self.distances_m)} entries for "
                f"{len(self.centerline)} centerline points"
            )
        for a, b in zip(self.distances_m, self.distances_m[1:]):
            if b < a:
                raise ValueError("distance table must be non-decreasing")

    @classmethod
    def from_centerline(
        cls,
        track_id: str,
        centerline: Iterable[Point],
        nominal_length_m: float = 0.0,
    ) -> TrackLayout:
        """Build a layout, computing the distance table from *centerline*.

        The effective length is the table's last entry; *nominal_length_m* is
        used only when the centerline has no length at all.
        """
        points = tuple((float(x), float(z)) for x, z in centerline)
        dist = cumulative_distances(points)
        total = dist[-1] if dist else 0.0
        return cls(
            track_id=track_id,
            track_length_m=total if total > 0 else float(nominal_length_m),
            centerline=points,
            distances_m=dist,
        )

    @property
    def total_distance_m(self) -> float:
        """Arc length covered by the distance table (0.0 when degenerate)."""
        return self.distances_m[-1] if self.distances_m else 0.0


@dataclass(frozen=True)
class TrackPose:
    """Interpolated position on the centerline."""

    x: float
    z: float
    heading: float
    """Radians, ``atan2(dx, dz)``: 0 faces +z, π/2 faces +x."""


@dataclass(frozen=True)
class TrackEdges:
    """Left/right boundary points and the centre point at one distance."""

    left: Point
    right: Point
    center: Point
