"""Built-in track layouts and the immutable name → layout registry.

iRacing reports track names such as ``"charlotte"`` or
``"Charlotte Motor Speedway"``; :func:`normalize_track_id` folds both onto the
same key.  Layouts are generated once at import time and never mutated.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterator, Mapping
from types import MappingProxyType

from racing_radar.track.models import Point, TrackLayout

_WHITESPACE_RE = re.compile(r"\s+")
_INVALID_RE = re.compile(r"[^a-z0-9_]")


def normalize_track_id(name: str) -> str:
    """Lowercase *name*, turn whitespace runs into ``_`` and drop anything else."""
    return _INVALID_RE.sub("", _WHITESPACE_RE.sub("_", name.lower()))


# ---------------------------------------------------------------------------
# Layout generators
# ---------------------------------------------------------------------------

def _ellipse(a: float, b: float, n_points: int) -> list[Point]:
    """Closed ellipse with semi-axes *a*, *b*; the start point is repeated at the end."""
    pts = [
        (a * math.cos(2 * math.pi * i / n_points), b * math.sin(2 * math.pi * i / n_points))
        for i in range(n_points)
    ]
    pts.append(pts[0])
    return pts


def _road_course(straight: float = 400.0, half_width: float = 200.0) -> list[Point]:
    """Rectangle: long straight, short side, back straight, short side."""
    pts: list[Point] = []
    for i in range(21):
        pts.append((-straight + i / 20 * straight * 2, -half_width))
    for i in range(1, 16):
        pts.append((straight, -half_width + i / 15 * half_width * 2))
    for i in range(1, 21):
        pts.append((straight - i / 20 * straight * 2, half_width))
    for i in range(1, 15):
        pts.append((-straight, half_width - i / 14 * half_width * 2))
    return pts


def _builtin_layouts() -> dict[str, TrackLayout]:
    charlotte = TrackLayout.from_centerline("charlotte", _ellipse(280, 180, 80), 1500)
    texas = TrackLayout.from_centerline("texas", _ellipse(260, 200, 72), 2300)
    indy = TrackLayout.from_centerline("indianapolis", _ellipse(320, 130, 64), 2500)
    road = TrackLayout.from_centerline("roadcourse", _road_course(), 4000)
    return {
        "charlotte": charlotte,
        "charlotte_motor_speedway": charlotte,
        "texas": texas,
        "texas_motor_speedway": texas,
        "indianapolis": indy,
        "indianapolis_motor_speedway": indy,
        "roadcourse": road,
    }


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class TrackRegistry(Mapping[str, TrackLayout]):
    """Read-only mapping of normalized track id → :class:`TrackLayout`.

    Args:
        layouts: Initial table.  Keys are normalized on construction; the
            table is copied, so later changes to *layouts* have no effect.
    """

    def __init__(self, layouts: Mapping[str, TrackLayout]) -> None:
        self._layouts = MappingProxyType(
            {normalize_track_id(k): v for k, v in layouts.items()}
        )

    @classmethod
    def builtin(cls) -> TrackRegistry:
        """Registry holding the bundled oval and road-course layouts."""
        return cls(_builtin_layouts())

    def __getitem__(self, track_id: str) -> TrackLayout:
        return self._layouts[track_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._layouts)

    def __len__(self) -> int:
        return len(self._layouts)

    def lookup(self, track_name: str) -> TrackLayout | None:
        """Return the layout for a raw session track name, or None if unknown."""
        if not track_name:
            return None
        return self._layouts.get(normalize_track_id(track_name))


DEFAULT_REGISTRY = TrackRegistry.builtin()
