"""RadarProjector — player-relative positions → fixed-size radar coordinates.

The player sits at the centre of a square ``size × size`` output, facing up:
lateral offsets grow to the right (+x) and longitudinal offsets grow upwards
(-y).  The track outline comes from a registered layout when one matches the
session, otherwise from a straight corridor of the configured width.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from racing_radar.config import RadarSettings
from racing_radar.radar.metrics import danger_zone_radius_m, grid_ring_radii_m, lap_fraction_to_m
from racing_radar.telemetry.models import NormalizedTick
from racing_radar.track.geometry import edges_at_distance, position_at_distance
from racing_radar.track.models import TrackLayout, TrackPose
from racing_radar.track.registry import DEFAULT_REGISTRY, TrackRegistry

# Blips further than this outside the extent (output units) are dropped.
_VIEW_MARGIN = 20.0


@dataclass(frozen=True)
class RadarTransform:
    center_x: float
    center_y: float
    scale: float
    """Output units per metre."""

    range_m: float
    size: float


@dataclass(frozen=True)
class RadarPoint:
    x: float
    y: float


@dataclass(frozen=True)
class RadarBlip:
    """Another car on the radar."""

    car_idx: int
    car_number: str
    x: float
    y: float
    distance_m: float
    heading: float


@dataclass(frozen=True)
class TrackOutline:
    """Track edge and centre polylines in radar coordinates."""

    left: tuple[RadarPoint, ...]
    right: tuple[RadarPoint, ...]
    center: tuple[RadarPoint, ...]
    from_layout: bool
    """False when this is the straight-corridor approximation."""


@dataclass(frozen=True)
class RadarFrame:
    transform: RadarTransform
    blips: tuple[RadarBlip, ...]
    """Visible cars, nearest first."""

    outline: TrackOutline | None
    ring_radii: tuple[float, ...]
    """Grid ring radii in output units (empty when rings are hidden)."""

    danger_zone_radius: float
    """Danger zone radius in output units."""

    layout_id: str | None = None


def make_radar_transform(size: float, range_m: float) -> RadarTransform:
    """Transform mapping ``range_m`` metres to half of *size*."""
    if size <= 0 or range_m <= 0:
        raise ValueError("radar size and range must be positive")
    return RadarTransform(
        center_x=size / 2,
        center_y=size / 2,
        scale=size / (2 * range_m),
        range_m=range_m,
        size=size,
    )


def to_radar(longitudinal_m: float, lateral_m: float, t: RadarTransform) -> RadarPoint:
    """Player-relative offset → radar point (ahead is up, right is right)."""
    return RadarPoint(
        x=t.center_x + lateral_m * t.scale,
        y=t.center_y - longitudinal_m * t.scale,
    )


def world_to_player_relative(
    wx: float,
    wz: float,
    px: float,
    pz: float,
    heading: float,
) -> tuple[float, float]:
    """World ``(x, z)`` → ``(longitudinal, lateral)`` for a player at ``(px, pz)``.

    *heading* follows :class:`~racing_radar.track.models.TrackPose`
    (0 faces +z, π/2 faces +x); the offset is rotated by ``-heading``.
    """
    dx = wx - px
    dz = wz - pz
    sin_h = math.sin(heading)
    cos_h = math.cos(heading)
    longitudinal = dx * sin_h + dz * cos_h
    lateral = dx * cos_h - dz * sin_h
    return longitudinal, lateral


class RadarProjector:
    """Builds a :class:`RadarFrame` for each tick.

    Parameters
    ----------
    registry:
        Track layouts to draw outlines from; defaults to the built-in set.
    """

    def __init__(self, registry: TrackRegistry | None = None) -> None:
        self._registry = registry if registry is not None else DEFAULT_REGISTRY

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def project(self, tick: NormalizedTick, settings: RadarSettings | None = None) -> RadarFrame:
        """Project every car of *tick* (and the track outline) onto the radar."""
        settings = settings or RadarSettings()
        t = make_radar_transform(settings.size, settings.range_m)

        blips = []
        for car in sorted(tick.cars, key=lambda c: c.distance_m):
            pt = to_radar(car.longitudinal_m, car.lateral_m, t)
            if not (-_VIEW_MARGIN <= pt.x <= t.size + _VIEW_MARGIN):
                continue
            if not (-_VIEW_MARGIN <= pt.y <= t.size + _VIEW_MARGIN):
                continue
            blips.append(
                RadarBlip(car.car_idx, car.car_number, pt.x, pt.y, car.distance_m, car.heading)
            )

        located = self.locate_player(tick)
        outline = None
        if settings.show_track_edges:
            if located is not None:
                layout, pose = located
                outline = self.layout_outline(layout, pose, t, settings.track_width_m)
            else:
                outline = self.corridor_outline(t, settings.track_width_m)

        rings = grid_ring_radii_m(t.range_m) if settings.show_grid_rings else []
        return RadarFrame(
            transform=t,
            blips=tuple(blips),
            outline=outline,
            ring_radii=tuple(r * t.scale for r in rings),
            danger_zone_radius=danger_zone_radius_m(t.range_m) * t.scale,
            layout_id=located[0].track_id if located is not None else None,
        )

    def locate_player(self, tick: NormalizedTick) -> tuple[TrackLayout, TrackPose] | None:
        """Player's layout and world pose, or None without a known layout."""
        session = tick.session
        pct = tick.player.lap_dist_pct
        if session is None or not math.isfinite(pct):
            return None
        layout = self._registry.lookup(session.track_name)
        if layout is None:
            return None
        length_m = session.track_length_m or layout.track_length_m
        return layout, position_at_distance(layout, lap_fraction_to_m(pct, length_m))

    def layout_outline(
        self,
        layout: TrackLayout,
        pose: TrackPose,
        t: RadarTransform,
        track_width_m: float,
    ) -> TrackOutline:
        """Layout edges expressed around the player at *pose*."""
        half_width = track_width_m / 2
        left: list[RadarPoint] = []
        right: list[RadarPoint] = []
        center: list[RadarPoint] = []
        for d in layout.distances_m:
            edges = edges_at_distance(layout, d, half_width)
            for world, out in ((edges.left, left), (edges.right, right), (edges.center, center)):
                lon, lat = world_to_player_relative(world[0], world[1], pose.x, pose.z, pose.heading)
                out.append(to_radar(lon, lat, t))
        return TrackOutline(tuple(left), tuple(right), tuple(center), from_layout=True)

    def corridor_outline(self, t: RadarTransform, track_width_m: float) -> TrackOutline:
        """Straight strip of *track_width_m* through the player, top to bottom."""
        half = track_width_m / 2 * t.scale
        left_x = t.center_x - half
        right_x = t.center_x + half
        return TrackOutline(
            left=(RadarPoint(left_x, 0.0), RadarPoint(left_x, t.size)),
            right=(RadarPoint(right_x, 0.0), RadarPoint(right_x, t.size)),
            center=(RadarPoint(t.center_x, 0.0), RadarPoint(t.center_x, t.size)),
            from_layout=False,
        )
