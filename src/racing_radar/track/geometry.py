"""Interpolation along a :class:`TrackLayout` centerline.

Distances wrap modulo the layout's total length, so any real number (including
negative values and values beyond one lap) maps onto the loop.  Tables hold a
few dozen points, so the bracketing segment is found with a linear scan.
"""

from __future__ import annotations

import math

from racing_radar.track.models import (
    Point,
    TrackEdges,
    TrackLayout,
    TrackPose,
    cumulative_distances,
)


def distances_along(layout: TrackLayout) -> tuple[float, ...]:
    """Cumulative arc-length table for the layout's centerline (first entry 0.0)."""
    return cumulative_distances(layout.centerline)


def _wrap(distance_m: float, total: float) -> float:
    d = math.fmod(distance_m, total)
    if d < 0:
        d += total
    # fmod of a tiny negative can round up to exactly total
    if d >= total:
        d = 0.0
    return d


def position_at_distance(layout: TrackLayout, distance_m: float) -> TrackPose:
    """Return the centerline position and heading *distance_m* along the lap."""
    pts = layout.centerline
    dist = layout.distances_m
    if not pts:
        return TrackPose(0.0, 0.0, 0.0)
    total = layout.total_distance_m
    if len(pts) < 2 or total <= 0 or not math.isfinite(distance_m):
        return TrackPose(pts[0][0], pts[0][1], 0.0)

    d = _wrap(distance_m, total)
    i = 0
    while i < len(dist) - 1 and dist[i + 1] <= d:
        i += 1
    i1 = min(i + 1, len(pts) - 1)

    seg_len = dist[i1] - dist[i]
    t = (d - dist[i]) / seg_len if seg_len > 0 else 0.0
    dx = pts[i1][0] - pts[i][0]
    dz = pts[i1][1] - pts[i][1]
    return TrackPose(
        x=pts[i][0] + t * dx,
        z=pts[i][1] + t * dz,
        heading=math.atan2(dx, dz),
    )


def _normal_left(dx: float, dz: float) -> Point:
    length = math.hypot(dx, dz) or 1.0
    return (-dz / length, dx / length)


def edges_at_distance(layout: TrackLayout, distance_m: float, half_width_m: float) -> TrackEdges:
    """Track boundary points *half_width_m* either side of the centerline."""
    pose = position_at_distance(layout, distance_m)
    nx, nz = _normal_left(math.sin(pose.heading), math.cos(pose.heading))
    return TrackEdges(
        left=(pose.x + nx * half_width_m, pose.z + nz * half_width_m),
        right=(pose.x - nx * half_width_m, pose.z - nz * half_width_m),
        center=(pose.x, pose.z),
    )
