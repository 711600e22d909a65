"""Lap-wrapped distance arithmetic and radar ring sizing.

Pure functions; no state.
"""

from __future__ import annotations

import math


def normalize_lap_fraction(pct: float) -> float:
    """Map any lap fraction into ``[0, 1)``; non-finite values become 0.0."""
    if not math.isfinite(pct):
        return 0.0
    pct = pct % 1.0
    # e.g. -1e-18 % 1.0 == 1.0
    return 0.0 if pct >= 1.0 else pct


def wrapped_distance_m(player_pct: float, other_pct: float, track_length_m: float) -> float:
    """Signed shortest distance around the loop from player to other car.

    Positive means the other car is ahead.  A separation of exactly half a lap
    resolves to ahead (``+0.5``) from one side and behind (``-0.5``) from the
    other; only deltas strictly beyond ±0.5 are folded.
    """
    delta = other_pct - player_pct
    if delta > 0.5:
        delta -= 1.0
    if delta < -0.5:
        delta += 1.0
    return delta * track_length_m


def lap_fraction_to_m(pct: float, track_length_m: float) -> float:
    """Distance from the start/finish line for a lap fraction."""
    return normalize_lap_fraction(pct) * track_length_m


def grid_ring_interval_m(range_m: float) -> float:
    """Spacing between radar grid rings for a visible range."""
    if range_m <= 50:
        return 10.0
    if range_m <= 100:
        return 25.0
    return 50.0


def grid_ring_radii_m(range_m: float) -> list[float]:
    """Ring radii strictly inside *range_m*."""
    interval = grid_ring_interval_m(range_m)
    radii: list[float] = []
    r = interval
    while r < range_m:
        radii.append(r)
        r += interval
    return radii


def danger_zone_radius_m(range_m: float) -> float:
    """Radius of the shaded zone around the player: ``min(15, 0.15 * range)``."""
    return min(15.0, range_m * 0.15)
