"""Radar geometry: lap-wrapped metrics and projection into radar space."""

from racing_radar.radar.metrics import (
    danger_zone_radius_m,
    grid_ring_interval_m,
    lap_fraction_to_m,
    normalize_lap_fraction,
    wrapped_distance_m,
)

__all__ = [
    "danger_zone_radius_m",
    "grid_ring_interval_m",
    "lap_fraction_to_m",
    "normalize_lap_fraction",
    "wrapped_distance_m",
]
