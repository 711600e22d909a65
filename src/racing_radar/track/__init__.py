"""Track layouts: centerline tables, interpolation and the layout registry."""

from racing_radar.track.geometry import distances_along, edges_at_distance, position_at_distance
from racing_radar.track.models import TrackEdges, TrackLayout, TrackPose
from racing_radar.track.registry import DEFAULT_REGISTRY, TrackRegistry, normalize_track_id

__all__ = [
    "DEFAULT_REGISTRY",
    "TrackEdges",
    "TrackLayout",
    "TrackPose",
    "TrackRegistry",
    "distances_along",
    "edges_at_distance",
    "normalize_track_id",
    "position_at_distance",
]
