"""Side proximity: nearest car per side, danger levels and overlap bands."""

from racing_radar.proximity.classifier import (
    DangerLevel,
    ProximityClassifier,
    Side,
    SideSummary,
    danger_level_from_lateral,
)
from racing_radar.proximity.overlap import OverlapBand, compute_overlap

__all__ = [
    "DangerLevel",
    "OverlapBand",
    "ProximityClassifier",
    "Side",
    "SideSummary",
    "compute_overlap",
    "danger_level_from_lateral",
]
