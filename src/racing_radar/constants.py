"""Numeric constants shared by the telemetry, proximity and radar layers."""

from __future__ import annotations

from enum import IntEnum

CAR_LENGTH_M = 4.8

# Lateral band (m) in which a car counts as alongside for the side indicators.
SIDE_LATERAL_MIN_M = 0.3
SIDE_LATERAL_MAX_M = 6.0

# Longitudinal reach of the side indicators, in car lengths.
SIDE_LONGITUDINAL_CAR_LENGTHS = 2.5

# Gap (car lengths) beyond which a non-overlapping car shows no indicator.
SIDE_GAP_CAR_LENGTHS = 1.5

# Danger-level thresholds on |lateral| (m).
DANGER_LATERAL_M = 2.0
CLOSE_LATERAL_M = 3.5

# Radar blip colour thresholds on euclidean distance (m).
RADAR_DANGER_DISTANCE_M = 8.0
RADAR_WARNING_DISTANCE_M = 20.0

TRACK_LENGTH_DEFAULT_M = 4000.0

BEEP_MIN_INTERVAL_MS = 800


class CarLeftRight(IntEnum):
    """iRacing ``CarLeftRight`` spotter codes."""

    OFF = 0
    CLEAR = 1
    CAR_LEFT = 2
    CAR_RIGHT = 3
    THREE_WIDE = 4
    THREE_WIDE_LEFT = 5
    THREE_WIDE_RIGHT = 6
