"""Telemetry acquisition and normalization.

Public API
----------
NormalizedTick          - one normalized tick (player + other cars + session)
TelemetryNormalizer     - raw iRacing sample → NormalizedTick
AlongsideLateralEstimator - CarLeftRight-based lateral offsets
LiveTelemetryConnection - connects to iRacing shared memory
"""

from racing_radar.telemetry.connection import LiveTelemetryConnection
from racing_radar.telemetry.lateral import AlongsideLateralEstimator, LateralEstimator
from racing_radar.telemetry.models import (
    CarState,
    ConnectionStatus,
    DriverInfo,
    NormalizedTick,
    PlayerState,
    SessionInfo,
)
from racing_radar.telemetry.normalizer import (
    TelemetryNormalizer,
    parse_track_length_m,
    placeholder_tick,
)

__all__ = [
    "AlongsideLateralEstimator",
    "CarState",
    "ConnectionStatus",
    "DriverInfo",
    "LateralEstimator",
    "LiveTelemetryConnection",
    "NormalizedTick",
    "PlayerState",
    "SessionInfo",
    "TelemetryNormalizer",
    "parse_track_length_m",
    "placeholder_tick",
]
