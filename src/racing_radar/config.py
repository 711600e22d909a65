"""Runtime settings for the radar, side bars and proximity audio.

Values come from ``RACING_RADAR_*`` environment variables (entry points call
``dotenv.load_dotenv()`` first, so a ``.env`` file works too).  Missing or
malformed values fall back to the defaults below.
"""

from __future__ import annotations

import logging
import math
import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from racing_radar.constants import SIDE_LATERAL_MAX_M, SIDE_LATERAL_MIN_M

_logger = logging.getLogger(__name__)

_PREFIX = "RACING_RADAR_"
_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


@dataclass
class RadarSettings:
    """Radar extent and what to draw on it."""

    range_m: float = 100.0
    """Visible range from the player to the radar edge (m)."""

    size: float = 280.0
    """Output extent in abstract units (pixels for a canvas renderer)."""

    track_width_m: float = 20.0
    show_track_edges: bool = True
    show_grid_rings: bool = True
    opacity: int = 92
    """Overall opacity 0-100."""

    show_car_numbers: bool = True
    car_size_scale: float = 1.0
    """Multiplier for car marker size, 0.6-2.0."""


@dataclass
class SideBarSettings:
    """Side indicator detection band."""

    lateral_min_m: float = SIDE_LATERAL_MIN_M
    lateral_max_m: float = SIDE_LATERAL_MAX_M
    show_side_bars: bool = False


@dataclass
class AudioSettings:
    proximity_audio: bool = True
    volume: int = 50  # 0-100


@dataclass
class AppSettings:
    radar: RadarSettings = field(default_factory=RadarSettings)
    side_bars: SideBarSettings = field(default_factory=SideBarSettings)
    audio: AudioSettings = field(default_factory=AudioSettings)


def _get_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        value = math.nan
    if not math.isfinite(value):
        _logger.warning("Ignoring %s%s=%r (not a number)", _PREFIX, name, raw)
        return default
    return value


def _get_int(env: Mapping[str, str], name: str, default: int) -> int:
    return int(round(_get_float(env, name, float(default))))


def _get_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(_PREFIX + name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    _logger.warning("Ignoring %s%s=%r (not a boolean)", _PREFIX, name, raw)
    return default


def load_settings(env: Mapping[str, str] | None = None) -> AppSettings:
    """Build :class:`AppSettings` from *env* (defaults to ``os.environ``)."""
    if env is None:
        env = os.environ

    radar_defaults = RadarSettings()
    radar = RadarSettings(
        range_m=_get_float(env, "RANGE_M", radar_defaults.range_m),
        size=_get_float(env, "SIZE", radar_defaults.size),
        track_width_m=_get_float(env, "TRACK_WIDTH_M", radar_defaults.track_width_m),
        show_track_edges=_get_bool(env, "SHOW_TRACK_EDGES", radar_defaults.show_track_edges),
        show_grid_rings=_get_bool(env, "SHOW_GRID_RINGS", radar_defaults.show_grid_rings),
        opacity=min(100, max(0, _get_int(env, "OPACITY", radar_defaults.opacity))),
        show_car_numbers=_get_bool(env, "SHOW_CAR_NUMBERS", radar_defaults.show_car_numbers),
        car_size_scale=min(
            2.0, max(0.6, _get_float(env, "CAR_SIZE_SCALE", radar_defaults.car_size_scale))
        ),
    )
    if radar.range_m <= 0 or radar.size <= 0:
        _logger.warning("Non-positive radar range/size in environment; using defaults")
        radar.range_m = radar_defaults.range_m
        radar.size = radar_defaults.size

    side_defaults = SideBarSettings()
    side_bars = SideBarSettings(
        lateral_min_m=_get_float(env, "SIDE_LATERAL_MIN_M", side_defaults.lateral_min_m),
        lateral_max_m=_get_float(env, "SIDE_LATERAL_MAX_M", side_defaults.lateral_max_m),
        show_side_bars=_get_bool(env, "SHOW_SIDE_BARS", side_defaults.show_side_bars),
    )
    if side_bars.lateral_min_m > side_bars.lateral_max_m:
        _logger.warning("Side lateral band is inverted; using defaults")
        side_bars.lateral_min_m = side_defaults.lateral_min_m
        side_bars.lateral_max_m = side_defaults.lateral_max_m

    audio_defaults = AudioSettings()
    audio = AudioSettings(
        proximity_audio=_get_bool(env, "PROXIMITY_AUDIO", audio_defaults.proximity_audio),
        volume=min(100, max(0, _get_int(env, "VOLUME", audio_defaults.volume))),
    )

    return AppSettings(radar=radar, side_bars=side_bars, audio=audio)
