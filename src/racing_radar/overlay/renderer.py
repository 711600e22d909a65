"""Overlay rendering — display-ready data for the radar and side bars."""

from __future__ import annotations

from racing_radar.config import RadarSettings, SideBarSettings
from racing_radar.constants import RADAR_DANGER_DISTANCE_M, RADAR_WARNING_DISTANCE_M
from racing_radar.hotpath.engine import TickResult
from racing_radar.proximity.classifier import DangerLevel, SideSummary
from racing_radar.radar.projector import RadarPoint
from racing_radar.telemetry.models import ConnectionStatus

# Colour constants
_CAR_DANGER = "#ef4444"
_CAR_WARNING = "#f59e0b"
_CAR_FAR = "rgba(170,170,180,0.4)"

# Marker sizes in output units before car_size_scale
_CAR_MARKER_SIZE = 8.0
_PLAYER_MARKER_SIZE = 12.0

_SIDE_COLOURS: dict[DangerLevel, str] = {
    DangerLevel.FAR: "#d97706",
    DangerLevel.CLOSE: "#ea580c",
    DangerLevel.DANGER: "#dc2626",
}

_STATUS_TEXT: dict[ConnectionStatus, str] = {
    ConnectionStatus.CONNECTED: "● iRacing connected",
    ConnectionStatus.DISCONNECTED: "○ iRacing disconnected",
    ConnectionStatus.WAITING: "◐ Waiting for iRacing…",
    ConnectionStatus.CONNECTING: "◐ Connecting to iRacing…",
}


def _points(pts: tuple[RadarPoint, ...]) -> list[list[float]]:
    return [[round(p.x, 2), round(p.y, 2)] for p in pts]


class OverlayRenderer:
    """Formats a :class:`TickResult` for the overlay UI.

    All values are pure data transformations with no side effects, safe to
    call from any thread.
    """

    def car_colour(self, distance_m: float) -> str:
        """Blip colour by distance: red under 8 m, amber under 20 m, grey beyond."""
        if distance_m < RADAR_DANGER_DISTANCE_M:
            return _CAR_DANGER
        if distance_m < RADAR_WARNING_DISTANCE_M:
            return _CAR_WARNING
        return _CAR_FAR

    def car_opacity(self, distance_m: float, range_m: float) -> float:
        """Fade blips with distance, never below 0.3.

        Examples
        --------
        >>> OverlayRenderer().car_opacity(0.0, 100.0)
        1.0
        >>> OverlayRenderer().car_opacity(500.0, 100.0)
        0.3
        """
        return max(0.3, 1 - (distance_m / range_m) * 0.7)

    def status_text(self, status: ConnectionStatus) -> str:
        return _STATUS_TEXT[status]

    def side(self, summary: SideSummary) -> dict | None:
        """Side bar fill, or None when nothing is alongside."""
        if summary.car is None or summary.overlap is None:
            return None
        return {
            "top": summary.overlap.top,
            "height": summary.overlap.height,
            "level": summary.level.value,
            "colour": _SIDE_COLOURS[summary.level],
            "pulse": summary.level is DangerLevel.DANGER,
        }

    def render(
        self,
        result: TickResult,
        settings: RadarSettings | None = None,
        side_bars: SideBarSettings | None = None,
    ) -> dict:
        """Return a display-ready dict from a :class:`TickResult`.

        Side bars are always filled when *side_bars* is None; otherwise they
        follow ``side_bars.show_side_bars``.

        Returns
        -------
        dict with keys:
            ``status``        – connection status text
            ``opacity``       – overall opacity 0.0–1.0
            ``size``          – radar extent in output units
            ``player_size``   – player marker size
            ``cars``          – blips with position, colour, opacity, size, label
            ``track``         – outline polylines (or None)
            ``rings``         – grid ring radii
            ``danger_zone``   – danger zone radius
            ``left``/``right`` – side bar fills (or None)
        """
        settings = settings or RadarSettings()
        show_sides = side_bars is None or side_bars.show_side_bars
        radar = result.radar
        range_m = radar.transform.range_m
        car_size = round(_CAR_MARKER_SIZE * settings.car_size_scale, 2)

        cars = [
            {
                "car_idx": blip.car_idx,
                "x": round(blip.x, 2),
                "y": round(blip.y, 2),
                "heading": blip.heading,
                "colour": self.car_colour(blip.distance_m),
                "opacity": round(self.car_opacity(blip.distance_m, range_m), 3),
                "size": car_size,
                "label": blip.car_number if settings.show_car_numbers else None,
            }
            for blip in radar.blips
        ]

        track = None
        if radar.outline is not None:
            track = {
                "left": _points(radar.outline.left),
                "right": _points(radar.outline.right),
                "center": _points(radar.outline.center),
                "from_layout": radar.outline.from_layout,
            }

        return {
            "status": self.status_text(result.tick.connection_status),
            "opacity": settings.opacity / 100,
            "size": radar.transform.size,
            "player_size": round(_PLAYER_MARKER_SIZE * settings.car_size_scale, 2),
            "cars": cars,
            "track": track,
            "rings": list(radar.ring_radii),
            "danger_zone": radar.danger_zone_radius,
            "left": self.side(result.left) if show_sides else None,
            "right": self.side(result.right) if show_sides else None,
        }
