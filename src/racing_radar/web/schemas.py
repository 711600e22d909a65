"""Pydantic request/response schemas for the Web API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from racing_radar.proximity.classifier import DangerLevel, Side
from racing_radar.telemetry.models import ConnectionStatus


class HealthResponse(BaseModel):
    status: str
    version: str


class TrackSummary(BaseModel):
    track_id: str
    track_length_m: float
    points: int


class TracksResponse(BaseModel):
    tracks: list[TrackSummary]


class TickRequest(BaseModel):
    sample: dict[str, Any] | None = None
    now_ms: int | None = None
    track_length_hint_m: float | None = None


class RadarRequest(TickRequest):
    range_m: float | None = None
    size: float | None = None
    track_width_m: float | None = None
    show_track_edges: bool | None = None
    show_grid_rings: bool | None = None
    show_side_bars: bool | None = None
    car_size_scale: float | None = None


class CarSchema(BaseModel):
    car_idx: int
    longitudinal_m: float
    lateral_m: float
    distance_m: float
    car_number: str
    position: int
    track_surface: int
    lap: int
    heading: float


class PlayerSchema(BaseModel):
    speed: float
    rpm: float
    gear: int
    throttle: float
    brake: float
    clutch: float
    steering_angle: float
    lap_best_lap_time: float
    lap_last_lap_time: float
    lap_delta_to_best_lap: float
    lap_current_lap_time: float
    position: int
    player_car_idx: int
    fuel_level: float
    fuel_use_per_hour: float
    lap_dist_pct: float
    car_left_right: int


class DriverSchema(BaseModel):
    car_idx: int
    user_name: str
    car_number: str
    car_class_id: int
    irating: int


class SessionSchema(BaseModel):
    track_name: str
    track_display_name: str
    track_length_m: float
    session_type: str
    session_laps: int
    drivers: list[DriverSchema]


class TickSchema(BaseModel):
    connection_status: ConnectionStatus
    player: PlayerSchema
    cars: list[CarSchema]
    session: SessionSchema | None
    timestamp_ms: int


class OverlapSchema(BaseModel):
    top: float
    height: float


class SideSchema(BaseModel):
    side: Side
    car: CarSchema | None
    level: DangerLevel | None
    overlap: OverlapSchema | None


class TickResponse(BaseModel):
    tick: TickSchema
    left: SideSchema
    right: SideSchema
