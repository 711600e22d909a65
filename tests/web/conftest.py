"""Shared fixtures for web tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from racing_radar.web.app import app


@pytest.fixture
def client():
    """FastAPI test client."""
    with TestClient(app) as c:
        yield c


def make_sample(
    lap_pcts: list[float] | None = None,
    car_left_right: int = 3,
    track_name: str = "charlotte",
    track_length: str = "1.0 km",
) -> dict:
    """Build a raw iRacing sample with the player at index 0."""
    pcts = lap_pcts if lap_pcts is not None else [0.5, 0.5005, 0.9]
    return {
        "telemetry": {
            "PlayerCarIdx": 0,
            "CarIdxLapDistPct": pcts,
            "CarIdxTrackSurface": [3] * len(pcts),
            "CarIdxPosition": list(range(1, len(pcts) + 1)),
            "CarIdxLap": [3] * len(pcts),
            "CarLeftRight": car_left_right,
            "Speed": 90.0,
            "Gear": 5,
        },
        "session": {
            "WeekendInfo": {
                "TrackName": track_name,
                "TrackDisplayName": track_name.title(),
                "TrackLength": track_length,
            },
            "SessionInfo": {"Sessions": [{"SessionType": "Race", "SessionLaps": "100"}]},
            "DriverInfo": {
                "Drivers": [
                    {"CarIdx": 0, "UserName": "Me", "CarNumber": "1"},
                    {"CarIdx": 1, "UserName": "Rival", "CarNumber": "24"},
                ]
            },
        },
    }
