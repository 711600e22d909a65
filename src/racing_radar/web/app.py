"""FastAPI Web application — the tick pipeline as a stateless HTTP service."""

from __future__ import annotations

import dataclasses

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException

from racing_radar.config import RadarSettings, SideBarSettings, load_settings
from racing_radar.hotpath.engine import RadarEngine
from racing_radar.overlay.renderer import OverlayRenderer
from racing_radar.proximity.classifier import ProximityClassifier, Side
from racing_radar.radar.projector import RadarProjector
from racing_radar.telemetry.normalizer import TelemetryNormalizer
from racing_radar.track.registry import DEFAULT_REGISTRY
from racing_radar.web.schemas import (
    HealthResponse,
    RadarRequest,
    SideSchema,
    TickRequest,
    TickResponse,
    TickSchema,
    TrackSummary,
    TracksResponse,
)

load_dotenv()  # loads .env from project root; must run before settings are read

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

VERSION = "0.1.0"

app = FastAPI(title="Racing Radar", version=VERSION)

_settings = load_settings()
_normalizer = TelemetryNormalizer()
_projector = RadarProjector(DEFAULT_REGISTRY)
_renderer = OverlayRenderer()


def _classifier() -> ProximityClassifier:
    return ProximityClassifier(
        lateral_min_m=_settings.side_bars.lateral_min_m,
        lateral_max_m=_settings.side_bars.lateral_max_m,
    )


def _radar_settings(req: RadarRequest) -> RadarSettings:
    overrides = {
        name: getattr(req, name)
        for name in ("range_m", "size", "track_width_m", "show_track_edges", "show_grid_rings")
        if getattr(req, name) is not None
    }
    if req.car_size_scale is not None:
        overrides["car_size_scale"] = min(2.0, max(0.6, req.car_size_scale))
    return dataclasses.replace(_settings.radar, **overrides)


def _side_bar_settings(req: RadarRequest) -> SideBarSettings:
    if req.show_side_bars is None:
        return _settings.side_bars
    return dataclasses.replace(_settings.side_bars, show_side_bars=req.show_side_bars)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok", version=VERSION)


@app.get("/api/tracks", response_model=TracksResponse)
def list_tracks() -> TracksResponse:
    """Registered track ids (aliases included) with their layout size."""
    return TracksResponse(
        tracks=[
            TrackSummary(
                track_id=track_id,
                track_length_m=layout.track_length_m,
                points=len(layout.centerline),
            )
            for track_id, layout in sorted(DEFAULT_REGISTRY.items())
        ]
    )


@app.post("/api/tick", response_model=TickResponse)
def tick(req: TickRequest) -> TickResponse:
    """Normalize one raw sample and summarize both sides."""
    normalized = _normalizer.normalize(
        req.sample, now_ms=req.now_ms, track_length_hint_m=req.track_length_hint_m
    )
    classifier = _classifier()
    left = classifier.summarize(normalized.cars, Side.LEFT)
    right = classifier.summarize(normalized.cars, Side.RIGHT)
    return TickResponse(
        tick=TickSchema.model_validate(dataclasses.asdict(normalized)),
        left=SideSchema.model_validate(dataclasses.asdict(left)),
        right=SideSchema.model_validate(dataclasses.asdict(right)),
    )


@app.post("/api/radar")
def radar(req: RadarRequest) -> dict:
    """Normalize one raw sample and return the display-ready radar frame."""
    settings = _radar_settings(req)
    normalized = _normalizer.normalize(
        req.sample, now_ms=req.now_ms, track_length_hint_m=req.track_length_hint_m
    )
    engine = RadarEngine(
        classifier=_classifier(),
        projector=_projector,
        radar_settings=settings,
    )
    try:
        result = engine.process(normalized)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _renderer.render(result, settings, _side_bar_settings(req))
