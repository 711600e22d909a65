"""Tests for RadarEngine."""

from __future__ import annotations

from unittest.mock import MagicMock

from racing_radar.config import RadarSettings
from racing_radar.hotpath.audio import NullAudioPlayer, ProximityAudio
from racing_radar.hotpath.engine import RadarEngine, TickResult
from racing_radar.hotpath.event_stream import TelemetryEvent
from racing_radar.proximity.classifier import DangerLevel, Side
from racing_radar.telemetry.models import CarState, ConnectionStatus, NormalizedTick


def _make_tick(cars=(), timestamp_ms: int = 10_000) -> NormalizedTick:
    return NormalizedTick(
        connection_status=ConnectionStatus.CONNECTED,
        cars=tuple(cars),
        timestamp_ms=timestamp_ms,
    )


def test_engine_plays_warning_for_car_alongside():
    """A car alongside on the left fires a danger pattern."""
    player = NullAudioPlayer()
    engine = RadarEngine(audio=ProximityAudio(player))
    result = engine.process(_make_tick([CarState.at(1, 0.5, -1.5)]))

    assert isinstance(result, TickResult)
    assert result.left.occupied and not result.right.occupied
    assert result.left.level is DangerLevel.DANGER
    assert result.beep is not None and result.beep.side is Side.LEFT
    assert result.beep.timestamp_ms == 10_000
    assert player.plays == [(1200, 70)] * 3


def test_engine_does_not_repeat_within_interval():
    player = NullAudioPlayer()
    engine = RadarEngine(audio=ProximityAudio(player))
    car = CarState.at(1, 0.0, 2.5)
    engine.process(_make_tick([car], 10_000))
    result = engine.process(_make_tick([car], 10_016))

    assert result.right.level is DangerLevel.CLOSE
    assert result.beep is None
    assert player.plays == [(880, 70)] * 2


def test_engine_reset_lets_same_side_fire_again():
    engine = RadarEngine()
    car = CarState.at(1, 0.0, 2.5)
    engine.process(_make_tick([car], 10_000))
    assert engine.process(_make_tick([car], 10_016)).beep is None

    engine.reset()
    result = engine.process(_make_tick([car], 10_032))
    assert result.beep is not None and result.beep.side is Side.RIGHT


def test_engine_projects_radar():
    engine = RadarEngine(radar_settings=RadarSettings(range_m=50, size=200))
    result = engine.process(_make_tick([CarState.at(1, 30.0, 0.0), CarState.at(2, -10.0, 7.0)]))

    assert result.radar.transform.scale == 2.0
    assert [b.car_idx for b in result.radar.blips] == [2, 1]
    assert result.beep is None


def test_engine_without_audio_still_reports_beep():
    engine = RadarEngine()
    result = engine.process(_make_tick([CarState.at(1, 0.0, 1.0)]))
    assert result.beep is not None


def test_engine_tick_reads_stream():
    tick = _make_tick([CarState.at(1, 0.0, -3.0)])
    stream = MagicMock()
    stream.get_event.return_value = TelemetryEvent(tick=tick, timestamp=0.0)

    engine = RadarEngine(stream)
    result = engine.tick()

    assert result.tick is tick
    assert result.left.occupied


def test_engine_no_result_when_no_event():
    """Engine.tick() returns None when the queue is empty."""
    stream = MagicMock()
    stream.get_event.return_value = None

    engine = RadarEngine(stream)
    assert engine.tick() is None


def test_engine_start_stop_delegate_to_stream():
    stream = MagicMock()
    engine = RadarEngine(stream)
    engine.start()
    engine.stop()
    stream.start.assert_called_once()
    stream.stop.assert_called_once()
