"""Tests for TelemetryEventStream."""

from __future__ import annotations

import time
from unittest.mock import MagicMock

from racing_radar.hotpath.event_stream import TelemetryEvent, TelemetryEventStream
from racing_radar.telemetry.models import ConnectionStatus, NormalizedTick, SessionInfo
from racing_radar.telemetry.normalizer import TelemetryNormalizer


def _make_tick(track_length_m: float = 1000.0) -> NormalizedTick:
    return NormalizedTick(
        connection_status=ConnectionStatus.CONNECTED,
        session=SessionInfo(track_name="charlotte", track_length_m=track_length_m),
    )


def test_event_stream_delivers_event():
    """Events posted by connection+normalizer reach get_event()."""
    tick = _make_tick()
    conn = MagicMock()
    conn.read_sample.return_value = {"telemetry": {}, "session": {}}
    normalizer = MagicMock()
    normalizer.normalize.return_value = tick

    stream = TelemetryEventStream(conn, normalizer, target_hz=200, queue_maxsize=10)
    stream.start()
    event = stream.get_event(timeout=1.0)
    stream.stop()

    assert isinstance(event, TelemetryEvent)
    assert event.tick is tick


def test_placeholder_enqueued_when_connection_returns_none():
    """No sample still yields an event, carrying the connection status."""
    conn = MagicMock()
    conn.read_sample.return_value = None
    conn.status = ConnectionStatus.WAITING

    stream = TelemetryEventStream(conn, TelemetryNormalizer(), target_hz=10, queue_maxsize=10)
    event = stream.poll_once()

    assert event.tick.connection_status is ConnectionStatus.WAITING
    assert len(event.tick.cars) == 3
    assert stream.get_event(timeout=0) is event


def test_track_length_hint_carried_between_samples():
    conn = MagicMock()
    conn.read_sample.return_value = {"telemetry": {}, "session": {}}
    normalizer = MagicMock()
    normalizer.normalize.return_value = _make_tick(2345.0)

    stream = TelemetryEventStream(conn, normalizer)
    stream.poll_once()
    stream.poll_once()

    first, second = normalizer.normalize.call_args_list
    assert first.kwargs["track_length_hint_m"] is None
    assert second.kwargs["track_length_hint_m"] == 2345.0


def test_get_event_none_when_empty():
    stream = TelemetryEventStream(MagicMock(), MagicMock())
    assert stream.get_event(timeout=0) is None
    assert stream.get_event(timeout=0.01) is None


def test_event_stream_start_stop_no_exception():
    """start()/stop() complete without raising."""
    conn = MagicMock()
    conn.read_sample.return_value = None
    conn.status = ConnectionStatus.DISCONNECTED

    stream = TelemetryEventStream(conn, TelemetryNormalizer(), target_hz=10)
    stream.start()
    stream.stop()  # should not raise


def test_poll_errors_do_not_kill_loop():
    calls = []

    def read_sample():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("boom")
        return None

    conn = MagicMock()
    conn.read_sample.side_effect = read_sample
    conn.status = ConnectionStatus.DISCONNECTED

    stream = TelemetryEventStream(conn, TelemetryNormalizer(), target_hz=200, queue_maxsize=10)
    stream.start()
    event = stream.get_event(timeout=1.0)
    stream.stop()

    assert event is not None


def test_event_stream_drop_oldest_when_full():
    """Queue size never exceeds maxsize even under rapid production."""
    conn = MagicMock()
    conn.read_sample.return_value = None
    conn.status = ConnectionStatus.DISCONNECTED

    stream = TelemetryEventStream(conn, TelemetryNormalizer(), target_hz=1000, queue_maxsize=3)
    stream.start()
    time.sleep(0.05)  # let producer run briefly
    stream.stop()

    assert stream.queue_size() <= 3


def test_drop_oldest_keeps_newest():
    conn = MagicMock()
    conn.read_sample.return_value = None
    conn.status = ConnectionStatus.DISCONNECTED

    stream = TelemetryEventStream(conn, TelemetryNormalizer(), queue_maxsize=2)
    events = [stream.poll_once() for _ in range(4)]

    assert stream.queue_size() == 2
    assert stream.get_event(timeout=0) is events[2]
    assert stream.get_event(timeout=0) is events[3]
