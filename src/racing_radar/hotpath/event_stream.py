"""TelemetryEventStream — 60 Hz polling loop with drop-oldest overflow handling."""

from __future__ import annotations

import contextlib
import logging
import queue
import threading
import time
from dataclasses import dataclass

from racing_radar.telemetry.models import ConnectionStatus, NormalizedTick

_logger = logging.getLogger(__name__)


@dataclass
class TelemetryEvent:
    """A normalized tick with a monotonic timestamp."""

    tick: NormalizedTick
    timestamp: float  # time.monotonic() seconds


class TelemetryEventStream:
    """Polls a connection+normalizer pair at *target_hz* and enqueues :class:`TelemetryEvent`.

    Every poll produces an event: when the connection has no sample the
    normalizer's placeholder tick is enqueued, carrying the connection's
    status.  When the internal queue is full the *oldest* event is discarded
    so that the consumer always sees the most recent telemetry.

    Parameters
    ----------
    connection:
        Object with ``read_sample() -> dict | None`` and a ``status``
        attribute (:class:`ConnectionStatus`).
    normalizer:
        Object with ``normalize(raw, now_ms=..., track_length_hint_m=...)``
        and ``placeholder(now_ms, status)``.
    target_hz:
        Polling frequency in Hz.
    queue_maxsize:
        Maximum number of events buffered before drop-oldest kicks in.
    """

    def __init__(
        self,
        connection,
        normalizer,
        target_hz: float = 60.0,
        queue_maxsize: int = 120,
    ) -> None:
        self._conn = connection
        self._normalizer = normalizer
        self._interval = 1.0 / target_hz
        self._queue: queue.Queue[TelemetryEvent] = queue.Queue(maxsize=queue_maxsize)
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._track_length_hint_m: float | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the background polling thread."""
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, daemon=True, name="TelemetryStream")
        self._thread.start()

    def stop(self) -> None:
        """Signal the polling thread to stop and join it."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=2.0)
            self._thread = None

    def get_event(self, timeout: float = 0.1) -> TelemetryEvent | None:
        """Return the next queued event, or None if none arrives within *timeout* s."""
        try:
            if timeout <= 0:
                return self._queue.get_nowait()
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def queue_size(self) -> int:
        """Return the current number of buffered events."""
        return self._queue.qsize()

    def poll_once(self) -> TelemetryEvent:
        """Read, normalize and enqueue one sample; returns the enqueued event."""
        t0 = time.monotonic()
        now_ms = int(time.time() * 1000)
        raw = self._conn.read_sample()
        if raw:
            tick = self._normalizer.normalize(
                raw, now_ms=now_ms, track_length_hint_m=self._track_length_hint_m
            )
            if tick.connection_status is ConnectionStatus.CONNECTED and tick.session is not None:
                self._track_length_hint_m = tick.session.track_length_m
        else:
            status = getattr(self._conn, "status", ConnectionStatus.DISCONNECTED)
            tick = self._normalizer.placeholder(now_ms, status)
        event = TelemetryEvent(tick=tick, timestamp=t0)
        self._enqueue(event)
        return event

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _run(self) -> None:
        while not self._stop_event.is_set():
            t0 = time.monotonic()
            try:
                self.poll_once()
            except Exception:
                _logger.exception("Telemetry poll failed")
            elapsed = time.monotonic() - t0
            wait = self._interval - elapsed
            if wait > 0:
                self._stop_event.wait(wait)

    def _enqueue(self, event: TelemetryEvent) -> None:
        """Put *event* in the queue; drop oldest if full."""
        try:
            self._queue.put_nowait(event)
        except queue.Full:
            with contextlib.suppress(queue.Empty):
                self._queue.get_nowait()
            with contextlib.suppress(queue.Full):
                self._queue.put_nowait(event)
