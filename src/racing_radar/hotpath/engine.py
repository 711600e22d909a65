"""RadarEngine — runs one logical tick: sides, beep cadence, audio, radar."""

from __future__ import annotations

from dataclasses import dataclass

from racing_radar.config import RadarSettings
from racing_radar.hotpath.cadence import BeepEvent, ProximityAlerter
from racing_radar.proximity.classifier import ProximityClassifier, Side, SideSummary
from racing_radar.radar.projector import RadarFrame, RadarProjector
from racing_radar.telemetry.models import NormalizedTick


@dataclass(frozen=True)
class TickResult:
    """Everything the render and audio collaborators need for one tick."""

    tick: NormalizedTick
    left: SideSummary
    right: SideSummary
    radar: RadarFrame
    beep: BeepEvent | None = None


class RadarEngine:
    """Integrates the event stream, proximity classification, audio and radar.

    Parameters
    ----------
    stream:
        A :class:`~racing_radar.hotpath.event_stream.TelemetryEventStream`
        (only needed for :meth:`start`, :meth:`stop` and :meth:`tick`).
    classifier:
        A :class:`~racing_radar.proximity.classifier.ProximityClassifier`.
    projector:
        A :class:`~racing_radar.radar.projector.RadarProjector`.
    alerter:
        A :class:`~racing_radar.hotpath.cadence.ProximityAlerter`; owns the
        only cross-tick state.
    audio:
        Object with ``play(event)`` such as
        :class:`~racing_radar.hotpath.audio.ProximityAudio`, or None for silence.
    radar_settings:
        Radar extent and drawing options.
    """

    def __init__(
        self,
        stream=None,
        classifier: ProximityClassifier | None = None,
        projector: RadarProjector | None = None,
        alerter: ProximityAlerter | None = None,
        audio=None,
        radar_settings: RadarSettings | None = None,
    ) -> None:
        self._stream = stream
        self._classifier = classifier or ProximityClassifier()
        self._projector = projector or RadarProjector()
        self._alerter = alerter or ProximityAlerter()
        self._audio = audio
        self._radar_settings = radar_settings or RadarSettings()

    def start(self) -> None:
        """Start the underlying telemetry stream."""
        self._stream.start()

    def stop(self) -> None:
        """Stop the underlying telemetry stream."""
        self._stream.stop()

    def reset(self) -> None:
        """Forget warning history, e.g. after the sim reconnects."""
        self._alerter.reset()

    def tick(self) -> TickResult | None:
        """Process one event from the queue (None if no event was available)."""
        event = self._stream.get_event(timeout=0.0)
        if event is None:
            return None
        return self.process(event.tick)

    def process(self, tick: NormalizedTick) -> TickResult:
        """Classify, alert and project a single tick."""
        left = self._classifier.summarize(tick.cars, Side.LEFT)
        right = self._classifier.summarize(tick.cars, Side.RIGHT)

        beep = self._alerter.check(left, right, tick.timestamp_ms)
        if beep is not None and self._audio is not None:
            self._audio.play(beep)

        return TickResult(
            tick=tick,
            left=left,
            right=right,
            radar=self._projector.project(tick, self._radar_settings),
            beep=beep,
        )
