"""Proximity audio — beep patterns per danger level, winsound or null output."""

from __future__ import annotations

import logging
import sys
import threading
import time
from dataclasses import dataclass

from racing_radar.hotpath.cadence import BeepEvent
from racing_radar.proximity.classifier import DangerLevel

_logger = logging.getLogger(__name__)


@dataclass
class AudioConfig:
    """Frequency and timing settings for proximity beeps."""

    far_freq: int = 660      # Hz, single low beep
    close_freq: int = 880    # Hz, double beep
    danger_freq: int = 1200  # Hz, rapid triple beep
    duration_ms: int = 70
    close_gap_ms: int = 50
    danger_gap_ms: int = 10


class NullAudioPlayer:
    """No-op player; records calls for test assertions."""

    def __init__(self) -> None:
        self.plays: list[tuple[int, int]] = []

    def play(self, freq: int, duration_ms: int) -> None:
        self.plays.append((freq, duration_ms))

    def play_pattern(self, freq: int, duration_ms: int, count: int, gap_ms: int) -> None:
        for _ in range(count):
            self.play(freq, duration_ms)


class WinsoundPlayer:
    """Plays beeps via winsound.Beep in a daemon thread (non-blocking)."""

    def play(self, freq: int, duration_ms: int) -> None:
        self.play_pattern(freq, duration_ms, 1, 0)

    def play_pattern(self, freq: int, duration_ms: int, count: int, gap_ms: int) -> None:
        if sys.platform != "win32":
            return
        threading.Thread(
            target=self._run_pattern, args=(freq, duration_ms, count, gap_ms), daemon=True
        ).start()

    @staticmethod
    def _run_pattern(freq: int, duration_ms: int, count: int, gap_ms: int) -> None:
        import winsound

        try:
            for i in range(count):
                if i:
                    time.sleep(gap_ms / 1000.0)
                winsound.Beep(freq, duration_ms)
        except RuntimeError as exc:
            _logger.warning("winsound beep failed: %s", exc)


class ProximityAudio:
    """Turns :class:`BeepEvent` objects into beep patterns.

    far = one low beep, close = two mid beeps, danger = three rapid high beeps.

    Parameters
    ----------
    player:
        Object with ``play_pattern(freq, duration_ms, count, gap_ms)``,
        :class:`WinsoundPlayer` or :class:`NullAudioPlayer`.
    config:
        Frequencies and timings.
    enabled:
        When False, :meth:`play` does nothing.
    volume:
        0-100; 0 mutes.  winsound has no volume control, so only muting is
        honoured by :class:`WinsoundPlayer`.
    """

    def __init__(
        self,
        player,
        config: AudioConfig | None = None,
        enabled: bool = True,
        volume: int = 50,
    ) -> None:
        self._player = player
        self._cfg = config or AudioConfig()
        self.enabled = enabled
        self.volume = volume

    def pattern(self, level: DangerLevel) -> tuple[int, int, int, int]:
        """``(freq, duration_ms, count, gap_ms)`` for *level*."""
        cfg = self._cfg
        if level is DangerLevel.DANGER:
            return cfg.danger_freq, cfg.duration_ms, 3, cfg.danger_gap_ms
        if level is DangerLevel.CLOSE:
            return cfg.close_freq, cfg.duration_ms, 2, cfg.close_gap_ms
        return cfg.far_freq, cfg.duration_ms, 1, 0

    def play(self, event: BeepEvent) -> bool:
        """Play the pattern for *event*; returns False when muted or disabled."""
        if not self.enabled or self.volume <= 0:
            return False
        self._player.play_pattern(*self.pattern(event.level))
        return True
