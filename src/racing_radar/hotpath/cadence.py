"""Beep cadence — when a side warning should (re)fire.

The cadence state is a small immutable value passed in and returned updated
by :func:`advance_cadence`; :class:`ProximityAlerter` is the one place that
holds it across ticks.
"""

from __future__ import annotations

from dataclasses import dataclass

from racing_radar.constants import BEEP_MIN_INTERVAL_MS
from racing_radar.proximity.classifier import DangerLevel, Side, SideSummary


@dataclass(frozen=True)
class BeepCadence:
    """Which side last beeped and when (epoch ms)."""

    last_side: Side | None = None
    last_beep_ms: int = 0


@dataclass(frozen=True)
class BeepEvent:
    side: Side
    level: DangerLevel
    timestamp_ms: int


def advance_cadence(
    cadence: BeepCadence,
    left: SideSummary,
    right: SideSummary,
    now_ms: int,
    interval_ms: int = BEEP_MIN_INTERVAL_MS,
) -> tuple[BeepCadence, BeepEvent | None]:
    """Decide whether this tick fires a warning.

    Left is checked before right.  An occupied side fires when it differs
    from ``last_side`` or when *interval_ms* has elapsed since the last
    warning.  When neither side is occupied ``last_side`` resets, so the next
    car alongside fires straight away.
    """
    elapsed = now_ms - cadence.last_beep_ms
    for summary in (left, right):
        if not summary.occupied:
            continue
        if summary.side is not cadence.last_side or elapsed >= interval_ms:
            event = BeepEvent(side=summary.side, level=summary.level, timestamp_ms=now_ms)
            return BeepCadence(summary.side, now_ms), event

    if not left.occupied and not right.occupied:
        return BeepCadence(None, cadence.last_beep_ms), None
    return cadence, None


class ProximityAlerter:
    """Owns the cadence state between ticks.

    Parameters
    ----------
    interval_ms:
        Minimum spacing between warnings while the same side stays occupied.
    """

    def __init__(self, interval_ms: int = BEEP_MIN_INTERVAL_MS) -> None:
        self._interval_ms = interval_ms
        self._cadence = BeepCadence()

    @property
    def cadence(self) -> BeepCadence:
        return self._cadence

    def check(self, left: SideSummary, right: SideSummary, now_ms: int) -> BeepEvent | None:
        """Advance the cadence by one tick and return the event to play, if any."""
        self._cadence, event = advance_cadence(
            self._cadence, left, right, now_ms, self._interval_ms
        )
        return event

    def reset(self) -> None:
        self._cadence = BeepCadence()
