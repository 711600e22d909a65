"""Lateral-offset estimation for other cars.

iRacing does not report where other cars are sideways.  The only hint is the
player's ``CarLeftRight`` spotter code, so lateral offsets are estimated and
the estimator is swappable for a richer source.
"""

from __future__ import annotations

from typing import Protocol

from racing_radar.constants import CarLeftRight

# Codes that say which side is occupied → fixed lateral offset (m).
_SIDE_OFFSETS_M: dict[int, float] = {
    CarLeftRight.CAR_LEFT: -2.0,
    CarLeftRight.CAR_RIGHT: 2.0,
    CarLeftRight.THREE_WIDE_LEFT: -3.0,
    CarLeftRight.THREE_WIDE_RIGHT: 3.0,
}


class LateralEstimator(Protocol):
    def estimate(self, car_idx: int, player_car_idx: int, car_left_right: int) -> float:
        """Return the estimated lateral offset (m, positive = right) of *car_idx*."""
        ...


class AlongsideLateralEstimator:
    """Estimate lateral offsets from the ``CarLeftRight`` code.

    Codes that name a side map to a fixed offset.  ``OFF``, ``CLEAR``,
    ``THREE_WIDE`` and unknown codes fall back to a spread based on index
    parity, ``(car_idx - player_car_idx) % 3 - 1`` → -1, 0 or +1 m.
    """

    def estimate(self, car_idx: int, player_car_idx: int, car_left_right: int) -> float:
        offset = _SIDE_OFFSETS_M.get(car_left_right)
        if offset is not None:
            return offset
        return float((car_idx - player_car_idx) % 3 - 1)
