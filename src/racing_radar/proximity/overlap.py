"""Side-indicator overlap geometry.

Both cars are rigid intervals of one car length centred on their reference
points.  The indicator axis runs from the player's front (0.0) to its rear
(1.0), so the input distance is measured rearwards: positive when the other
car is behind the player.
"""

from __future__ import annotations

from dataclasses import dataclass

from racing_radar.constants import CAR_LENGTH_M, SIDE_GAP_CAR_LENGTHS

_SLIVER_BASE = 0.06
_SLIVER_GROWTH = 0.06
_SLIVER_TOP_BEHIND = 0.88
_SLIVER_TOP_AHEAD = 0.04
_EPS = 1e-9


@dataclass(frozen=True)
class OverlapBand:
    """Filled region of a linear side indicator, as fractions of its length."""

    top: float
    """0 = front of the player car, 1 = rear."""

    height: float


def compute_overlap(rel_dist_m: float, car_length_m: float = CAR_LENGTH_M) -> OverlapBand | None:
    """Where a neighbouring car overlaps the player along the car length.

    Parameters
    ----------
    rel_dist_m:
        Rearward distance from the player to the other car (positive =
        behind).  Callers holding an "ahead is positive" longitudinal
        distance pass its negation.
    car_length_m:
        Length of both cars.

    Returns
    -------
    OverlapBand | None
        The overlapping band; a thin sliver pinned near the close edge when
        the cars do not overlap but the gap is under 1.5 car lengths; None
        when the gap is at or beyond that limit.
    """
    half = car_length_m / 2
    player_front, player_rear = -half, half
    other_front, other_rear = rel_dist_m - half, rel_dist_m + half

    overlap_start = max(other_front, player_front)
    overlap_end = min(other_rear, player_rear)
    if overlap_end - overlap_start > 0:
        return OverlapBand(
            top=(overlap_start + half) / car_length_m,
            height=(overlap_end - overlap_start) / car_length_m,
        )

    behind = rel_dist_m > 0
    gap = other_front - player_rear if behind else player_front - other_rear
    max_gap = car_length_m * SIDE_GAP_CAR_LENGTHS
    if gap >= max_gap - _EPS:
        return None

    proximity = 1 - gap / max_gap
    return OverlapBand(
        top=_SLIVER_TOP_BEHIND if behind else _SLIVER_TOP_AHEAD,
        height=_SLIVER_BASE + proximity * _SLIVER_GROWTH,
    )
