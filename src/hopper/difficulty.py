# src/hopper/difficulty.py
from __future__ import annotations
import math
from dataclasses import dataclass

from .config import SimConfig, DEFAULT_CONFIG


@dataclass(frozen=True)
class Difficulty:
    min_gap: float
    max_gap: float
    min_platform_count: int


def difficulty_ratio(distance: float, config: SimConfig = DEFAULT_CONFIG) -> float:
    """Progress through the ramp, saturating at 1 once the win distance is reached."""
    assert math.isfinite(distance) and distance >= 0.0, f"invalid distance {distance}"
    return min(1.0, distance / config.win_distance)


def compute_difficulty(distance: float, config: SimConfig = DEFAULT_CONFIG) -> Difficulty:
    ratio = difficulty_ratio(distance, config)

    min_gap = config.min_gap_start + config.min_gap_growth * ratio
    max_gap = config.max_gap_start + (config.max_feasible_gap - config.max_gap_start) * ratio
    if min_gap > max_gap - config.min_gap_spread:
        min_gap = max_gap - config.min_gap_spread

    span = config.min_platforms_start - config.min_platforms_end
    count = config.min_platforms_start - math.floor(span * ratio)
    return Difficulty(min_gap=min_gap, max_gap=max_gap, min_platform_count=int(count))
