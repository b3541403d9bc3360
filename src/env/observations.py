# src/env/observations.py
from __future__ import annotations
from typing import List, Sequence, Tuple
import numpy as np

from src.hopper.config import SimConfig, DEFAULT_CONFIG
from src.hopper.level import PlatformKind, PlatformView
from src.hopper.session import Snapshot

# How many platforms (closest in height) the agent sees
N_NEAREST = 5
PLATFORM_FEATS = 4
OBS_SIZE = 4 + N_NEAREST * PLATFORM_FEATS
# Sentinel for an empty slot: centered, far below, plain
EMPTY_SLOT: Tuple[float, float, float, float] = (0.0, 1.0, 0.0, 0.0)

OBS_LOW = np.array([0.0, 0.0, -1.0, 0.0] + [-1.0, -1.0, 0.0, 0.0] * N_NEAREST, dtype=np.float32)
OBS_HIGH = np.array([1.0, 1.0, 1.0, 1.0] + [1.0, 1.0, 1.0, 1.0] * N_NEAREST, dtype=np.float32)


def _clamp01(x: float) -> float:
    return 0.0 if x < 0.0 else (1.0 if x > 1.0 else x)

def _clamp11(x: float) -> float:
    return -1.0 if x < -1.0 else (1.0 if x > 1.0 else x)

def _nearest_platforms(snap: Snapshot, n: int) -> List[PlatformView]:
    """Platforms ordered by vertical distance to the avatar (ties: left to right)."""
    return sorted(snap.platforms, key=lambda p: (abs(p.y - snap.avatar_y), p.x))[:n]

def _platform_features(snap: Snapshot, p: PlatformView, config: SimConfig) -> List[float]:
    center_x = p.x + p.width / 2
    dx = _clamp11((center_x - snap.avatar_x) / config.width)
    dy = _clamp11((p.y - snap.avatar_y) / config.height)
    return [
        dx,
        dy,
        1.0 if p.kind is PlatformKind.MOVING else 0.0,
        1.0 if p.kind is PlatformKind.FRAGILE else 0.0,
    ]

def build_observation(snap: Snapshot, config: SimConfig = DEFAULT_CONFIG) -> np.ndarray:
    """
    Returns a fixed (24,) float32 vector:
      [ x_norm, y_norm, vy_norm, progress,
        dx, dy, is_moving, is_fragile   x 5 nearest platforms ]
    - x_norm uses the wrap band [-margin, width + margin]
    - vy_norm is vy / jump_force clipped to [-1, 1] (negative = rising)
    - dx/dy are offsets of the platform's top-center, scaled by screen size
    - empty slots hold (0, 1, 0, 0)
    """
    lo, hi = config.wrap_band
    feats: List[float] = [
        _clamp01((snap.avatar_x - lo) / (hi - lo)),
        _clamp01(snap.avatar_y / config.height),
        _clamp11(snap.avatar_vy / config.jump_force),
        _clamp01(snap.scrolled_distance / config.win_distance),
    ]

    nearest = _nearest_platforms(snap, N_NEAREST)
    for p in nearest:
        feats.extend(_platform_features(snap, p, config))
    for _ in range(N_NEAREST - len(nearest)):
        feats.extend(EMPTY_SLOT)

    return np.asarray(feats, dtype=np.float32)


def platform_slot(obs: np.ndarray, i: int) -> Sequence[float]:
    """(dx, dy, is_moving, is_fragile) of the i-th nearest platform."""
    b = 4 + PLATFORM_FEATS * i
    return obs[b:b + PLATFORM_FEATS]
