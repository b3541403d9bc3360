# src/hopper/config.py
from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Tuple

# --- Display ---
WIDTH = 600
HEIGHT = 800
FPS = 60

# --- Physics (velocity in px/s, gravity added once per tick) ---
GRAVITY = 20.0              # added to vy every tick
JUMP_FORCE = 900.0          # vy becomes -JUMP_FORCE on bounce
SPEED = 400.0               # horizontal px/s
WRAP_MARGIN = 30.0          # avatar wraps around [-30, WIDTH + 30)

# --- Goal ---
WIN_DISTANCE = 15000.0
FINISH_LINE_START_Y = -14650.0

# --- Avatar ---
PLAYER_START = (300.0, 700.0)
PLAYER_W = 40               # drawn size only, collision is point-based
PLAYER_H = 60

# --- Difficulty ---
MIN_GAP_START = 80.0
MIN_GAP_GROWTH = 100.0      # min gap: 80 -> 180
MAX_GAP_START = 120.0
MAX_FEASIBLE_GAP = 325.0    # highest reachable gap, tuned by hand
MIN_GAP_SPREAD = 20.0       # keeps max_gap - min_gap >= 20
MIN_PLATFORMS_START = 7
MIN_PLATFORMS_END = 4

# --- Platforms ---
PLATFORM_W = 100
PLATFORM_H = 20
MOVING_SPEED_RANGE = (1.0, 2.0)     # px per tick, sampled once
PLACEMENT_ATTEMPTS = 20
PLACEMENT_CLEARANCE = 80.0          # ~ avatar jump footprint
POPULATE_START_OFFSET = 200.0       # first reference y = HEIGHT + 200
POPULATE_TOP_Y = -2000.0
STARTER_OFFSET = (-50.0, 40.0)      # starter platform relative to the avatar

# Kind tiers: (distance threshold, (common, moving, fragile))
KIND_TIERS = (
    (0.0,    (0.50, 0.30, 0.20)),
    (2500.0, (0.25, 0.40, 0.35)),
    (7500.0, (0.00, 0.50, 0.50)),
)

# --- Collision tolerances ---
HIT_MARGIN_LEFT = 30.0
HIT_MARGIN_TOP = 2.0

SEED_DEFAULT = 12345

# --- Colors (RGB) ---
COLOR_BG = (250, 248, 239)
COLOR_FG = (20, 20, 20)
COLOR_GRID = (232, 228, 214)
COLOR_PLAYER = (214, 190, 60)
COLOR_COMMON = (92, 184, 92)
COLOR_MOVING = (66, 139, 202)
COLOR_FRAGILE = (245, 245, 245)
COLOR_OUTLINE = (60, 60, 60)
COLOR_FINISH = (30, 30, 30)
COLOR_WIN = (40, 167, 69)
COLOR_DANGER = (230, 57, 70)
COLOR_PANEL = (255, 255, 255)


@dataclass(frozen=True)
class SimConfig:
    """
    Every tunable constant of the simulation in one injectable bundle.
    Defaults are the shipped game tuning; tests build variants with
    dataclasses.replace().
    """
    width: float = WIDTH
    height: float = HEIGHT
    fps: int = FPS

    gravity: float = GRAVITY
    jump_force: float = JUMP_FORCE
    speed: float = SPEED
    wrap_margin: float = WRAP_MARGIN

    win_distance: float = WIN_DISTANCE
    finish_line_start_y: float = FINISH_LINE_START_Y
    player_start: Tuple[float, float] = PLAYER_START

    min_gap_start: float = MIN_GAP_START
    min_gap_growth: float = MIN_GAP_GROWTH
    max_gap_start: float = MAX_GAP_START
    max_feasible_gap: float = MAX_FEASIBLE_GAP
    min_gap_spread: float = MIN_GAP_SPREAD
    min_platforms_start: int = MIN_PLATFORMS_START
    min_platforms_end: int = MIN_PLATFORMS_END

    platform_w: float = PLATFORM_W
    platform_h: float = PLATFORM_H
    moving_speed_range: Tuple[float, float] = MOVING_SPEED_RANGE
    placement_attempts: int = PLACEMENT_ATTEMPTS
    placement_clearance: float = PLACEMENT_CLEARANCE
    populate_start_offset: float = POPULATE_START_OFFSET
    populate_top_y: float = POPULATE_TOP_Y
    starter_offset: Tuple[float, float] = STARTER_OFFSET
    kind_tiers: Tuple[Tuple[float, Tuple[float, float, float]], ...] = field(default=KIND_TIERS)

    hit_margin_left: float = HIT_MARGIN_LEFT
    hit_margin_top: float = HIT_MARGIN_TOP

    def __post_init__(self):
        if self.width <= self.platform_w:
            raise ValueError(f"width ({self.width}) must exceed platform_w ({self.platform_w})")
        if self.height <= 0 or self.fps <= 0:
            raise ValueError("height and fps must be positive")
        if self.win_distance <= 0:
            raise ValueError("win_distance must be positive")
        if self.placement_attempts < 1:
            raise ValueError("placement_attempts must be >= 1")
        if self.max_gap_start < self.min_gap_spread:
            raise ValueError("max_gap_start must be >= min_gap_spread")
        if self.min_platforms_end > self.min_platforms_start:
            raise ValueError("min_platforms_end must not exceed min_platforms_start")
        lo, hi = self.moving_speed_range
        if not (0 < lo <= hi):
            raise ValueError(f"bad moving_speed_range {self.moving_speed_range}")
        if not self.kind_tiers or self.kind_tiers[0][0] != 0.0:
            raise ValueError("kind_tiers must start at distance 0")
        thresholds = [t for t, _ in self.kind_tiers]
        if any(a >= b for a, b in zip(thresholds, thresholds[1:])):
            raise ValueError(f"kind_tiers thresholds must increase: {thresholds}")
        for threshold, rates in self.kind_tiers:
            if not math.isclose(sum(rates), 1.0, abs_tol=1e-9):
                raise ValueError(f"kind rates at {threshold} do not sum to 1: {rates}")

    @property
    def wrap_band(self) -> Tuple[float, float]:
        return -self.wrap_margin, self.width + self.wrap_margin


DEFAULT_CONFIG = SimConfig()
