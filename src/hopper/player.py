# src/hopper/player.py
from __future__ import annotations
import math
from dataclasses import dataclass

from .config import SimConfig, DEFAULT_CONFIG


@dataclass
class Avatar:
    """
    The bouncing hopper.
    - vy > 0 means falling (screen y grows downward)
    - facing only changes while a direction is held, so the sprite keeps
      looking the way it last moved
    """
    x: float
    y: float
    vy: float = 0.0
    direction: int = 0            # -1 left, 0 idle, +1 right
    facing: int = 1               # -1 left, +1 right
    scrolled_distance: float = 0.0

    @classmethod
    def spawn(cls, config: SimConfig = DEFAULT_CONFIG) -> "Avatar":
        x, y = config.player_start
        return cls(x=float(x), y=float(y))

    @property
    def falling(self) -> bool:
        return self.vy > 0.0

    def set_direction(self, direction: int):
        assert direction in (-1, 0, 1), f"Invalid direction {direction}"
        self.direction = direction
        if direction != 0:
            self.facing = 1 if direction > 0 else -1

    def update_physics(self, fps: float, config: SimConfig = DEFAULT_CONFIG):
        """One tick of gravity, vertical and horizontal motion, then side wrap."""
        assert fps > 0, "fps must be > 0"
        self.vy += config.gravity
        self.y += self.vy / fps
        self.x += self.direction * config.speed / fps
        self.wrap_x(config)
        assert math.isfinite(self.x) and math.isfinite(self.y), "avatar left the number line"

    def wrap_x(self, config: SimConfig = DEFAULT_CONFIG):
        lo, hi = config.wrap_band
        span = hi - lo
        if self.x < lo:
            self.x += span
        elif self.x >= hi:
            self.x -= span

    def bounce(self, config: SimConfig = DEFAULT_CONFIG):
        self.vy = -config.jump_force
