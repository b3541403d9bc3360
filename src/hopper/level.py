# src/hopper/level.py
from __future__ import annotations
import random
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple

from .config import SimConfig, DEFAULT_CONFIG
from .difficulty import Difficulty, compute_difficulty


class PlatformKind(str, Enum):
    COMMON = "common"     # static, safe
    MOVING = "moving"     # patrols left/right
    FRAGILE = "fragile"   # gone after one bounce


@dataclass
class Platform:
    x: float
    y: float
    width: float
    height: float
    kind: PlatformKind = PlatformKind.COMMON
    speed: float = 0.0      # px per tick, MOVING only
    direction: int = 1      # -1 left, +1 right

    @property
    def is_moving(self) -> bool:
        return self.kind is PlatformKind.MOVING

    def update_movement(self, field_width: float):
        """Slide a moving platform and bounce it off the field edges."""
        if not self.is_moving:
            return
        self.x += self.speed * self.direction
        if self.x < 0:
            self.x = 0.0
            self.direction *= -1
        elif self.x + self.width > field_width:
            self.x = field_width - self.width
            self.direction *= -1

    def view(self) -> "PlatformView":
        return PlatformView(self.x, self.y, self.width, self.height, self.kind)


@dataclass(frozen=True)
class PlatformView:
    """Read-only copy handed to renderers and observers."""
    x: float
    y: float
    width: float
    height: float
    kind: PlatformKind


class PlatformField:
    """
    Owns the live platforms of a run.
    Platforms that fall below the screen are recycled above the highest one,
    and the field is topped up whenever it drops under the difficulty's
    minimum count (fragile platforms break, so the set can shrink).
    """
    def __init__(self, rng: random.Random, config: SimConfig = DEFAULT_CONFIG):
        self.rng = rng
        self.config = config
        self._platforms: List[Platform] = []
        self._created = 0   # first platform ever created is forced COMMON

    # ---------- container helpers ----------

    def __len__(self) -> int:
        return len(self._platforms)

    def __iter__(self) -> Iterator[Platform]:
        return iter(self._platforms)

    def __contains__(self, platform: Platform) -> bool:
        return any(p is platform for p in self._platforms)

    @property
    def platforms(self) -> Tuple[Platform, ...]:
        return tuple(self._platforms)

    def add(self, platform: Platform) -> Platform:
        self._platforms.append(platform)
        self._created += 1
        return platform

    def remove_all(self, doomed: Sequence[Platform]):
        doomed_ids = {id(p) for p in doomed}
        self._platforms = [p for p in self._platforms if id(p) not in doomed_ids]

    def clear(self):
        self._platforms = []

    def shift(self, dy: float):
        for p in self._platforms:
            p.y += dy

    def top_y(self) -> Optional[float]:
        return min((p.y for p in self._platforms), default=None)

    def views(self) -> Tuple[PlatformView, ...]:
        return tuple(p.view() for p in self._platforms)

    # ---------- generation ----------

    def populate(self, avatar_x: float, avatar_y: float):
        """Fill the initial column of platforms, plus a starter under the avatar."""
        cfg = self.config
        difficulty = compute_difficulty(0.0, cfg)
        reference_y = cfg.height + cfg.populate_start_offset
        while reference_y > cfg.populate_top_y:
            platform = self.add(self.generate(reference_y, difficulty, distance=0.0))
            reference_y = platform.y

        dx, dy = cfg.starter_offset
        self.add(Platform(
            x=avatar_x + dx,
            y=avatar_y + dy,
            width=cfg.platform_w,
            height=cfg.platform_h,
            kind=PlatformKind.COMMON,
        ))

    def sample_gap(self, difficulty: Difficulty) -> float:
        return difficulty.min_gap + self.rng.random() * (difficulty.max_gap - difficulty.min_gap)

    def generate(self, reference_y: float, difficulty: Difficulty, distance: float = 0.0) -> Platform:
        """Build (but do not add) a platform one sampled gap above reference_y."""
        cfg = self.config
        y = reference_y - self.sample_gap(difficulty)
        x = self.place_non_overlapping(y, self._platforms, cfg.platform_w)
        kind = PlatformKind.COMMON if self._created == 0 else self.choose_kind(distance)
        return Platform(
            x=x, y=y,
            width=cfg.platform_w, height=cfg.platform_h,
            kind=kind,
            speed=self._roll_speed(kind),
            direction=1,
        )

    def place_non_overlapping(self, y: float, existing: Sequence[Platform], width: float) -> float:
        """
        Random x that keeps a jump-sized clearance from platforms at a similar height.
        After the attempt budget is spent, the last candidate is used as-is.
        """
        cfg = self.config
        clearance = cfg.placement_clearance
        x = 0.0
        for _ in range(cfg.placement_attempts):
            x = self.rng.random() * (cfg.width - width)
            crowded = any(
                abs(p.y - y) < clearance and abs(p.x - x) < clearance
                for p in existing
            )
            if not crowded:
                return x
        return x

    def choose_kind(self, distance: float) -> PlatformKind:
        rates = self.config.kind_tiers[0][1]
        for threshold, tier_rates in self.config.kind_tiers:
            if distance >= threshold:
                rates = tier_rates
        _, moving, fragile = rates

        u = self.rng.random()
        if u < moving:
            return PlatformKind.MOVING
        if u < moving + fragile:
            return PlatformKind.FRAGILE
        return PlatformKind.COMMON

    def _roll_speed(self, kind: PlatformKind) -> float:
        if kind is not PlatformKind.MOVING:
            return 0.0
        lo, hi = self.config.moving_speed_range
        return lo + self.rng.random() * (hi - lo)

    # ---------- per-tick maintenance ----------

    def advance_moving(self):
        for p in self._platforms:
            p.update_movement(self.config.width)

    def recycle(self, platform: Platform, difficulty: Difficulty, distance: float):
        """Move a platform that left the screen to the top of the column and re-roll it."""
        others = [p for p in self._platforms if p is not platform]
        reference_y = min((p.y for p in others), default=platform.y)

        platform.y = reference_y - self.sample_gap(difficulty)
        platform.x = self.place_non_overlapping(platform.y, others, platform.width)
        platform.kind = self.choose_kind(distance)
        platform.speed = self._roll_speed(platform.kind)
        platform.direction = 1

    def recycle_fallen(self, difficulty: Difficulty, distance: float) -> int:
        recycled = 0
        for p in self._platforms:
            if p.y > self.config.height:
                self.recycle(p, difficulty, distance)
                recycled += 1
        return recycled

    def replenish(self, difficulty: Difficulty, distance: float) -> int:
        added = 0
        while len(self._platforms) < difficulty.min_platform_count:
            top = self.top_y()
            reference_y = self.config.height if top is None else top
            self.add(self.generate(reference_y, difficulty, distance))
            added += 1
        return added

    def maintain(self, difficulty: Difficulty, distance: float) -> Tuple[int, int]:
        """Returns (recycled, added)."""
        # whole-field passes: recycling sees every platform already moved this tick
        self.advance_moving()
        recycled = self.recycle_fallen(difficulty, distance)
        added = self.replenish(difficulty, distance)
        return recycled, added
