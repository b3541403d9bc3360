# src/hopper/session.py
"""
One run of the game, advanced one fixed tick at a time.

The session is the only thing that mutates the avatar, the platform field
and the finish line. Each tick returns an immutable Snapshot that renderers,
agents and tests can read without touching live state.

Usage:
    session = GameplaySession(seed=123)
    session.set_direction(1)
    snap = session.tick()
    if snap.state is not TerminalState.PLAYING:
        print(session.report.final_score)
"""
from __future__ import annotations
import logging
import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Tuple

from .collision import BounceResult, resolve_bounce
from .config import SimConfig, DEFAULT_CONFIG
from .difficulty import Difficulty, compute_difficulty
from .level import PlatformField, PlatformView
from .player import Avatar
from .scroll import FinishLine, apply_scroll

logger = logging.getLogger(__name__)


class TerminalState(str, Enum):
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


@dataclass(frozen=True)
class Snapshot:
    avatar_x: float
    avatar_y: float
    avatar_vy: float
    facing: int
    direction: int
    platforms: Tuple[PlatformView, ...]
    scrolled_distance: float
    finish_line_y: float
    state: TerminalState
    difficulty: Difficulty
    tick: int

    @property
    def score(self) -> int:
        return int(math.floor(self.scrolled_distance))


@dataclass(frozen=True)
class ScoreReport:
    final_score: int
    won: bool


class GameObserver(Protocol):
    def on_game_over(self, report: ScoreReport) -> None: ...


class GameplaySession:
    def __init__(self,
                 seed: Optional[int] = None,
                 config: SimConfig = DEFAULT_CONFIG,
                 rng: Optional[random.Random] = None,
                 observer: Optional[GameObserver] = None):
        if rng is None:
            if seed is None:
                seed = random.randrange(0, 2**32 - 1)
            rng = random.Random(seed)
        self.seed = seed
        self.rng = rng
        self.config = config
        self.observer = observer

        self.avatar = Avatar.spawn(config)
        self.field = PlatformField(rng, config)
        self.field.populate(self.avatar.x, self.avatar.y)
        self.finish_line = FinishLine(config.finish_line_start_y)

        self.state = TerminalState.PLAYING
        self.difficulty = compute_difficulty(0.0, config)
        self.ticks = 0
        self.last_bounce = BounceResult()
        self.report: Optional[ScoreReport] = None

    @property
    def playing(self) -> bool:
        return self.state is TerminalState.PLAYING

    def set_direction(self, direction: int):
        """Input hook: -1 left, 0 idle, +1 right. Takes effect on the next tick."""
        self.avatar.set_direction(direction)

    def tick(self, fps: Optional[float] = None) -> Snapshot:
        if not self.playing:
            return self.snapshot()

        cfg = self.config
        fps = cfg.fps if fps is None else fps
        assert fps > 0, "fps must be > 0"
        self.last_bounce = BounceResult()

        self.difficulty = compute_difficulty(self.avatar.scrolled_distance, cfg)
        self.avatar.update_physics(fps, cfg)
        self.ticks += 1

        if self.avatar.scrolled_distance >= cfg.win_distance:
            self._finish(TerminalState.WON)
            return self.snapshot()
        if self.avatar.y > cfg.height:
            self._finish(TerminalState.LOST)
            return self.snapshot()

        apply_scroll(self.avatar, self.field, self.finish_line, cfg.height)
        self.last_bounce = resolve_bounce(self.avatar, self.field, cfg)

        recycled, added = self.field.maintain(self.difficulty, self.avatar.scrolled_distance)
        if recycled or added:
            logger.debug("tick %d: recycled=%d added=%d platforms=%d",
                         self.ticks, recycled, added, len(self.field))
        return self.snapshot()

    def snapshot(self) -> Snapshot:
        a = self.avatar
        return Snapshot(
            avatar_x=a.x,
            avatar_y=a.y,
            avatar_vy=a.vy,
            facing=a.facing,
            direction=a.direction,
            platforms=self.field.views(),
            scrolled_distance=a.scrolled_distance,
            finish_line_y=self.finish_line.y,
            state=self.state,
            difficulty=self.difficulty,
            tick=self.ticks,
        )

    def _finish(self, state: TerminalState):
        self.state = state
        self.report = ScoreReport(
            final_score=int(math.floor(self.avatar.scrolled_distance)),
            won=(state is TerminalState.WON),
        )
        logger.info("Run over after %d ticks: %s (score %d, seed %s)",
                    self.ticks, state.value, self.report.final_score, self.seed)
        if self.observer is not None:
            self.observer.on_game_over(self.report)
