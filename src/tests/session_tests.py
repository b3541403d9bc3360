# src/tests/session_tests.py
"""
GameplaySession scenarios: bounce, scroll, win, loss, wrap, determinism.

Usage (from repo root):
  python -m src.tests.session_tests
"""
from __future__ import annotations
import random
from dataclasses import replace
from typing import List

import pytest

from src.hopper.config import DEFAULT_CONFIG, PLATFORM_W, PLATFORM_H
from src.hopper.difficulty import compute_difficulty
from src.hopper.level import Platform, PlatformField, PlatformKind
from src.hopper.collision import is_hit
from src.hopper.player import Avatar
from src.hopper.scroll import FinishLine, apply_scroll
from src.hopper.session import GameplaySession, ScoreReport, TerminalState

# No replenishment: lets a scenario control exactly which platforms exist
SPARSE = replace(DEFAULT_CONFIG, min_platforms_start=0, min_platforms_end=0)


class RecordingObserver:
    def __init__(self):
        self.reports: List[ScoreReport] = []

    def on_game_over(self, report: ScoreReport):
        self.reports.append(report)


def empty_session(seed: int = 1, **avatar) -> GameplaySession:
    session = GameplaySession(seed=seed, config=SPARSE)
    session.field.clear()
    for k, v in avatar.items():
        setattr(session.avatar, k, v)
    return session


def platform_under(session: GameplaySession, kind: PlatformKind) -> Platform:
    a = session.avatar
    return session.field.add(Platform(x=a.x - 50, y=a.y - 5, width=PLATFORM_W, height=PLATFORM_H, kind=kind))


def test_fragile_platform_breaks_on_bounce():
    session = empty_session(x=300.0, y=500.0, vy=100.0)
    fragile = platform_under(session, PlatformKind.FRAGILE)

    snap = session.tick()
    assert session.avatar.vy == -900.0
    assert fragile not in session.field
    assert snap.platforms == ()
    assert session.last_bounce.bounced and session.last_bounce.removed_fragile


def test_common_platform_survives_bounce():
    session = empty_session(x=300.0, y=500.0, vy=100.0)
    common = platform_under(session, PlatformKind.COMMON)

    snap = session.tick()
    assert session.avatar.vy == -900.0
    assert common in session.field
    assert len(snap.platforms) == 1 and snap.platforms[0].y == common.y
    assert session.last_bounce.bounced and not session.last_bounce.removed_fragile


def test_rising_avatar_passes_through():
    session = empty_session(x=300.0, y=500.0, vy=-500.0)
    platform_under(session, PlatformKind.FRAGILE)
    session.tick()
    assert session.avatar.vy == -480.0
    assert len(session.field) == 1
    assert not session.last_bounce.bounced


def test_overlapping_platforms_newest_wins():
    session = empty_session(x=300.0, y=500.0, vy=100.0)
    common = session.field.add(Platform(x=250.0, y=495.0, width=PLATFORM_W, height=PLATFORM_H,
                                        kind=PlatformKind.COMMON))
    fragile = session.field.add(Platform(x=260.0, y=498.0, width=PLATFORM_W, height=PLATFORM_H,
                                         kind=PlatformKind.FRAGILE))

    session.tick()
    assert session.avatar.vy == -900.0
    assert session.last_bounce.platform is fragile
    assert fragile not in session.field
    assert common in session.field


def test_hit_band_edges_are_inclusive():
    plat = Platform(x=200.0, y=400.0, width=PLATFORM_W, height=PLATFORM_H)
    for x, y in ((170.0, 410.0), (300.0, 410.0), (250.0, 398.0), (250.0, 420.0)):
        assert is_hit(Avatar(x=x, y=y, vy=1.0), plat), f"edge ({x}, {y}) missed"
    for x, y in ((169.9, 410.0), (300.1, 410.0), (250.0, 397.9), (250.0, 420.1)):
        assert not is_hit(Avatar(x=x, y=y, vy=1.0), plat), f"({x}, {y}) should miss"
    assert not is_hit(Avatar(x=250.0, y=410.0, vy=0.0), plat)


def test_terminal_tick_clears_bounce():
    session = empty_session(x=300.0, y=500.0, vy=100.0)
    platform_under(session, PlatformKind.COMMON)
    session.tick()
    assert session.last_bounce.bounced

    session.avatar.scrolled_distance = 15000.0
    snap = session.tick()
    assert snap.state is TerminalState.WON
    assert not session.last_bounce.bounced


def test_starts_on_starter_platform():
    session = GameplaySession(seed=9)
    starter = session.field.platforms[-1]
    session.field.remove_all([p for p in session.field if p is not starter])

    for _ in range(20):
        session.tick()
        if session.last_bounce.bounced:
            break
    assert session.last_bounce.platform is starter
    assert session.ticks == 15


def test_scroll_pins_avatar_to_midline():
    field = PlatformField(random.Random(0))
    plat = field.add(Platform(x=0.0, y=100.0, width=PLATFORM_W, height=PLATFORM_H))
    finish = FinishLine(-14650.0)
    avatar = Avatar(x=300.0, y=300.0)

    dy = apply_scroll(avatar, field, finish, 800.0)
    assert dy == 100.0
    assert avatar.y == 400.0 and plat.y == 200.0
    assert finish.y == -14550.0 and avatar.scrolled_distance == 100.0

    avatar.y = 450.0
    assert apply_scroll(avatar, field, finish, 800.0) == 0.0
    assert plat.y == 200.0 and avatar.scrolled_distance == 100.0


def test_win_is_sticky():
    observer = RecordingObserver()
    session = GameplaySession(seed=3, observer=observer)
    session.avatar.scrolled_distance = 14999.9
    session.avatar.y = 400.0
    session.avatar.vy = -900.0

    snap = session.tick()
    assert snap.state is TerminalState.PLAYING
    assert snap.scrolled_distance > 15000.0

    snap = session.tick()
    assert snap.state is TerminalState.WON
    assert observer.reports == [ScoreReport(final_score=int(snap.scrolled_distance), won=True)]

    frozen = session.tick()
    assert frozen == snap
    session.tick()
    assert len(observer.reports) == 1
    assert session.report.won and session.report.final_score == 15014


def test_free_fall_is_lost_and_sticky():
    observer = RecordingObserver()
    session = empty_session(x=300.0, y=500.0, vy=0.0)
    session.observer = observer

    for _ in range(300):
        snap = session.tick()
        if snap.state is not TerminalState.PLAYING:
            break
    assert snap.state is TerminalState.LOST
    assert snap.avatar_y > 800.0

    later = session.tick()
    assert later == snap
    assert observer.reports == [ScoreReport(final_score=0, won=False)]


def test_field_never_below_minimum():
    session = GameplaySession(seed=11)
    moves = random.Random(99)
    for t in range(900):
        if t % 20 == 0:
            session.set_direction(moves.choice((-1, 0, 1)))
        snap = session.tick()
        if snap.state is not TerminalState.PLAYING:
            break
        need = compute_difficulty(snap.scrolled_distance).min_platform_count
        assert len(snap.platforms) >= need, f"tick {t}: {len(snap.platforms)} < {need}"


def test_horizontal_wrap_band():
    session = empty_session(x=-29.0, y=500.0, vy=-400.0)
    session.set_direction(-1)
    session.tick()
    assert session.avatar.x == pytest.approx(-29.0 - 400.0 / 60 + 660.0)

    session = GameplaySession(seed=2)
    for direction in (1, -1):
        session.set_direction(direction)
        for _ in range(200):
            snap = session.tick()
            assert -30.0 <= snap.avatar_x < 630.0


def test_facing_is_sticky():
    session = empty_session()
    session.set_direction(-1)
    assert session.avatar.facing == -1
    session.set_direction(0)
    assert session.avatar.facing == -1
    session.set_direction(1)
    assert session.snapshot().facing == 1
    with pytest.raises(AssertionError):
        session.set_direction(2)


def test_same_seed_replays_exactly():
    def rollout(seed: int):
        session = GameplaySession(seed=seed)
        moves = random.Random(5)
        out = []
        for t in range(400):
            if t % 15 == 0:
                session.set_direction(moves.choice((-1, 0, 1)))
            out.append(session.tick())
        return out

    assert rollout(42) == rollout(42)
    assert rollout(42) != rollout(43)


def main():
    test_fragile_platform_breaks_on_bounce()
    test_common_platform_survives_bounce()
    test_rising_avatar_passes_through()
    test_overlapping_platforms_newest_wins()
    test_hit_band_edges_are_inclusive()
    test_terminal_tick_clears_bounce()
    test_starts_on_starter_platform()
    test_scroll_pins_avatar_to_midline()
    test_win_is_sticky()
    test_free_fall_is_lost_and_sticky()
    test_field_never_below_minimum()
    test_horizontal_wrap_band()
    test_facing_is_sticky()
    test_same_seed_replays_exactly()
    print("✓ session tests passed")


if __name__ == "__main__":
    main()
