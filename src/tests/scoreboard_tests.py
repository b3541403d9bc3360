# src/tests/scoreboard_tests.py
"""
Scoreboard, score stores and the fixed-step scheduler.

Usage (from repo root):
  python -m src.tests.scoreboard_tests
"""
from __future__ import annotations
import json
import tempfile
from pathlib import Path

from src.hopper.clock import FixedStepScheduler
from src.hopper.scoreboard import (
    JsonScoreStore, MemoryScoreStore, ScoreEntry, Scoreboard,
    format_entry, normalize_name, star_rating
)


def test_scoreboard_sorts_and_saves():
    store = MemoryScoreStore([ScoreEntry("old", 50)])
    board = Scoreboard(store)
    board.add("bob", 100)
    blank = board.add("   ", 300)
    board.add(" amy ", 200)

    assert [(e.name, e.score) for e in board.entries] == [
        ("Anonymous", 300), ("amy", 200), ("bob", 100), ("old", 50)
    ]
    assert store.load() == board.entries
    assert board.rank_of(blank) == 1


def test_ties_keep_arrival_order():
    board = Scoreboard(MemoryScoreStore())
    first = board.add("first", 10)
    second = board.add("second", 10)
    assert board.rank_of(first) == 1 and board.rank_of(second) == 2


def test_json_store_round_trip():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "nested" / "scores.json"
        store = JsonScoreStore(path)
        assert store.load() == []

        Scoreboard(store).add("zoé", 12345)
        raw = json.loads(path.read_text(encoding="utf-8"))
        assert raw == [{"name": "zoé", "score": 12345}]

        reloaded = Scoreboard(JsonScoreStore(path))
        assert reloaded.entries == [ScoreEntry("zoé", 12345)]


def test_json_store_ignores_corrupt_file():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "scores.json"
        path.write_text("{not json", encoding="utf-8")
        assert JsonScoreStore(path).load() == []

        path.write_text(json.dumps([{"who": "x"}]), encoding="utf-8")
        assert JsonScoreStore(path).load() == []


def test_stars_and_formatting():
    assert [star_rating(s) for s in (0, 4999, 5000, 9999, 10000, 14999, 15000, 20000)] == \
        [0, 0, 1, 1, 2, 2, 3, 3]
    assert format_entry(ScoreEntry("amy", 10500)) == "★★ amy : 10500"
    assert format_entry(ScoreEntry("bob", 42)) == "bob : 42"
    assert normalize_name(None) == "Anonymous"
    assert normalize_name("  Lu ") == "Lu"


def test_scheduler_carries_remainder():
    sched = FixedStepScheduler(fps=50)   # 20 ms per tick
    assert sched.advance(10) == 0
    assert sched.advance(10) == 1
    assert sched.lag_ms == 0.0
    assert sched.advance(45) == 2
    assert sched.lag_ms == 5.0


def test_scheduler_caps_catch_up():
    sched = FixedStepScheduler(fps=50, max_steps=5)
    assert sched.advance(1000) == 5
    assert sched.lag_ms == 0.0
    sched.advance(15)
    sched.reset()
    assert sched.advance(10) == 0


def main():
    test_scoreboard_sorts_and_saves()
    test_ties_keep_arrival_order()
    test_json_store_round_trip()
    test_json_store_ignores_corrupt_file()
    test_stars_and_formatting()
    test_scheduler_carries_remainder()
    test_scheduler_caps_catch_up()
    print("✓ scoreboard tests passed")


if __name__ == "__main__":
    main()
