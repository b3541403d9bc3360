# src/tests/difficulty_tests.py
"""
Difficulty curve checks.

Usage (from repo root):
  python -m src.tests.difficulty_tests
"""
from __future__ import annotations
from dataclasses import replace

import pytest

from src.hopper.config import DEFAULT_CONFIG
from src.hopper.difficulty import compute_difficulty, difficulty_ratio


def test_endpoints():
    start = compute_difficulty(0.0)
    assert (start.min_gap, start.max_gap, start.min_platform_count) == (80.0, 120.0, 7)

    end = compute_difficulty(15000.0)
    assert (end.min_gap, end.max_gap, end.min_platform_count) == (180.0, 325.0, 4)

    # saturates past the goal
    assert compute_difficulty(40000.0) == end


def test_curve_shape():
    prev_ratio = -1.0
    prev_count = 99
    for d in range(0, 15001, 125):
        diff = compute_difficulty(float(d))
        ratio = difficulty_ratio(float(d))
        assert diff.min_gap <= diff.max_gap - 20 + 1e-9, f"spread too small at {d}"
        assert ratio >= prev_ratio, f"ratio went down at {d}"
        assert diff.min_platform_count <= prev_count, f"count went up at {d}"
        assert 4 <= diff.min_platform_count <= 7
        prev_ratio, prev_count = ratio, diff.min_platform_count
    assert difficulty_ratio(15000.0) == 1.0
    assert difficulty_ratio(99999.0) == 1.0


def test_min_gap_clamped_to_spread():
    steep = replace(DEFAULT_CONFIG, min_gap_growth=300.0)
    diff = compute_difficulty(15000.0, steep)
    assert diff.max_gap == 325.0
    assert diff.min_gap == 305.0


def test_config_rejects_unsorted_kind_tiers():
    tiers = ((0.0, (0.5, 0.3, 0.2)), (7500.0, (0.0, 0.5, 0.5)), (2500.0, (0.25, 0.4, 0.35)))
    with pytest.raises(ValueError):
        replace(DEFAULT_CONFIG, kind_tiers=tiers)
    with pytest.raises(ValueError):
        replace(DEFAULT_CONFIG, kind_tiers=((0.0, (1.0, 0.0, 0.0)), (0.0, (0.0, 1.0, 0.0))))


def test_rejects_bad_distance():
    with pytest.raises(AssertionError):
        compute_difficulty(-1.0)
    with pytest.raises(AssertionError):
        compute_difficulty(float("nan"))


def main():
    test_endpoints()
    test_curve_shape()
    test_min_gap_clamped_to_spread()
    test_config_rejects_unsorted_kind_tiers()
    test_rejects_bad_distance()
    print("✓ difficulty tests passed")


if __name__ == "__main__":
    main()
