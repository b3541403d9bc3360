# src/hopper/scroll.py
from __future__ import annotations
from dataclasses import dataclass

from .level import PlatformField
from .player import Avatar


@dataclass
class FinishLine:
    y: float


def apply_scroll(avatar: Avatar, field: PlatformField, finish_line: FinishLine, canvas_height: float) -> float:
    """
    Keep the avatar at or below mid-screen by pushing the world down.
    Returns the shift applied this tick (0 when the avatar is below the midline).
    The shift is also what the avatar has climbed, so it feeds scrolled_distance.
    """
    mid = canvas_height / 2
    if avatar.y >= mid:
        return 0.0

    dy = mid - avatar.y
    avatar.y = mid
    field.shift(dy)
    finish_line.y += dy
    avatar.scrolled_distance += dy
    return dy
