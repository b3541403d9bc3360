# src/hopper/collision.py
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional

from .config import SimConfig, DEFAULT_CONFIG
from .level import Platform, PlatformField, PlatformKind
from .player import Avatar


@dataclass(frozen=True)
class BounceResult:
    bounced: bool = False
    removed_fragile: bool = False
    platform: Optional[Platform] = None


def is_hit(avatar: Avatar, platform: Platform, config: SimConfig = DEFAULT_CONFIG) -> bool:
    """The avatar's anchor point must lie in the platform's hit band while it is falling."""
    if not avatar.falling:
        return False
    in_x = platform.x - config.hit_margin_left <= avatar.x <= platform.x + platform.width
    in_y = platform.y - config.hit_margin_top <= avatar.y <= platform.y + platform.height
    return in_x and in_y


def resolve_bounce(avatar: Avatar, field: PlatformField, config: SimConfig = DEFAULT_CONFIG) -> BounceResult:
    """
    Bounce the avatar off the first platform it lands on (newest first).
    Only a falling avatar can land, so a bounce ends the scan.
    Fragile platforms are dropped from the field after the scan.
    """
    hit: Optional[Platform] = None
    for platform in reversed(field.platforms):
        if is_hit(avatar, platform, config):
            hit = platform
            break
    if hit is None:
        return BounceResult()

    avatar.bounce(config)

    doomed: List[Platform] = []
    if hit.kind is PlatformKind.FRAGILE:
        doomed.append(hit)
    if doomed:
        field.remove_all(doomed)
    return BounceResult(bounced=True, removed_fragile=bool(doomed), platform=hit)
