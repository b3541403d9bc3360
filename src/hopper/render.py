# src/hopper/render.py
from __future__ import annotations
from typing import Sequence

import pygame

from .config import (
    SimConfig, DEFAULT_CONFIG, PLAYER_W, PLAYER_H,
    COLOR_BG, COLOR_FG, COLOR_GRID, COLOR_PLAYER, COLOR_COMMON, COLOR_MOVING,
    COLOR_FRAGILE, COLOR_OUTLINE, COLOR_FINISH, COLOR_WIN, COLOR_DANGER, COLOR_PANEL
)
from .level import PlatformKind
from .scoreboard import ScoreEntry, format_entry
from .session import Snapshot, TerminalState

KIND_COLORS = {
    PlatformKind.COMMON: COLOR_COMMON,
    PlatformKind.MOVING: COLOR_MOVING,
    PlatformKind.FRAGILE: COLOR_FRAGILE,
}
FINISH_BAND_H = 100
FINISH_CELL = 25
GRID_STEP = 40


def _draw_grid(surf: pygame.Surface, scroll: float):
    """Notebook-paper lines that slide with the world."""
    w, h = surf.get_size()
    offset = int(scroll) % GRID_STEP
    for y in range(offset - GRID_STEP, h, GRID_STEP):
        pygame.draw.line(surf, COLOR_GRID, (0, y), (w, y), 1)


def _draw_finish(surf: pygame.Surface, finish_y: float):
    w, h = surf.get_size()
    top = int(finish_y)
    if top + FINISH_BAND_H <= 0 or top >= h:
        return
    rows = FINISH_BAND_H // FINISH_CELL
    for r in range(rows):
        for c in range(w // FINISH_CELL + 1):
            if (r + c) % 2 == 0:
                pygame.draw.rect(surf, COLOR_FINISH,
                                 (c * FINISH_CELL, top + r * FINISH_CELL, FINISH_CELL, FINISH_CELL))


def _draw_avatar(surf: pygame.Surface, snap: Snapshot):
    body = pygame.Rect(int(snap.avatar_x - PLAYER_W // 2), int(snap.avatar_y - PLAYER_H), PLAYER_W, PLAYER_H)
    pygame.draw.rect(surf, COLOR_PLAYER, body, border_radius=8)
    pygame.draw.rect(surf, COLOR_OUTLINE, body, width=2, border_radius=8)
    # eye on the facing side
    eye_x = body.centerx + snap.facing * (PLAYER_W // 4)
    pygame.draw.circle(surf, COLOR_FG, (eye_x, body.top + 16), 4)


def draw_world(surf: pygame.Surface, snap: Snapshot, font: pygame.font.Font):
    """Draw one frame of a running (or just finished) session."""
    surf.fill(COLOR_BG)
    _draw_grid(surf, snap.scrolled_distance)
    _draw_finish(surf, snap.finish_line_y)

    for p in snap.platforms:
        rect = pygame.Rect(int(p.x), int(p.y), int(p.width), int(p.height))
        pygame.draw.rect(surf, KIND_COLORS[p.kind], rect, border_radius=6)
        pygame.draw.rect(surf, COLOR_OUTLINE, rect, width=1, border_radius=6)

    _draw_avatar(surf, snap)

    hud = font.render(f"Score: {snap.score}", True, COLOR_FG)
    surf.blit(hud, (10, 10))

    if snap.state is TerminalState.WON:
        draw_banner(surf, font, "Well done!", COLOR_WIN)
    elif snap.state is TerminalState.LOST:
        draw_banner(surf, font, "Game Over", COLOR_DANGER)


def draw_banner(surf: pygame.Surface, font: pygame.font.Font, text: str, color):
    w, h = surf.get_size()
    msg = font.render(text, True, color)
    surf.blit(msg, ((w - msg.get_width()) // 2, h // 4))


def _panel(surf: pygame.Surface, height: int) -> pygame.Rect:
    w, h = surf.get_size()
    rect = pygame.Rect(40, (h - height) // 2, w - 80, height)
    pygame.draw.rect(surf, COLOR_PANEL, rect, border_radius=10)
    pygame.draw.rect(surf, COLOR_OUTLINE, rect, width=2, border_radius=10)
    return rect


def draw_name_prompt(surf: pygame.Surface, font: pygame.font.Font, text: str, won: bool):
    rect = _panel(surf, 140)
    title = "Congratulations, you won! Enter your name" if won else "Enter your name"
    surf.blit(font.render(title, True, COLOR_FG), (rect.left + 20, rect.top + 20))
    box = pygame.Rect(rect.left + 20, rect.top + 60, rect.width - 40, 40)
    pygame.draw.rect(surf, COLOR_OUTLINE, box, width=2, border_radius=6)
    surf.blit(font.render(text + "_", True, COLOR_FG), (box.left + 8, box.top + 8))


def draw_scores(surf: pygame.Surface, font: pygame.font.Font, entries: Sequence[ScoreEntry], limit: int = 10):
    shown = list(entries)[:limit]
    line_h = font.get_linesize() + 4
    rect = _panel(surf, 100 + line_h * max(1, len(shown)))
    surf.blit(font.render("Scores", True, COLOR_FG), (rect.left + 20, rect.top + 16))
    y = rect.top + 56
    for i, entry in enumerate(shown):
        surf.blit(font.render(f"{i + 1}. {format_entry(entry)}", True, COLOR_FG), (rect.left + 20, y))
        y += line_h
    hint = font.render("R retry | N new seed | ESC quit", True, COLOR_OUTLINE)
    surf.blit(hint, (rect.left + 20, rect.bottom - line_h - 6))


def make_screen(config: SimConfig = DEFAULT_CONFIG, caption: str = "Sky Hopper") -> pygame.Surface:
    pygame.display.set_caption(caption)
    return pygame.display.set_mode((int(config.width), int(config.height)))
