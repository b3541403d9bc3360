# src/hopper/game.py
import sys, argparse, logging
from typing import Optional

import pygame
from pygame import K_ESCAPE, K_LEFT, K_RIGHT, K_a, K_d, K_r, K_n, K_RETURN, K_KP_ENTER, K_BACKSPACE

from .config import FPS, SEED_DEFAULT, DEFAULT_CONFIG
from .clock import FixedStepScheduler
from .render import draw_world, draw_name_prompt, draw_scores, make_screen
from .scoreboard import Scoreboard, JsonScoreStore, DEFAULT_SCORES_PATH
from .session import GameplaySession, ScoreReport

KEY_DIRECTIONS = {K_LEFT: -1, K_a: -1, K_RIGHT: 1, K_d: 1}
NAME_MAX_LEN = 16


def parse_args():
    p = argparse.ArgumentParser()
    p.add_argument("--seed", type=int, default=None,
                   help="Level seed. Omit for SEED_DEFAULT, use -1 for random each launch.")
    p.add_argument("--scores", type=str, default=str(DEFAULT_SCORES_PATH),
                   help="Path of the JSON score list.")
    p.add_argument("--log-level", type=str, default="INFO",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p.parse_args()


class PendingScore:
    """Session observer: remembers the report of the run that just ended."""
    def __init__(self):
        self.report: Optional[ScoreReport] = None

    def on_game_over(self, report: ScoreReport):
        self.report = report


def run():
    args = parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    # Resolve seed: None -> use SEED_DEFAULT; -1 -> random
    if args.seed is None:
        launch_seed = SEED_DEFAULT
    elif args.seed == -1:
        launch_seed = None  # signals the session to randomize
    else:
        launch_seed = args.seed

    pygame.init()
    screen = make_screen(DEFAULT_CONFIG, "Sky Hopper")
    clock = pygame.time.Clock()
    font = pygame.font.SysFont("arial", 22)
    scoreboard = Scoreboard(JsonScoreStore(args.scores))
    scheduler = FixedStepScheduler(FPS)

    def reset_world(seed_spec):
        pending = PendingScore()
        session = GameplaySession(seed=seed_spec, config=DEFAULT_CONFIG, observer=pending)
        scheduler.reset()
        print(f"New run  seed={session.seed}")
        return session, pending, "play", ""

    session, pending, phase, name_text = reset_world(launch_seed)
    pygame.key.start_text_input()

    while True:
        elapsed_ms = clock.tick(FPS)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit(); sys.exit()
            if event.type == pygame.KEYDOWN and event.key == K_ESCAPE:
                pygame.quit(); sys.exit()

            if phase == "play":
                if event.type == pygame.KEYDOWN and event.key in KEY_DIRECTIONS:
                    session.set_direction(KEY_DIRECTIONS[event.key])
                elif event.type == pygame.KEYUP and event.key in KEY_DIRECTIONS:
                    session.set_direction(0)

            elif phase == "name":
                if event.type == pygame.TEXTINPUT:
                    name_text = (name_text + event.text)[:NAME_MAX_LEN]
                elif event.type == pygame.KEYDOWN and event.key == K_BACKSPACE:
                    name_text = name_text[:-1]
                elif event.type == pygame.KEYDOWN and event.key in (K_RETURN, K_KP_ENTER):
                    entry = scoreboard.add(name_text, pending.report.final_score)
                    print(f"Score {entry.score} saved for {entry.name} "
                          f"(rank {scoreboard.rank_of(entry)}/{len(scoreboard.entries)})")
                    phase = "scores"

            elif phase == "scores" and event.type == pygame.KEYDOWN:
                if event.key == K_r:
                    # Restart SAME seed
                    session, pending, phase, name_text = reset_world(session.seed)
                elif event.key == K_n:
                    session, pending, phase, name_text = reset_world(None)

        if phase == "play":
            for _ in range(scheduler.advance(elapsed_ms)):
                session.tick(FPS)
                if pending.report is not None:
                    phase = "name"
                    break

        # --- Render ---
        draw_world(screen, session.snapshot(), font)
        if phase == "name":
            draw_name_prompt(screen, font, name_text, pending.report.won)
        elif phase == "scores":
            draw_scores(screen, font, scoreboard.entries)
        pygame.display.flip()


if __name__ == "__main__":
    run()
