# src/env/hopper_env.py
from __future__ import annotations
from typing import Optional, Dict, Any
import numpy as np
import gymnasium as gym
import pygame

from src.hopper.config import SimConfig, DEFAULT_CONFIG
from src.hopper.render import draw_world
from src.hopper.session import GameplaySession, Snapshot, TerminalState
from src.env.observations import build_observation, OBS_LOW, OBS_HIGH

# Action index -> avatar direction
ACTION_DIRECTIONS = (-1, 0, 1)
WIN_BONUS = 10.0
LOSS_PENALTY = -1.0
DISTANCE_SCALE = 100.0   # reward per 100 px climbed


class HopperEnv(gym.Env):
    """
    Sky Hopper Gymnasium environment (vector observations).
    - Simulation at config.fps (60 Hz by default).
    - Agent acts every `frame_skip` ticks (default 4) -> 15 decisions/sec.
    - Observation: shape (24,), float32, see build_observation.
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 60}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 frame_skip: int = 4,
                 time_limit_seconds: Optional[float] = 120.0,
                 config: SimConfig = DEFAULT_CONFIG):
        super().__init__()
        assert frame_skip >= 1, "frame_skip must be >= 1"
        assert render_mode is None or render_mode in self.metadata["render_modes"], \
            f"Unsupported render_mode {render_mode}"
        self.render_mode = render_mode
        self.frame_skip = int(frame_skip)
        self.config = config

        self.time_limit_decisions = None
        if time_limit_seconds is not None:
            # decisions per second = fps / frame_skip
            self.time_limit_decisions = int(config.fps * time_limit_seconds / self.frame_skip)

        # --- Gym spaces ---
        # Actions: 0 = LEFT, 1 = NOOP, 2 = RIGHT
        self.action_space = gym.spaces.Discrete(len(ACTION_DIRECTIONS))
        self.observation_space = gym.spaces.Box(low=OBS_LOW, high=OBS_HIGH, dtype=np.float32)

        # --- Runtime state ---
        self.session: Optional[GameplaySession] = None
        self.snapshot: Optional[Snapshot] = None
        self.timestep: int = 0
        self.current_seed: Optional[int] = None
        self.bounces: int = 0

        # Rendering
        self.screen = None
        self.clock = None
        self.font = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)

        # Seeded resets replay the exact same platform layout
        level_seed = int(seed) if seed is not None else None
        self.session = GameplaySession(seed=level_seed, config=self.config)
        self.snapshot = self.session.snapshot()
        self.timestep = 0
        self.bounces = 0
        self.current_seed = self.session.seed

        if self.render_mode == "human":
            self.render()
        return self._get_obs(), self._info()

    def step(self, action):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.session is not None, "Call reset() before step()"

        self.session.set_direction(ACTION_DIRECTIONS[int(action)])
        start_distance = self.snapshot.scrolled_distance

        for _ in range(self.frame_skip):
            self.snapshot = self.session.tick()
            if self.session.last_bounce.bounced:
                self.bounces += 1
            if not self.session.playing:
                break

        reward = (self.snapshot.scrolled_distance - start_distance) / DISTANCE_SCALE
        if self.snapshot.state is TerminalState.WON:
            reward += WIN_BONUS
        elif self.snapshot.state is TerminalState.LOST:
            reward += LOSS_PENALTY

        self.timestep += 1
        terminated = not self.session.playing
        truncated = False
        if (self.time_limit_decisions is not None) and (self.timestep >= self.time_limit_decisions):
            truncated = not terminated

        if self.render_mode == "human":
            self.render()
        return self._get_obs(), float(reward), terminated, truncated, self._info()

    # -------------------- Helpers --------------------

    def _get_obs(self) -> np.ndarray:
        assert self.snapshot is not None
        return build_observation(self.snapshot, self.config)

    def _info(self) -> Dict[str, Any]:
        snap = self.snapshot
        return {
            "seed": self.current_seed,
            "distance_px": snap.scrolled_distance,
            "score": snap.score,
            "state": snap.state.value,
            "timestep": self.timestep,
            "bounces": self.bounces,
            "platforms": len(snap.platforms),
        }

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None or self.snapshot is None:
            return None

        size = (int(self.config.width), int(self.config.height))
        if self.screen is None:
            pygame.init()
            if self.render_mode == "human":
                pygame.display.set_caption("Sky Hopper - Gym Env")
                self.screen = pygame.display.set_mode(size)
                self.clock = pygame.time.Clock()
            else:
                self.screen = pygame.Surface(size)
            self.font = pygame.font.Font(None, 28)

        if self.render_mode == "human":
            # Pump the event queue so the OS doesn't think we're hung
            pygame.event.pump()

        draw_world(self.screen, self.snapshot, self.font)

        if self.render_mode == "human":
            pygame.display.flip()
            self.clock.tick(self.metadata["render_fps"])
            return None

        # (H, W, 3) uint8 array
        arr = pygame.surfarray.array3d(self.screen)  # (W, H, 3)
        return np.transpose(arr, (1, 0, 2))

    def close(self):
        if self.screen is not None:
            if self.render_mode == "human":
                pygame.display.quit()
            pygame.quit()
            self.screen = None
            self.clock = None
            self.font = None
