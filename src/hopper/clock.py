# src/hopper/clock.py
from __future__ import annotations


class FixedStepScheduler:
    """
    Turns wall-clock time into a whole number of simulation ticks.
    Leftover time carries over to the next frame; a long stall is capped at
    max_steps ticks so the game does not spiral trying to catch up.
    """
    def __init__(self, fps: int = 60, max_steps: int = 5):
        assert fps > 0, "fps must be > 0"
        assert max_steps >= 1, "max_steps must be >= 1"
        self.fps = fps
        self.frame_ms = 1000.0 / fps
        self.max_steps = max_steps
        self.lag_ms = 0.0

    def advance(self, elapsed_ms: float) -> int:
        assert elapsed_ms >= 0, "time does not run backwards"
        self.lag_ms += elapsed_ms
        steps = int(self.lag_ms // self.frame_ms)
        if steps > self.max_steps:
            steps = self.max_steps
            self.lag_ms = 0.0
        else:
            self.lag_ms -= steps * self.frame_ms
        return steps

    def reset(self):
        self.lag_ms = 0.0
