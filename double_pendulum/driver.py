"""
Fixed-rate tick driver.

Real elapsed time is accumulated and the controller is ticked once per whole
tick interval, so the animation speed does not depend on how often frames are
rendered. Rendering only reads a snapshot.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Optional

from double_pendulum.controller import SceneSnapshot, SimulationController


class TickAccumulator:
    """Turns elapsed seconds into a whole number of ticks, keeping the remainder."""

    def __init__(self, tick_rate: float, max_elapsed: Optional[float] = None) -> None:
        if tick_rate <= 0:
            raise ValueError(f"tick rate must be positive, got {tick_rate}")
        self.tick_rate = float(tick_rate)
        self.interval = 1.0 / self.tick_rate
        self.max_elapsed = max_elapsed
        self.pending = 0.0

    def add(self, elapsed: float) -> int:
        """Accumulate elapsed seconds and return how many ticks are due."""
        elapsed = max(0.0, float(elapsed))
        if self.max_elapsed is not None:
            elapsed = min(elapsed, self.max_elapsed)
        self.pending += elapsed
        ticks = 0
        while self.pending >= self.interval:
            self.pending -= self.interval
            ticks += 1
        return ticks

    def reset(self) -> None:
        self.pending = 0.0


class FpsCounter:
    """Frames per second over a sliding window of frame timestamps."""

    def __init__(self, window: int = 60) -> None:
        self._stamps: Deque[float] = deque(maxlen=max(2, window))

    def frame(self, now: float) -> None:
        self._stamps.append(float(now))

    def fps(self) -> float:
        if len(self._stamps) < 2:
            return 0.0
        span = self._stamps[-1] - self._stamps[0]
        if span <= 0.0:
            return 0.0
        return (len(self._stamps) - 1) / span


@dataclass
class SimulationDriver:
    """Explicit tick and render entry points for a host loop."""

    controller: SimulationController
    accumulator: TickAccumulator
    fps_counter: FpsCounter = field(default_factory=FpsCounter)
    ticks: int = 0

    def advance(self, elapsed: float) -> int:
        """Run every tick due after `elapsed` seconds; returns the number run."""
        due = self.accumulator.add(elapsed)
        for _ in range(due):
            self.controller.tick()
        self.ticks += due
        return due

    def snapshot(self, now: Optional[float] = None) -> SceneSnapshot:
        if now is not None:
            self.fps_counter.frame(now)
        return self.controller.snapshot()

    def status_text(self) -> str:
        return f"FPS: {round(self.fps_counter.fps())}\nPendulums count: {len(self.controller.bodies)}"
