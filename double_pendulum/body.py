from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from typing import Tuple

from double_pendulum.physics import PendulumState, Point, step
from double_pendulum.trail import TRAIL_LENGTH, TrailBuffer

Color = Tuple[float, float, float, float]

BASE_LENGTH = 100.0
MASS_RANGE = (2.0, 5.0)
LENGTH_OFFSET_RANGE = (-50.0, 50.0)


@dataclass
class DoubleBody:
    """Two chained rods: p1 hangs from the origin, p2 hangs from the tip of p1."""

    p1: PendulumState
    p2: PendulumState
    color: Color = (1.0, 1.0, 1.0, 1.0)
    trail: TrailBuffer = field(default_factory=lambda: TrailBuffer(TRAIL_LENGTH))

    @classmethod
    def new(cls, rng: random.Random, base_length: float = BASE_LENGTH) -> "DoubleBody":
        """Create a body with random masses, rod lengths, shared start angle and color.

        Both rods start at rest with the same angle in [pi/2, 3pi/2).
        """
        m1 = rng.uniform(*MASS_RANGE)
        m2 = rng.uniform(*MASS_RANGE)
        radius_offset = rng.uniform(*LENGTH_OFFSET_RANGE)
        theta = rng.uniform(0.0, math.pi) + math.pi / 2.0
        color = (rng.random(), rng.random(), rng.random(), 1.0)

        p1 = PendulumState(mass=m1, rod_length=base_length + radius_offset, theta=theta)
        p2 = PendulumState(mass=m2, rod_length=base_length - radius_offset, theta=theta)
        return cls(p1=p1, p2=p2, color=color)

    def tip_position(self) -> Point:
        return (self.p1.x() + self.p2.x(), self.p1.y() + self.p2.y())

    def joint_positions(self) -> Tuple[Point, Point, Point]:
        """Origin, tip of the first rod and tip of the second rod, relative to the hinge."""
        x1, y1 = self.p1.tip()
        return (0.0, 0.0), (x1, y1), self.tip_position()

    def step(self, gravity: float) -> None:
        # state is only written back once the integrator accepted it
        self.p1, self.p2 = step(self.p1, self.p2, gravity)
        self.trail.push(self.tip_position())
