from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from double_pendulum.body import Color, DoubleBody
from double_pendulum.physics import NonFiniteStateError, Point, gravity_per_tick, total_energy

logger = logging.getLogger(__name__)

DEFAULT_GRAVITY = gravity_per_tick()
MIN_TRAIL_POINTS = 3
CIRCLE_SCALE = 4.0


@dataclass(frozen=True)
class BodySnapshot:
    """Read-only view of one body in screen coordinates."""

    origin: Point
    joint1: Point
    joint2: Point
    color: Color
    masses: Tuple[float, float]
    radii: Tuple[float, float]
    trail: Tuple[Point, ...] = ()


@dataclass(frozen=True)
class SceneSnapshot:
    center: Point
    show_trail: bool
    bodies: Tuple[BodySnapshot, ...]

    @property
    def body_count(self) -> int:
        return len(self.bodies)


def _offset(point: Point, center: Point) -> Point:
    return (point[0] + center[0], point[1] + center[1])


@dataclass
class SimulationController:
    """Owns every double pendulum on screen and the shared display flags."""

    bodies: List[DoubleBody] = field(default_factory=list)
    show_trail: bool = False
    center: Point = (200.0, 200.0)
    gravity: float = DEFAULT_GRAVITY
    rng: random.Random = field(default_factory=random.Random)
    removed_count: int = 0

    @classmethod
    def new(
        cls,
        size: int = 1,
        show_trail: bool = False,
        center: Point = (200.0, 200.0),
        rng: Optional[random.Random] = None,
        gravity: float = DEFAULT_GRAVITY,
    ) -> "SimulationController":
        controller = cls(show_trail=show_trail, center=center, gravity=gravity, rng=rng or random.Random())
        for _ in range(max(0, size)):
            controller.spawn()
        return controller

    def spawn(self) -> DoubleBody:
        body = DoubleBody.new(self.rng)
        self.bodies.append(body)
        logger.debug("Spawned body #%d (m1=%.2f, m2=%.2f)", len(self.bodies), body.p1.mass, body.p2.mass)
        return body

    def reset(self) -> None:
        self.bodies = [DoubleBody.new(self.rng)]
        logger.info("Reset to a single body")

    def toggle_trail(self) -> bool:
        self.show_trail = not self.show_trail
        return self.show_trail

    def set_center(self, point: Point) -> None:
        self.center = (float(point[0]), float(point[1]))

    def tick(self) -> int:
        """Step every body once. Bodies whose state turns non-finite are dropped.

        Returns the number of bodies removed during this tick.
        """
        survivors = []
        for index, body in enumerate(self.bodies):
            try:
                body.step(self.gravity)
            except NonFiniteStateError as exc:
                logger.warning("Removing body %d: %s", index, exc)
                continue
            survivors.append(body)
        removed = len(self.bodies) - len(survivors)
        if removed:
            self.bodies = survivors
            self.removed_count += removed
        return removed

    def energies(self) -> List[float]:
        return [total_energy(b.p1, b.p2, self.gravity) for b in self.bodies]

    def snapshot(self) -> SceneSnapshot:
        """Immutable render view: joints and trails offset by the screen center."""
        views = []
        for body in self.bodies:
            origin, joint1, joint2 = body.joint_positions()
            trail: Tuple[Point, ...] = ()
            if self.show_trail and len(body.trail) >= MIN_TRAIL_POINTS:
                trail = tuple(_offset(p, self.center) for p in body.trail.as_sequence())
            views.append(
                BodySnapshot(
                    origin=_offset(origin, self.center),
                    joint1=_offset(joint1, self.center),
                    joint2=_offset(joint2, self.center),
                    color=body.color,
                    masses=(body.p1.mass, body.p2.mass),
                    radii=(CIRCLE_SCALE * body.p1.mass, CIRCLE_SCALE * body.p2.mass),
                    trail=trail,
                )
            )
        return SceneSnapshot(center=self.center, show_trail=self.show_trail, bodies=tuple(views))
