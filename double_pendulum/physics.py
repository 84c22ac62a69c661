"""
Numerical physics for the double pendulum.

This module provides:
- The per-rod state container
- The closed-form angular acceleration model (Lagrangian mechanics)
- A unit-step semi-implicit Euler integrator with a finiteness check
- Rod tip geometry and an energy diagnostic

Time is measured in simulation ticks: angular speeds are radians per tick and
gravity is expressed in length units per tick squared.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Tuple

Point = Tuple[float, float]

STANDARD_GRAVITY = 9.8
DEFAULT_TICK_RATE = 240.0  # physics updates per second


def gravity_per_tick(tick_rate: float = DEFAULT_TICK_RATE) -> float:
    """Gravity in length units per tick squared for a given number of ticks per second."""
    return STANDARD_GRAVITY / tick_rate


@dataclass
class PendulumState:
    """One rod of a double pendulum.

    Angles are measured from the vertical (downwards is 0 rad) and are never
    wrapped into [-pi, pi].
    """

    mass: float
    rod_length: float
    theta: float
    angular_speed: float = 0.0

    def x(self) -> float:
        """x coordinate of the rod tip relative to its pivot."""
        return self.rod_length * math.sin(self.theta)

    def y(self) -> float:
        """y coordinate of the rod tip relative to its pivot (downwards positive)."""
        return self.rod_length * math.cos(self.theta)

    def tip(self) -> Point:
        return (self.x(), self.y())

    def is_finite(self) -> bool:
        return math.isfinite(self.theta) and math.isfinite(self.angular_speed)


class NonFiniteStateError(ValueError):
    """Raised when an integration step produces a NaN or infinite angle or speed."""

    def __init__(self, p1: PendulumState, p2: PendulumState) -> None:
        self.p1 = p1
        self.p2 = p2
        super().__init__(
            "non-finite pendulum state: "
            f"theta1={p1.theta}, speed1={p1.angular_speed}, "
            f"theta2={p2.theta}, speed2={p2.angular_speed}"
        )


def _divide(num: float, den: float) -> float:
    # IEEE semantics instead of ZeroDivisionError; the integrator rejects the result.
    if den == 0.0:
        if num == 0.0 or math.isnan(num):
            return math.nan
        return math.copysign(math.inf, num) * math.copysign(1.0, den)
    return num / den


def compute_acceleration(p1: PendulumState, p2: PendulumState, gravity: float) -> Tuple[float, float]:
    """Return the angular accelerations (a1, a2) of both rods.

    No damping and no clamping of the denominator: a vanishing denominator
    (m2 ~ 0 and t1 ~ t2) produces non-finite accelerations.
    """
    m1, m2 = p1.mass, p2.mass
    l1, l2 = p1.rod_length, p2.rod_length
    t1, t2 = p1.theta, p2.theta
    s1, s2 = p1.angular_speed, p2.angular_speed
    g = gravity

    delta = t1 - t2
    sin_delta = math.sin(delta)
    cos_delta = math.cos(delta)

    # First rod
    n1 = g * (2.0 * m1 + m2) * math.sin(t1)
    n2 = m2 * g * math.sin(t1 - 2.0 * t2)
    n3 = -2.0 * sin_delta * m2
    n4 = s2 * s2 * l2 + s1 * s1 * l1 * cos_delta
    num1 = -n1 - n2 - n3 * n4

    # Second rod
    k1 = 2.0 * sin_delta
    k2 = s1 * s1 * l1 * (m1 + m2)
    k3 = g * (m1 + m2) * math.cos(t1) + s2 * s2 * l2 * m2 * cos_delta
    num2 = k1 * (k2 + k3)

    denom = 2.0 * m1 + m2 - m2 * math.cos(2.0 * delta)

    a1 = _divide(num1, l1 * denom)
    a2 = _divide(num2, l2 * denom)
    return a1, a2


def step(p1: PendulumState, p2: PendulumState, gravity: float) -> Tuple[PendulumState, PendulumState]:
    """Advance both rods by one tick with semi-implicit Euler.

    Speeds are updated from the accelerations first, then angles from the new
    speeds. There is no dt factor: one call is one tick. The inputs are left
    untouched.
    """
    a1, a2 = compute_acceleration(p1, p2, gravity)

    s1 = p1.angular_speed + a1
    s2 = p2.angular_speed + a2
    new_p1 = replace(p1, theta=p1.theta + s1, angular_speed=s1)
    new_p2 = replace(p2, theta=p2.theta + s2, angular_speed=s2)

    if not (new_p1.is_finite() and new_p2.is_finite()):
        raise NonFiniteStateError(new_p1, new_p2)
    return new_p1, new_p2


def total_energy(p1: PendulumState, p2: PendulumState, gravity: float) -> float:
    """Total mechanical energy (kinetic + potential) in tick units.

    Reference height 0 at the hinge; height grows upwards, so a pendulum
    hanging at rest has energy -(m1 + m2) * g * l1 - m2 * g * l2.
    """
    m1, m2 = p1.mass, p2.mass
    l1, l2 = p1.rod_length, p2.rod_length
    th1, w1 = p1.theta, p1.angular_speed
    th2, w2 = p2.theta, p2.angular_speed

    # velocities
    x1dot = l1 * w1 * math.cos(th1)
    y1dot = l1 * w1 * math.sin(th1)
    x2dot = x1dot + l2 * w2 * math.cos(th2)
    y2dot = y1dot + l2 * w2 * math.sin(th2)
    kinetic = 0.5 * m1 * (x1dot * x1dot + y1dot * y1dot) + 0.5 * m2 * (x2dot * x2dot + y2dot * y2dot)

    h1 = -l1 * math.cos(th1)
    h2 = h1 - l2 * math.cos(th2)
    potential = m1 * gravity * h1 + m2 * gravity * h2
    return kinetic + potential
