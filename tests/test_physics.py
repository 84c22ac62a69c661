import math

import pytest

from double_pendulum.physics import (
    NonFiniteStateError,
    PendulumState,
    compute_acceleration,
    step,
    total_energy,
)


def _pair(t1=math.pi / 2, t2=math.pi / 2, s1=0.0, s2=0.0, m1=3.0, m2=3.0, l1=100.0, l2=100.0):
    return (
        PendulumState(mass=m1, rod_length=l1, theta=t1, angular_speed=s1),
        PendulumState(mass=m2, rod_length=l2, theta=t2, angular_speed=s2),
    )


@pytest.mark.parametrize("m1,m2,l1,l2", [(1.0, 1.0, 1.0, 1.0), (2.0, 5.0, 150.0, 50.0), (4.5, 0.3, 10.0, 90.0)])
def test_hanging_at_rest_is_a_fixed_point(m1, m2, l1, l2):
    p1, p2 = _pair(t1=0.0, t2=0.0, m1=m1, m2=m2, l1=l1, l2=l2)
    a1, a2 = compute_acceleration(p1, p2, gravity=9.8)
    assert a1 == 0.0
    assert a2 == 0.0


def test_horizontal_release_accelerations():
    p1, p2 = _pair()
    a1, a2 = compute_acceleration(p1, p2, gravity=1.0)
    assert a1 == pytest.approx(-0.01)
    assert a2 == pytest.approx(0.0, abs=1e-15)


def test_compute_acceleration_is_deterministic():
    p1, p2 = _pair(t1=1.3, t2=-0.4, s1=0.02, s2=-0.05, m1=2.5, m2=4.1, l1=120.0, l2=80.0)
    first = compute_acceleration(p1, p2, 1.0)
    for _ in range(5):
        assert compute_acceleration(p1, p2, 1.0) == first


def test_step_semi_implicit_euler():
    p1, p2 = _pair()
    n1, n2 = step(p1, p2, gravity=1.0)
    assert n1.angular_speed == pytest.approx(-0.01)
    assert n2.angular_speed == pytest.approx(0.0, abs=1e-15)
    assert n1.theta == pytest.approx(math.pi / 2 - 0.01)
    assert n2.theta == pytest.approx(math.pi / 2)


def test_step_uses_updated_speed_for_angle():
    p1, p2 = _pair(s1=0.5)
    a1, _ = compute_acceleration(p1, p2, 1.0)
    n1, _ = step(p1, p2, 1.0)
    assert n1.angular_speed == 0.5 + a1
    assert n1.theta == math.pi / 2 + (0.5 + a1)


def test_step_does_not_mutate_inputs_and_is_repeatable():
    p1, p2 = _pair(t1=2.0, t2=2.5, s1=0.01)
    before = (p1.theta, p1.angular_speed, p2.theta, p2.angular_speed)
    assert step(p1, p2, 1.0) == step(p1, p2, 1.0)
    assert (p1.theta, p1.angular_speed, p2.theta, p2.angular_speed) == before


def test_angles_are_not_wrapped():
    p1, p2 = _pair(t1=7.0, t2=7.0, s1=0.5, s2=0.5)
    n1, n2 = step(p1, p2, 1.0)
    assert n1.theta > 2 * math.pi
    assert n2.theta > 2 * math.pi


def test_degenerate_denominator_raises_non_finite():
    # zero masses make the denominator vanish
    p1, p2 = _pair(t1=1.0, t2=1.0, m1=0.0, m2=0.0)
    a1, a2 = compute_acceleration(p1, p2, 1.0)
    assert not math.isfinite(a1) or not math.isfinite(a2)
    with pytest.raises(NonFiniteStateError) as info:
        step(p1, p2, 1.0)
    assert info.value.p1.rod_length == 100.0
    assert isinstance(info.value, ValueError)


def test_rod_tip_straight_down():
    rod = PendulumState(mass=1.0, rod_length=100.0, theta=0.0)
    assert rod.x() == 0.0
    assert rod.y() == 100.0
    assert rod.tip() == (0.0, 100.0)


def test_total_energy_at_rest():
    p1, p2 = _pair(t1=0.0, t2=0.0, m1=2.0, m2=3.0, l1=120.0, l2=80.0)
    expected = -(2.0 + 3.0) * 1.0 * 120.0 - 3.0 * 1.0 * 80.0
    assert total_energy(p1, p2, 1.0) == pytest.approx(expected)
