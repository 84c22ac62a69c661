import pytest

from double_pendulum.trail import TRAIL_LENGTH, TrailBuffer


def test_default_capacity():
    trail = TrailBuffer()
    assert trail.capacity == TRAIL_LENGTH == 100
    assert len(trail) == 0
    assert trail.last() is None
    assert trail.as_sequence() == []


def test_push_keeps_order_oldest_first():
    trail = TrailBuffer(5)
    for i in range(3):
        trail.push((float(i), 0.0))
    assert trail.as_sequence() == [(0.0, 0.0), (1.0, 0.0), (2.0, 0.0)]
    assert trail.last() == (2.0, 0.0)


def test_capacity_is_never_exceeded_and_oldest_is_evicted():
    trail = TrailBuffer(TRAIL_LENGTH)
    for i in range(TRAIL_LENGTH * 3 + 7):
        trail.push((float(i), float(-i)))
        assert len(trail) <= TRAIL_LENGTH
        if i >= TRAIL_LENGTH:
            assert (float(i - TRAIL_LENGTH), float(-(i - TRAIL_LENGTH))) not in trail.as_sequence()
    points = trail.as_sequence()
    assert len(points) == TRAIL_LENGTH
    assert points[0] == (float(TRAIL_LENGTH * 2 + 7), float(-(TRAIL_LENGTH * 2 + 7)))
    assert points[-1] == (float(TRAIL_LENGTH * 3 + 6), float(-(TRAIL_LENGTH * 3 + 6)))


def test_consecutive_duplicate_is_ignored():
    trail = TrailBuffer(4)
    trail.push((1.0, 2.0))
    trail.push((1.0, 2.0))
    assert len(trail) == 1


def test_non_consecutive_duplicate_is_kept():
    trail = TrailBuffer(4)
    trail.push((1.0, 2.0))
    trail.push((3.0, 4.0))
    trail.push((1.0, 2.0))
    assert trail.as_sequence() == [(1.0, 2.0), (3.0, 4.0), (1.0, 2.0)]


def test_equality_is_exact():
    trail = TrailBuffer(4)
    trail.push((1.0, 2.0))
    trail.push((1.0, 2.0 + 1e-12))
    assert len(trail) == 2


def test_duplicate_check_after_wraparound():
    trail = TrailBuffer(2)
    for p in [(0.0, 0.0), (1.0, 1.0), (2.0, 2.0), (2.0, 2.0)]:
        trail.push(p)
    assert list(trail) == [(1.0, 1.0), (2.0, 2.0)]


def test_invalid_capacity():
    with pytest.raises(ValueError):
        TrailBuffer(0)
