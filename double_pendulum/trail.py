"""Bounded history of pendulum tip positions."""

from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

Point = Tuple[float, float]

TRAIL_LENGTH = 100


class TrailBuffer:
    """Fixed-capacity FIFO of 2D points backed by a ring buffer.

    The oldest point is evicted once the buffer is full. A point equal to the
    current last point is not stored again.
    """

    def __init__(self, capacity: int = TRAIL_LENGTH) -> None:
        if capacity < 1:
            raise ValueError(f"trail capacity must be positive, got {capacity}")
        self._slots: List[Optional[Point]] = [None] * capacity
        self._cursor = 0  # next slot to write
        self._size = 0

    @property
    def capacity(self) -> int:
        return len(self._slots)

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[Point]:
        return iter(self.as_sequence())

    def last(self) -> Optional[Point]:
        if self._size == 0:
            return None
        return self._slots[(self._cursor - 1) % self.capacity]

    def push(self, point: Point) -> None:
        point = (float(point[0]), float(point[1]))
        if self._size and self.last() == point:
            return
        self._slots[self._cursor] = point
        self._cursor = (self._cursor + 1) % self.capacity
        if self._size < self.capacity:
            self._size += 1

    def as_sequence(self) -> List[Point]:
        """Points oldest first."""
        start = (self._cursor - self._size) % self.capacity
        return [self._slots[(start + i) % self.capacity] for i in range(self._size)]
