"""Short-term tabu memory with a fixed number of slots."""

from __future__ import annotations

from collections import deque
from typing import Iterator

Move = tuple[int, int]  # (handle of the left job, handle of the right job)


class TabuMemory:
    """FIFO window of the most recent moves.

    A record is an *ordered* pair: ``(a, b)`` only matches while job ``a``
    stands immediately before job ``b``. Once ``capacity`` records are held,
    recording a new move evicts the oldest one.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError(f"Tabu capacity must be non-negative, got {capacity}")
        self._capacity = capacity
        self._records: deque[Move] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Move]:
        """Records from the oldest to the newest."""
        return iter(self._records)

    def __repr__(self) -> str:
        return f"TabuMemory(capacity={self._capacity}, records={list(self._records)})"

    def contains(self, job_a: int, job_b: int) -> bool:
        return (job_a, job_b) in self._records

    def record(self, job_a: int, job_b: int) -> None:
        # deque(maxlen=...) drops the leftmost record when full
        self._records.append((job_a, job_b))

    def clear(self) -> None:
        self._records.clear()
