"""Core data structures for single machine weighted tardiness instances.

This module defines:
    Job      -- immutable record (processing time, due date, weight, id).
    Schedule -- processing order kept as handles into an immutable job table.

A *handle* is the index of a job in the job table. Schedules only ever
reorder handles, the jobs themselves are never copied or mutated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence


@dataclass(frozen=True)
class Job:
    """Single job of a 1||sum(wjTj) instance.

    Attributes:
        processing_time: Duration on the machine (pj).
        due_date: Due date (dj), may be negative.
        weight: Tardiness weight (wj).
        id: Identifier printed in reports.
    """

    processing_time: int
    due_date: int
    weight: int
    id: int

    def __post_init__(self) -> None:
        if self.processing_time < 0:
            raise ValueError(f"Job {self.id}: negative processing time {self.processing_time}")
        if self.weight < 0:
            raise ValueError(f"Job {self.id}: negative weight {self.weight}")

    def tardiness(self, completion_time: int) -> int:
        return max(0, completion_time - self.due_date)

    def weighted_tardiness(self, completion_time: int) -> int:
        return self.weight * self.tardiness(completion_time)


def validate_permutation(order: Sequence[int], n: int) -> bool:
    """Validate that ``order`` is a permutation of ``range(n)``.

    Args:
        order: Candidate sequence of handles.
        n: Size of the job table.

    Returns:
        True if the order is valid (handy inside assertions).

    Raises:
        ValueError: If length is wrong, a handle is out of range or repeated.
    """
    if len(order) != n:
        raise ValueError(f"Incomplete permutation: expected {n} handles, got {len(order)}")
    seen = [False] * n
    for handle in order:
        if not (0 <= handle < n):
            raise ValueError(f"Job handle out of range: {handle}")
        if seen[handle]:
            raise ValueError(f"Duplicated job handle: {handle}")
        seen[handle] = True
    return True


class Schedule:
    """Processing order of a fixed job table.

    The only mutation is :meth:`swap_adjacent`, so the handles stay a
    permutation of ``range(len(jobs))`` for the lifetime of the object.
    """

    __slots__ = ("_jobs", "_order")

    def __init__(self, jobs: Sequence[Job], order: Iterable[int] | None = None) -> None:
        self._jobs: tuple[Job, ...] = tuple(jobs)
        if order is None:
            self._order = list(range(len(self._jobs)))
        else:
            self._order = list(order)
            validate_permutation(self._order, len(self._jobs))

    @property
    def jobs(self) -> tuple[Job, ...]:
        """Job table indexed by handle."""
        return self._jobs

    @property
    def order(self) -> tuple[int, ...]:
        return tuple(self._order)

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[Job]:
        jobs = self._jobs
        for handle in self._order:
            yield jobs[handle]

    def __getitem__(self, position: int) -> Job:
        return self._jobs[self._order[position]]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Schedule):
            return NotImplemented
        return self._jobs == other._jobs and self._order == other._order

    def __repr__(self) -> str:
        return f"Schedule({self.job_ids()})"

    def handle_pair(self, position: int) -> tuple[int, int]:
        """Handles at ``position`` and ``position + 1``."""
        return self._order[position], self._order[position + 1]

    def pair(self, position: int) -> tuple[Job, Job]:
        """Jobs at ``position`` and ``position + 1``."""
        return self._jobs[self._order[position]], self._jobs[self._order[position + 1]]

    def swap_adjacent(self, position: int) -> None:
        """Swap positions ``position`` and ``position + 1`` in place."""
        if not (0 <= position < len(self._order) - 1):
            raise IndexError(f"Adjacent swap position out of range: {position}")
        order = self._order
        order[position], order[position + 1] = order[position + 1], order[position]

    def copy(self) -> Schedule:
        snapshot = Schedule.__new__(Schedule)
        snapshot._jobs = self._jobs
        snapshot._order = self._order.copy()
        return snapshot

    def job_ids(self) -> list[int]:
        return [job.id for job in self]

    def completion_times(self) -> list[int]:
        """Completion time of the job at every position."""
        times: list[int] = []
        time = 0
        for job in self:
            time += job.processing_time
            times.append(time)
        return times
