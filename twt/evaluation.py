"""Fitness (total weighted tardiness) evaluation.

Two entry points:
    evaluate_full       -- O(n) scan of a whole schedule.
    evaluate_swap_delta -- O(1) fitness after one adjacent swap.

The delta relies on the fact that swapping two neighbours changes neither
the start time of the pair nor the completion time of any job outside it
(the pair's total processing time is unchanged).
"""

from __future__ import annotations

from twt.models import Schedule


def evaluate_full(schedule: Schedule) -> int:
    """Total weighted tardiness of ``schedule``."""
    time = 0
    fitness = 0
    for job in schedule:
        time += job.processing_time
        fitness += job.weighted_tardiness(time)
    return fitness


def start_times(schedule: Schedule) -> list[int]:
    """Cumulative processing time before every position (first entry is 0)."""
    times: list[int] = []
    time = 0
    for job in schedule:
        times.append(time)
        time += job.processing_time
    return times


def evaluate_swap_delta(
    schedule: Schedule,
    position: int,
    time_before_position: int,
    fitness_before: int,
) -> int:
    """Fitness after swapping ``position`` and ``position + 1``.

    The schedule is not modified.

    Args:
        schedule: Current order, holding jobs A (at ``position``) and B.
        position: Left position of the pair, ``0 <= position <= n - 2``.
        time_before_position: Completion time of the job preceding A
            (0 for the first position).
        fitness_before: Total weighted tardiness of ``schedule``.

    Returns:
        Total weighted tardiness of the order with B before A.
    """
    first, second = schedule.pair(position)
    pair_end = time_before_position + first.processing_time + second.processing_time

    # remove the pair as it stands: A, then B
    fitness = fitness_before
    fitness -= first.weighted_tardiness(time_before_position + first.processing_time)
    fitness -= second.weighted_tardiness(pair_end)

    # add it back swapped: B, then A
    fitness += second.weighted_tardiness(time_before_position + second.processing_time)
    fitness += first.weighted_tardiness(pair_end)
    return fitness
