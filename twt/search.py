"""Tabu search over the adjacent-swap neighbourhood.

Every round the engine scores all n-1 adjacent swaps of the current order
with the O(1) delta evaluation, filters tabu moves and moves to the best
admissible neighbour even when it is worse than the current order. The best
order seen is kept as a separate snapshot.

Aspiration: a tabu move is admissible when it beats the best fitness found so
far. If no move is admissible at all the least bad tabu move is taken, so a
round always performs a swap.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from twt.config import validate_search_params
from twt.evaluation import evaluate_full, evaluate_swap_delta
from twt.models import Job, Schedule
from twt.tabu_memory import TabuMemory
from twt.trace import open_trace_file, write_round

logger = logging.getLogger("twt.search")


class SearchStatus(enum.Enum):
    INITIALIZED = "initialized"
    ITERATING = "iterating"
    DONE = "done"


@dataclass
class SearchState:
    """Mutable bookkeeping of a run."""

    current_fitness: int
    best_fitness: int
    best_round: int = 0
    round: int = 0
    status: SearchStatus = SearchStatus.INITIALIZED

    def update_best(self) -> bool:
        """Promote the current fitness to best. Returns True if improved."""
        if self.current_fitness < self.best_fitness:
            self.best_fitness = self.current_fitness
            self.best_round = self.round
            return True
        return False


@dataclass(frozen=True)
class RoundReport:
    """What happened in one round, handed to progress observers.

    Fields:
        round: 1-based round index.
        position: Left position of the applied swap.
        job_ids: Job ids of the current order after the swap.
        fitness: Fitness of the current order after the swap.
        best_fitness: Best fitness so far (including this round).
        aspiration: True if the applied move was tabu.
    """

    round: int
    position: int
    job_ids: tuple[int, ...]
    fitness: int
    best_fitness: int
    aspiration: bool = False


@dataclass
class SearchResult:
    """Outcome of a finished run.

    ``history`` holds the current fitness per round, ``history[0]`` being the
    initial schedule; ``best_history`` the best-so-far value at the same
    indices.
    """

    best_schedule: Schedule
    best_fitness: int
    best_round: int
    initial_fitness: int
    rounds: int
    history: list[int] = field(default_factory=list)
    best_history: list[int] = field(default_factory=list)

    @property
    def best_job_ids(self) -> list[int]:
        return self.best_schedule.job_ids()

    @property
    def best_order(self) -> tuple[int, ...]:
        return self.best_schedule.order


RoundCallback = Callable[[RoundReport], None]


class SearchEngine:
    """Adjacent-swap tabu search engine.

    Args:
        jobs: Initial order of the instance (also the job table).
        tabu_capacity: Tabu memory size L, ``0 <= L < n(n-1)/2``.
        rounds: Number of rounds to perform.
        on_round: Optional observer called after every round.

    Raises:
        ConfigurationError: For fewer than two jobs, an out-of-range tabu
            capacity or a negative round count.
    """

    def __init__(
        self,
        jobs: Sequence[Job],
        tabu_capacity: int,
        rounds: int,
        on_round: Optional[RoundCallback] = None,
    ) -> None:
        validate_search_params(len(jobs), tabu_capacity, rounds)
        self.rounds = rounds
        self.on_round = on_round
        self.current = Schedule(jobs)
        self.best = self.current.copy()
        self.tabu = TabuMemory(tabu_capacity)
        initial_fitness = evaluate_full(self.current)
        self.initial_fitness = initial_fitness
        self.state = SearchState(current_fitness=initial_fitness, best_fitness=initial_fitness)
        self.history: list[int] = [initial_fitness]
        self.best_history: list[int] = [initial_fitness]
        if rounds == 0:
            self.state.status = SearchStatus.DONE

    @property
    def done(self) -> bool:
        return self.state.status is SearchStatus.DONE

    def _select_move(self) -> tuple[int, int, bool]:
        """Pick the swap to apply: ``(position, fitness, is_tabu)``."""
        current = self.current
        fitness_prev = self.state.current_fitness
        best_fitness = self.state.best_fitness

        best_admissible: tuple[int, int] | None = None  # (fitness, position)
        best_admissible_tabu = False
        best_forbidden: tuple[int, int] | None = None
        time = 0
        for position in range(len(current) - 1):
            candidate = evaluate_swap_delta(current, position, time, fitness_prev)
            time += current[position].processing_time
            is_tabu = self.tabu.contains(*current.handle_pair(position))
            # strict comparisons keep the lowest position on ties
            if not is_tabu or candidate < best_fitness:
                if best_admissible is None or candidate < best_admissible[0]:
                    best_admissible = (candidate, position)
                    best_admissible_tabu = is_tabu
            elif best_forbidden is None or candidate < best_forbidden[0]:
                best_forbidden = (candidate, position)

        if best_admissible is not None:
            fitness, position = best_admissible
            return position, fitness, best_admissible_tabu
        # every move is tabu and none reaches a new best
        fitness, position = best_forbidden  # type: ignore[misc]
        logger.debug(
            "[tabu] round %d all moves tabu, fallback swap@%d", self.state.round, position
        )
        return position, fitness, True

    def step(self) -> RoundReport:
        """Perform one round and return its report."""
        if self.done:
            raise RuntimeError("Search already finished")
        state = self.state
        state.status = SearchStatus.ITERATING
        state.round += 1

        position, fitness, was_tabu = self._select_move()
        self.current.swap_adjacent(position)
        # the pair as it now stands; swapping it back is what becomes tabu
        self.tabu.record(*self.current.handle_pair(position))
        state.current_fitness = fitness

        if state.update_best():
            self.best = self.current.copy()
            logger.info("[tabu] round %d new best=%d", state.round, state.best_fitness)

        self.history.append(state.current_fitness)
        self.best_history.append(state.best_fitness)
        report = RoundReport(
            round=state.round,
            position=position,
            job_ids=tuple(self.current.job_ids()),
            fitness=state.current_fitness,
            best_fitness=state.best_fitness,
            aspiration=was_tabu,
        )
        logger.debug(
            "[tabu] round %d/%d swap@%d current=%d best=%d%s",
            state.round,
            self.rounds,
            position,
            state.current_fitness,
            state.best_fitness,
            " aspiration" if was_tabu else "",
        )
        if self.on_round is not None:
            self.on_round(report)
        if state.round >= self.rounds:
            state.status = SearchStatus.DONE
        return report

    def run(self) -> SearchResult:
        """Run the remaining rounds and return the result."""
        logger.info(
            "[tabu] start jobs=%d capacity=%d rounds=%d initial=%d",
            len(self.current),
            self.tabu.capacity,
            self.rounds,
            self.initial_fitness,
        )
        while not self.done:
            self.step()
        logger.info(
            "[tabu] done best=%d at round %d (initial=%d)",
            self.state.best_fitness,
            self.state.best_round,
            self.initial_fitness,
        )
        return self.result()

    def result(self) -> SearchResult:
        return SearchResult(
            best_schedule=self.best.copy(),
            best_fitness=self.state.best_fitness,
            best_round=self.state.best_round,
            initial_fitness=self.initial_fitness,
            rounds=self.state.round,
            history=list(self.history),
            best_history=list(self.best_history),
        )


def tabu_search(
    jobs: Sequence[Job],
    tabu_capacity: int,
    rounds: int,
    on_round: Optional[RoundCallback] = None,
    trace_path: str | None = None,
) -> SearchResult:
    """Build a :class:`SearchEngine`, run it and return the result.

    Args:
        jobs: Initial order of the instance.
        tabu_capacity: Tabu memory size.
        rounds: Number of rounds.
        on_round: Optional progress observer.
        trace_path: If given, a CSV row per round is written there.
    """
    # validated before the trace file is created
    engine = SearchEngine(jobs, tabu_capacity, rounds, on_round=on_round)
    with open_trace_file(trace_path) as trace:
        if trace is not None:

            def traced(report: RoundReport) -> None:
                write_round(trace, report)
                if on_round is not None:
                    on_round(report)

            engine.on_round = traced
        return engine.run()
