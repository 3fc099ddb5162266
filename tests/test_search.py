from collections import Counter

import pytest

from twt.config import ConfigurationError
from twt.evaluation import evaluate_full, evaluate_swap_delta, start_times
from twt.instances import BUILTIN_JOBS, generate_instance
from twt.models import Schedule
from twt.search import RoundReport, SearchEngine, SearchStatus, tabu_search


def _neighbour_fitnesses(schedule: Schedule) -> list[int]:
    """Brute force fitness of every adjacent swap."""
    values = []
    for p in range(len(schedule) - 1):
        neighbour = schedule.copy()
        neighbour.swap_adjacent(p)
        values.append(evaluate_full(neighbour))
    return values


def test_two_job_scenario_by_hand(two_jobs) -> None:
    # capacity bound n(n-1)/2 = 1 leaves L = 0 as the only valid size
    result = tabu_search(two_jobs, tabu_capacity=0, rounds=1)
    assert result.initial_fitness == 24
    assert result.best_fitness == 12
    assert result.best_job_ids == [2, 1]
    assert result.best_round == 1
    assert result.history == [24, 12]


def test_two_job_capacity_one_rejected(two_jobs) -> None:
    with pytest.raises(ConfigurationError):
        SearchEngine(two_jobs, tabu_capacity=1, rounds=1)


def test_moves_even_when_worse(two_jobs) -> None:
    engine = SearchEngine(two_jobs, tabu_capacity=0, rounds=2)
    result = engine.run()
    assert result.history == [24, 12, 24]
    assert engine.state.current_fitness == 24
    assert engine.current.job_ids() == [1, 2]
    assert result.best_fitness == 12
    assert result.best_job_ids == [2, 1]
    assert result.best_round == 1


def test_zero_rounds_identity() -> None:
    jobs = list(BUILTIN_JOBS)
    engine = SearchEngine(jobs, tabu_capacity=11, rounds=0)
    assert engine.state.status is SearchStatus.DONE
    result = engine.run()
    initial = evaluate_full(Schedule(jobs))
    assert result.best_fitness == initial
    assert result.initial_fitness == initial
    assert result.best_round == 0
    assert result.best_job_ids == [j.id for j in jobs]
    assert result.history == [initial]


def test_step_after_done_raises(two_jobs) -> None:
    engine = SearchEngine(two_jobs, tabu_capacity=0, rounds=1)
    engine.step()
    assert engine.done
    with pytest.raises(RuntimeError):
        engine.step()


@pytest.mark.parametrize("n, capacity", [(4, 2), (5, 4), (6, 7), (15, 11)])
def test_invariants_every_round(n: int, capacity: int) -> None:
    jobs = list(BUILTIN_JOBS) if n == 15 else generate_instance(n, seed=n)
    engine = SearchEngine(jobs, tabu_capacity=capacity, rounds=60)
    ids = Counter(j.id for j in jobs)
    previous_best = engine.state.best_fitness
    while not engine.done:
        fitness_before = engine.state.current_fitness
        # delta evaluation agrees with a full re-evaluation for every candidate
        starts = start_times(engine.current)
        brute = _neighbour_fitnesses(engine.current)
        for p in range(n - 1):
            assert evaluate_swap_delta(engine.current, p, starts[p], fitness_before) == brute[p]

        report = engine.step()

        assert Counter(engine.current.job_ids()) == ids
        assert report.fitness == evaluate_full(engine.current)
        assert report.fitness == brute[report.position]
        assert len(engine.tabu) <= capacity
        assert engine.state.best_fitness <= previous_best
        assert engine.state.best_fitness == evaluate_full(engine.best)
        previous_best = engine.state.best_fitness


def test_selects_best_non_tabu_with_lowest_position() -> None:
    jobs = generate_instance(6, seed=3)
    engine = SearchEngine(jobs, tabu_capacity=3, rounds=1)
    brute = _neighbour_fitnesses(engine.current)
    report = engine.step()
    # empty tabu memory: plain best neighbour, first one on ties
    assert report.position == brute.index(min(brute))
    assert not report.aspiration


def test_swap_back_becomes_tabu(three_jobs) -> None:
    engine = SearchEngine(three_jobs, tabu_capacity=2, rounds=1)
    report = engine.step()
    assert report.position == 0
    assert engine.current.job_ids() == [2, 1, 3]
    # the pair as it now stands is recorded: undoing the move is forbidden
    assert engine.tabu.contains(*engine.current.handle_pair(0))
    assert not engine.tabu.contains(0, 1)


def test_aspiration_accepts_tabu_move_beating_best(three_jobs) -> None:
    engine = SearchEngine(three_jobs, tabu_capacity=1, rounds=1)
    assert engine.state.current_fitness == 50
    engine.tabu.record(*engine.current.handle_pair(0))
    report = engine.step()
    # swap at 0 is tabu but reaches 0 < 50; the free move would give 60
    assert report.position == 0
    assert report.fitness == 0
    assert report.aspiration
    assert engine.state.best_fitness == 0


def test_all_moves_tabu_still_moves() -> None:
    jobs = generate_instance(4, seed=11)
    engine = SearchEngine(jobs, tabu_capacity=5, rounds=3)
    for p in range(len(jobs) - 1):
        engine.tabu.record(*engine.current.handle_pair(p))
    brute = _neighbour_fitnesses(engine.current)
    before = engine.current.order

    report = engine.step()

    assert report.aspiration
    assert engine.current.order != before
    assert report.position == brute.index(min(brute))
    assert report.fitness == min(brute)
    assert engine.state.round == 1
    engine.run()
    assert engine.done


def test_determinism() -> None:
    jobs = generate_instance(12, seed=5)
    seen_a: list[RoundReport] = []
    seen_b: list[RoundReport] = []
    a = tabu_search(jobs, tabu_capacity=7, rounds=80, on_round=seen_a.append)
    b = tabu_search(jobs, tabu_capacity=7, rounds=80, on_round=seen_b.append)
    assert a.history == b.history
    assert a.best_job_ids == b.best_job_ids
    assert a.best_round == b.best_round
    assert seen_a == seen_b


def test_builtin_instance_improves() -> None:
    jobs = list(BUILTIN_JOBS)
    result = tabu_search(jobs, tabu_capacity=11, rounds=200)
    assert result.rounds == 200
    assert len(result.history) == 201
    assert result.best_fitness < result.initial_fitness
    assert result.best_fitness == min(result.history)
    assert result.history[result.best_round] == result.best_fitness
    assert result.best_history[-1] == result.best_fitness
    assert sorted(result.best_job_ids) == sorted(j.id for j in jobs)


def test_builtin_instance_first_aspiration_moves() -> None:
    # without aspiration the run would be the plain tabu walk up to round 68;
    # rounds 69 and 70 take tabu swaps because they reach a new best
    reports: list[RoundReport] = []
    tabu_search(list(BUILTIN_JOBS), tabu_capacity=11, rounds=70, on_round=reports.append)
    assert [r.round for r in reports if r.aspiration] == [69, 70]
    assert reports[68].best_fitness < reports[67].best_fitness
    assert reports[69].best_fitness < reports[68].best_fitness
    assert reports[68].fitness == reports[68].best_fitness
    assert reports[69].fitness == reports[69].best_fitness


def test_on_round_called_every_round(three_jobs) -> None:
    reports: list[RoundReport] = []
    tabu_search(three_jobs, tabu_capacity=1, rounds=5, on_round=reports.append)
    assert [r.round for r in reports] == [1, 2, 3, 4, 5]


@pytest.mark.parametrize(
    "n, capacity, rounds",
    [(1, 0, 1), (3, 3, 1), (3, -1, 1), (3, 0, -1), (4, 6, 10)],
)
def test_configuration_errors(n: int, capacity: int, rounds: int) -> None:
    jobs = generate_instance(n, seed=1)
    with pytest.raises(ConfigurationError):
        SearchEngine(jobs, tabu_capacity=capacity, rounds=rounds)
