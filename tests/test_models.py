import pytest

from twt.models import Job, Schedule, validate_permutation


def test_job_tardiness_and_weight() -> None:
    job = Job(processing_time=4, due_date=10, weight=3, id=7)
    assert job.tardiness(8) == 0
    assert job.tardiness(10) == 0
    assert job.tardiness(13) == 3
    assert job.weighted_tardiness(13) == 9


def test_job_is_immutable() -> None:
    job = Job(processing_time=1, due_date=1, weight=1, id=1)
    with pytest.raises(AttributeError):
        job.weight = 5  # type: ignore[misc]


@pytest.mark.parametrize("pj, wj", [(-1, 1), (1, -1)])
def test_job_rejects_negative_values(pj: int, wj: int) -> None:
    with pytest.raises(ValueError):
        Job(processing_time=pj, due_date=0, weight=wj, id=1)


def test_schedule_default_order_and_access(three_jobs) -> None:
    sched = Schedule(three_jobs)
    assert len(sched) == 3
    assert sched.order == (0, 1, 2)
    assert sched.job_ids() == [1, 2, 3]
    assert sched[1] is three_jobs[1]
    assert sched.pair(1) == (three_jobs[1], three_jobs[2])
    assert sched.handle_pair(0) == (0, 1)
    assert sched.completion_times() == [5, 6, 7]


def test_swap_adjacent_in_place_and_copy_independent(three_jobs) -> None:
    sched = Schedule(three_jobs)
    snapshot = sched.copy()
    sched.swap_adjacent(1)
    assert sched.job_ids() == [1, 3, 2]
    assert snapshot.job_ids() == [1, 2, 3]
    assert snapshot.jobs is sched.jobs
    assert sched != snapshot
    sched.swap_adjacent(1)
    assert sched == snapshot


@pytest.mark.parametrize("position", [-1, 2, 5])
def test_swap_adjacent_out_of_range(three_jobs, position: int) -> None:
    sched = Schedule(three_jobs)
    with pytest.raises(IndexError):
        sched.swap_adjacent(position)


def test_schedule_with_explicit_order(three_jobs) -> None:
    sched = Schedule(three_jobs, order=[2, 0, 1])
    assert sched.job_ids() == [3, 1, 2]


@pytest.mark.parametrize("order", [[0, 1], [0, 1, 1], [0, 1, 3], [0, 1, 2, 0]])
def test_invalid_permutation_raises(order: list[int]) -> None:
    with pytest.raises(ValueError):
        validate_permutation(order, 3)
