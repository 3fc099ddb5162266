"""Console report of a run.

Layout::

    Initial schedule (Id: Pj, Dj, Wj):
     2: 16,  67, 45
     3:  6, 105, 35
    ...
    Fitness: <initial fitness>

    Iteration step: best schedule, (fitness):
      0:  2,  3, 15, ..., 11, (<fitness>)
      1:  2, 15,  3, ..., 11, (<fitness>)
    ...

    Best schedule:
     57: 13, 14, ...,  6, (<best fitness>)

Column widths follow the largest value of each column.
"""

from __future__ import annotations

from typing import Callable, Iterable, Sequence

from twt.models import Job
from twt.search import RoundReport, SearchResult


def _width(values: Iterable[int]) -> int:
    return max((len(str(v)) for v in values), default=1)


def format_round(
    job_ids: Iterable[int],
    fitness: int,
    round_index: int,
    round_width: int = 3,
    id_width: int = 2,
) -> str:
    """One line of the progress table: round, job order and fitness."""
    ids = "".join(f"{job_id:{id_width}d}, " for job_id in job_ids)
    return f"{round_index:{round_width}d}: {ids}({fitness})"


def format_initial_schedule(jobs: Sequence[Job], fitness: int) -> str:
    """Block printed before the first round."""
    id_w = _width(j.id for j in jobs)
    pj_w = _width(j.processing_time for j in jobs)
    dj_w = _width(j.due_date for j in jobs)
    wj_w = _width(j.weight for j in jobs)
    lines = ["Initial schedule (Id: Pj, Dj, Wj):"]
    for j in jobs:
        lines.append(
            f"{j.id:{id_w}d}: {j.processing_time:{pj_w}d}, {j.due_date:{dj_w}d}, {j.weight:{wj_w}d}"
        )
    lines.append(f"Fitness: {fitness}")
    lines.append("")
    lines.append("Iteration step: best schedule, (fitness):")
    return "\n".join(lines)


def format_best(result: SearchResult, round_width: int = 3, id_width: int = 2) -> str:
    line = format_round(
        result.best_job_ids, result.best_fitness, result.best_round, round_width, id_width
    )
    return f"\nBest schedule:\n{line}"


class ProgressPrinter:
    """Round observer printing the progress table.

    Widths are fixed up front from the instance and the round count so all
    lines align.
    """

    def __init__(
        self,
        jobs: Sequence[Job],
        rounds: int,
        write: Callable[[str], object] = print,
    ) -> None:
        self.round_width = _width([rounds])
        self.id_width = _width(j.id for j in jobs)
        self.write = write

    def initial(self, jobs: Sequence[Job], fitness: int) -> None:
        self.write(format_initial_schedule(jobs, fitness))
        self.write(self.line([j.id for j in jobs], fitness, 0))

    def line(self, job_ids: Iterable[int], fitness: int, round_index: int) -> str:
        return format_round(job_ids, fitness, round_index, self.round_width, self.id_width)

    def __call__(self, report: RoundReport) -> None:
        self.write(self.line(report.job_ids, report.fitness, report.round))

    def best(self, result: SearchResult) -> None:
        self.write(format_best(result, self.round_width, self.id_width))
