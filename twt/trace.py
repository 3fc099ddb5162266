"""Per-round CSV trace of a search run."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import IO, TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from twt.search import RoundReport

logger = logging.getLogger("twt.trace")

TRACE_HEADER = "round,position,fitness,best_fitness,aspiration,order\n"


@contextmanager
def open_trace_file(path: str | None) -> Iterator[IO[str] | None]:
    """Context manager yielding an open trace file, or None.

    None is yielded when no path is given or the file cannot be created; the
    search then runs without a trace.
    """
    trace_file = None
    if path:
        try:
            trace_file = open(path, "w", encoding="utf-8")
            trace_file.write(TRACE_HEADER)
        except OSError as e:
            logger.warning("Failed to open trace file %s: %s", path, e)
            trace_file = None
    try:
        yield trace_file
    finally:
        if trace_file is not None:
            trace_file.close()


def write_round(trace_file: IO[str], report: RoundReport) -> None:
    """Append one row for ``report``."""
    order = " ".join(map(str, report.job_ids))
    trace_file.write(
        f"{report.round},{report.position},{report.fitness},"
        f'{report.best_fitness},{int(report.aspiration)},"{order}"\n'
    )
