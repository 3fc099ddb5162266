"""Reader for job table files.

Format (whitespace separated integers, ``#`` starts a comment)::

    jobs 3              # optional, checked against the number of rows
    # id  pj  dj  wj
    2     16  67  45
    3      6 105  35
    15    12   8  80

Rows keep their file order, which is the initial schedule of a run.
"""

from __future__ import annotations

from twt.models import Job


def parse_instance(text: str) -> list[Job]:
    """Parse the contents of a job table file.

    Raises:
        ValueError: On a malformed row, negative processing time or weight,
            duplicated job id, a ``jobs`` header that does not match the row
            count, or when no job is defined.
    """
    jobs: list[Job] = []
    declared: int | None = None
    seen_ids: set[int] = set()
    for line_no, raw in enumerate(text.splitlines(), start=1):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        tokens = line.split()
        if tokens[0].lower() == "jobs":
            if declared is not None or jobs:
                raise ValueError(f"line {line_no}: 'jobs' header must come first and only once")
            if len(tokens) != 2:
                raise ValueError(f"line {line_no}: invalid header {line!r}")
            try:
                declared = int(tokens[1])
            except ValueError as e:
                raise ValueError(f"line {line_no}: invalid job count {tokens[1]!r}") from e
            continue
        if len(tokens) != 4:
            raise ValueError(
                f"line {line_no}: expected 4 values (id pj dj wj), got {len(tokens)}"
            )
        try:
            job_id, pj, dj, wj = map(int, tokens)
        except ValueError as e:
            raise ValueError(f"line {line_no}: non-integer value in {line!r}") from e
        if job_id in seen_ids:
            raise ValueError(f"line {line_no}: duplicated job id {job_id}")
        seen_ids.add(job_id)
        try:
            jobs.append(Job(processing_time=pj, due_date=dj, weight=wj, id=job_id))
        except ValueError as e:
            raise ValueError(f"line {line_no}: {e}") from e

    if not jobs:
        raise ValueError("No jobs defined")
    if declared is not None and declared != len(jobs):
        raise ValueError(f"Header declares {declared} jobs but {len(jobs)} were given")
    return jobs


def load_instance(file_path: str) -> list[Job]:
    """Read a job table file (see module docstring for the format)."""
    with open(file_path, "r", encoding="utf-8") as f:
        return parse_instance(f.read())


def format_instance(jobs: list[Job]) -> str:
    """Inverse of :func:`parse_instance`."""
    lines = [f"jobs {len(jobs)}", "# id pj dj wj"]
    lines += [f"{j.id} {j.processing_time} {j.due_date} {j.weight}" for j in jobs]
    return "\n".join(lines) + "\n"
