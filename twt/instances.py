"""Ready-made instances: the classic 15-job example and a random generator."""

import random
from typing import List

from twt.models import Job

# (pj, dj, wj, id) in initial processing order
_BUILTIN_ROWS = [
    (16, 67, 45, 2),
    (6, 105, 35, 3),
    (12, 8, 80, 15),
    (19, 124, 28, 6),
    (9, 77, 1, 5),
    (20, 202, 70, 10),
    (13, 157, 14, 8),
    (1, 194, 21, 7),
    (5, 5, 69, 13),
    (18, 7, 62, 14),
    (4, 36, 21, 1),
    (5, 53, 73, 4),
    (19, 61, 23, 12),
    (12, 25, 76, 9),
    (20, 43, 51, 11),
]

BUILTIN_JOBS: tuple[Job, ...] = tuple(Job(p, d, w, i) for p, d, w, i in _BUILTIN_ROWS)


def generate_instance(
    n: int,
    seed: int = 0,
    max_processing_time: int = 20,
    max_weight: int = 80,
) -> List[Job]:
    """Generate a random instance with ids ``1..n``.

    Due dates are drawn from ``[0, sum(pj)]`` so that a mix of early and
    tardy jobs is likely.
    """
    if n < 1:
        raise ValueError(f"Number of jobs must be positive, got {n}")
    rng = random.Random(seed)
    processing = [rng.randint(1, max_processing_time) for _ in range(n)]
    horizon = sum(processing)
    return [
        Job(
            processing_time=processing[i],
            due_date=rng.randint(0, horizon),
            weight=rng.randint(1, max_weight),
            id=i + 1,
        )
        for i in range(n)
    ]
