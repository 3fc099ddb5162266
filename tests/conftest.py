"""Pytest configuration & custom summary hook.

Also ensures the project root is on sys.path so 'import twt.*' works without
installing the package, and provides small shared instances.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_root = Path(__file__).resolve().parents[1]
if str(_root) not in sys.path:
    sys.path.insert(0, str(_root))

from twt.models import Job  # noqa: E402


@pytest.fixture
def two_jobs() -> list[Job]:
    """Hand-checked instance: order (1, 2) costs 24, order (2, 1) costs 12."""
    return [
        Job(processing_time=3, due_date=10, weight=1, id=1),
        Job(processing_time=5, due_date=2, weight=4, id=2),
    ]


@pytest.fixture
def three_jobs() -> list[Job]:
    """Swapping the first pair removes all tardiness (50 -> 0)."""
    return [
        Job(processing_time=5, due_date=100, weight=1, id=1),
        Job(processing_time=1, due_date=1, weight=10, id=2),
        Job(processing_time=1, due_date=100, weight=1, id=3),
    ]


_OUTCOMES = ("passed", "failed", "error", "skipped")


def pytest_terminal_summary(terminalreporter, exitstatus, config) -> None:
    """One-line outcome tally, then the node ids of anything that broke."""
    stats = terminalreporter.stats
    tally = " | ".join(f"{outcome}: {len(stats.get(outcome, []))}" for outcome in _OUTCOMES)
    terminalreporter.section("twt", sep="-")
    terminalreporter.write_line(tally)
    broken = stats.get("failed", []) + stats.get("error", [])
    for rep in broken:
        terminalreporter.write_line(f"  {rep.when}: {rep.nodeid}")
