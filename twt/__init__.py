"""Tabu search for single machine total weighted tardiness (1||sum wjTj).

Exports the data structures and the search entry points.
"""

from twt.config import ConfigurationError  # noqa: F401
from twt.evaluation import evaluate_full, evaluate_swap_delta  # noqa: F401
from twt.models import Job, Schedule  # noqa: F401
from twt.search import SearchEngine, SearchResult, tabu_search  # noqa: F401
from twt.tabu_memory import TabuMemory  # noqa: F401

__all__ = [
    "ConfigurationError",
    "Job",
    "Schedule",
    "SearchEngine",
    "SearchResult",
    "TabuMemory",
    "evaluate_full",
    "evaluate_swap_delta",
    "tabu_search",
]
