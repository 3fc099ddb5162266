import itertools
import logging
import os
from pathlib import Path
from typing import List, Optional

import matplotlib

matplotlib.use("Agg")  # Must be set before importing pyplot
import matplotlib.pyplot as plt  # noqa: E402
from matplotlib.patches import Patch  # noqa: E402

from twt.evaluation import start_times  # noqa: E402
from twt.models import Schedule  # noqa: E402

logger = logging.getLogger("twt.visualization")

ON_TIME_COLOR = "#7CFF00"
TARDY_COLOR = "#FF00CC"


def _ensure_dir(path: str):
    if path:
        os.makedirs(path, exist_ok=True)


def next_unique_path(path: str | Path) -> str:
    """``path`` when it is free, else the first free ``<stem>_<k><suffix>``."""
    base = Path(path)
    candidate = base
    for k in itertools.count(1):
        if not candidate.exists():
            break
        candidate = base.with_name(f"{base.stem}_{k}{base.suffix}")
    return str(candidate)


def save_convergence_plot(
    history: List[int],
    best_history: List[int],
    filepath: str,
    best_round: Optional[int] = None,
    title: str = "Tabu search convergence",
) -> str:
    """Plot current and best-so-far fitness per round and save it.

    Args:
        history: Current fitness, index 0 being the initial schedule.
        best_history: Best fitness at the same indices.
        filepath: Output image path (directory is created if missing).
        best_round: If given, the round of the best schedule is marked.

    Returns:
        The path the plot was written to.
    """
    rounds = list(range(len(history)))
    fig, ax = plt.subplots(figsize=(10, 6), constrained_layout=True)
    ax.plot(rounds, history, color="#00FFFF", linewidth=1.2, label="current")
    ax.plot(rounds, best_history, color="black", linewidth=2, label="best so far")

    if best_round is not None and 0 <= best_round < len(best_history):
        ax.annotate(
            f"Best: {best_history[best_round]}",
            xy=(best_round, best_history[best_round]),
            xytext=(10, 20),
            textcoords="offset points",
            bbox=dict(boxstyle="round,pad=0.3", facecolor="lightgreen", alpha=0.7),
            arrowprops=dict(arrowstyle="->", connectionstyle="arc3,rad=0"),
        )
    if history:
        ax.annotate(
            f"Start: {history[0]}",
            xy=(0, history[0]),
            xytext=(10, 10),
            textcoords="offset points",
            bbox=dict(boxstyle="round,pad=0.3", facecolor="yellow", alpha=0.7),
        )

    ax.set_xlabel("Round", fontsize=12)
    ax.set_ylabel("Total weighted tardiness", fontsize=12)
    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.grid(True, alpha=0.25, linestyle="--", linewidth=0.7)
    ax.legend(loc="upper right", frameon=False, fontsize=9)

    _ensure_dir(os.path.dirname(filepath))
    fig.savefig(filepath, dpi=180)
    plt.close(fig)
    logger.info("Convergence plot saved as: %s", filepath)
    return filepath


def save_schedule_chart(
    schedule: Schedule,
    fitness: int,
    filepath: str,
    show_labels: Optional[bool] = None,
) -> str:
    """Single machine Gantt chart of ``schedule``.

    Every job is one bar on the time axis, green when it completes on time
    and magenta when tardy. Due dates are drawn as red ticks below the
    bars.
    """
    n = len(schedule)
    starts = start_times(schedule)
    total = starts[-1] + schedule[n - 1].processing_time if n else 0
    fig, ax = plt.subplots(
        figsize=(min(10 + n * 0.1, 18), 3),
        constrained_layout=True,
    )
    if show_labels is None:
        # auto policy: only label bars when jobs <= 40
        show_labels = n <= 40
    for job, start in zip(schedule, starts):
        end = start + job.processing_time
        tardy = end > job.due_date
        ax.barh(
            0,
            job.processing_time,
            left=start,
            height=0.6,
            color=TARDY_COLOR if tardy else ON_TIME_COLOR,
            alpha=0.85,
            edgecolor="black",
            linewidth=0.6,
        )
        if show_labels and job.processing_time > 0:
            ax.text(
                start + job.processing_time / 2, 0, str(job.id), ha="center", va="center", fontsize=8
            )
        if 0 <= job.due_date <= total:
            ax.plot([job.due_date], [-0.45], marker="|", color="red", markersize=8)

    ax.set_xlabel("Time", fontsize=12)
    ax.set_yticks([0])
    ax.set_yticklabels(["M"])
    ax.set_ylim(-0.6, 0.6)
    ax.set_xlim(0, max(total, 1))
    ax.set_title(f"Schedule - total weighted tardiness = {fitness}", fontsize=14, fontweight="bold")
    ax.grid(True, alpha=0.25, axis="x", linestyle="--", linewidth=0.7)
    ax.legend(
        handles=[
            Patch(facecolor=ON_TIME_COLOR, edgecolor="black", label="on time"),
            Patch(facecolor=TARDY_COLOR, edgecolor="black", label="tardy"),
        ],
        loc="upper left",
        bbox_to_anchor=(1.01, 1),
        frameon=False,
        fontsize=8,
    )

    _ensure_dir(os.path.dirname(filepath))
    fig.savefig(filepath, dpi=180)
    plt.close(fig)
    logger.info("Schedule chart saved as: %s", filepath)
    return filepath
