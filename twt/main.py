import argparse
import logging
import os
import sys
from typing import List, Optional

from twt.config import ConfigurationError, RunConfig, load_config, validate_search_params
from twt.evaluation import evaluate_full
from twt.instances import BUILTIN_JOBS, generate_instance
from twt.models import Job, Schedule
from twt.parser import format_instance, load_instance
from twt.reporting import ProgressPrinter
from twt.search import SearchResult, tabu_search
from twt.visualization import next_unique_path, save_convergence_plot, save_schedule_chart

logger = logging.getLogger("twt.main")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Tabu search for single machine total weighted tardiness"
    )
    parser.add_argument(
        "--config",
        default="config.yaml",
        help="Path to the YAML/JSON configuration file (default: config.yaml)",
    )
    parser.add_argument("--rounds", type=int, help="Override tabu.rounds")
    parser.add_argument("--tabu-capacity", type=int, help="Override tabu.capacity")
    parser.add_argument("--seed", type=int, help="Override instance.seed (generated instances)")
    return parser


def resolve_instance(cfg: RunConfig) -> tuple[List[Job], str]:
    """Return the jobs of the configured instance and a short name for it."""
    inst = cfg.instance
    if inst.source == "file":
        jobs = load_instance(inst.file)  # type: ignore[arg-type]
        name = os.path.splitext(os.path.basename(inst.file))[0]  # type: ignore[type-var]
    elif inst.source == "generated":
        jobs = generate_instance(inst.jobs, seed=inst.seed)
        name = f"generated_n{inst.jobs}_seed{inst.seed}"
    else:
        jobs = list(BUILTIN_JOBS)
        name = "builtin15"
    return jobs, name


def _run_dir(root: Optional[str], name: str) -> Optional[str]:
    if not root:
        return None
    path = os.path.join(root, f"tabu_{name}")
    os.makedirs(path, exist_ok=True)
    return path


def save_instance(jobs: List[Job], out_dir: str) -> None:
    inst_path = os.path.join(out_dir, "instance.txt")
    with open(inst_path, "w", encoding="utf-8") as f:
        f.write(format_instance(jobs))
    logger.info("Saved generated instance to %s", inst_path)


def save_charts(result: SearchResult, out_dir: str) -> None:
    try:
        save_convergence_plot(
            result.history,
            result.best_history,
            next_unique_path(os.path.join(out_dir, "convergence.png")),
            best_round=result.best_round,
        )
        save_schedule_chart(
            result.best_schedule,
            result.best_fitness,
            next_unique_path(os.path.join(out_dir, "best_schedule.png")),
        )
    except Exception as e:  # pragma: no cover
        logger.warning("Failed to create charts: %s", e)


def run(cfg: RunConfig) -> SearchResult:
    jobs, name = resolve_instance(cfg)
    validate_search_params(len(jobs), cfg.tabu.capacity, cfg.tabu.rounds)
    logger.info(
        "Instance: %s jobs=%d capacity=%d rounds=%d",
        name,
        len(jobs),
        cfg.tabu.capacity,
        cfg.tabu.rounds,
    )

    out_dir = _run_dir(cfg.output.dir, name)
    trace_path = None
    if cfg.output.trace:
        if out_dir:
            trace_path = next_unique_path(os.path.join(out_dir, "trace.csv"))
        else:
            logger.warning("output.trace is set but output.dir is null; no trace is written")

    printer = None
    if cfg.output.print_progress:
        printer = ProgressPrinter(jobs, cfg.tabu.rounds)
        printer.initial(jobs, evaluate_full(Schedule(jobs)))

    result = tabu_search(
        jobs,
        cfg.tabu.capacity,
        cfg.tabu.rounds,
        on_round=printer,
        trace_path=trace_path,
    )
    if printer is not None:
        printer.best(result)
    if out_dir and cfg.instance.source == "generated":
        save_instance(jobs, out_dir)
    charts_dir = _run_dir(cfg.output.charts_dir, name)
    if charts_dir:
        save_charts(result, charts_dir)
    return result


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    # default handler until the configured level is known
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        cfg = load_config(args.config)
        if args.rounds is not None:
            cfg.tabu.rounds = args.rounds
        if args.tabu_capacity is not None:
            cfg.tabu.capacity = args.tabu_capacity
        if args.seed is not None:
            cfg.instance.seed = args.seed
        logging.getLogger().setLevel(getattr(logging, cfg.log_level.upper(), logging.INFO))
        run(cfg)
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        raise
    except Exception:
        logger.exception("Run failed")
        raise
    return 0


if __name__ == "__main__":
    sys.exit(main())
