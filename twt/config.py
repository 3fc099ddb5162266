"""Run configuration: parameter containers, file loading and validation.

The configuration file is YAML (``.yml``/``.yaml``) or JSON and is split into
sections::

    log_level: INFO
    instance: {source: builtin | file | generated, file, jobs, seed}
    tabu:     {capacity, rounds}
    output:   {print_progress, dir, charts_dir, trace}

Each section is turned into a small dataclass so the rest of the code never
touches raw dictionaries.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Any, Dict

import yaml

INSTANCE_SOURCES = ("builtin", "file", "generated")


class ConfigurationError(ValueError):
    """Raised once at startup when the run cannot be configured."""


@dataclass(slots=True)
class TabuParams:
    """Tabu search hyper-parameters.

    Attributes:
        capacity: Number of moves kept in the tabu memory (L).
        rounds: Number of search rounds, fixed in advance.
    """

    capacity: int = 11
    rounds: int = 200


@dataclass(slots=True)
class InstanceSettings:
    source: str = "builtin"
    file: str | None = None
    jobs: int = 15
    seed: int = 0


@dataclass(slots=True)
class OutputSettings:
    """Where a run writes its files.

    ``dir`` receives the trace and generated instances, ``charts_dir`` the
    images; None disables the respective outputs.
    """

    print_progress: bool = True
    dir: str | None = "output"
    charts_dir: str | None = "charts"
    trace: bool = True


@dataclass(slots=True)
class RunConfig:
    instance: InstanceSettings
    tabu: TabuParams
    output: OutputSettings
    log_level: str = "INFO"


def validate_search_params(n_jobs: int, capacity: int, rounds: int) -> None:
    """Check the search configuration against the instance size.

    Raises:
        ConfigurationError: If fewer than two jobs are given, the capacity is
            negative or not strictly below ``n(n-1)/2`` (a longer list could
            forbid every move), or the round count is negative.
    """
    if n_jobs < 2:
        raise ConfigurationError(f"At least 2 jobs are required for a swap, got {n_jobs}")
    if capacity < 0:
        raise ConfigurationError(f"Tabu capacity must be non-negative, got {capacity}")
    limit = n_jobs * (n_jobs - 1) // 2
    if capacity >= limit:
        raise ConfigurationError(
            f"Tabu list is too long: capacity {capacity} must be < {limit} for {n_jobs} jobs"
        )
    if rounds < 0:
        raise ConfigurationError(f"Round count must be non-negative, got {rounds}")


def _section(cfg: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = cfg.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigurationError(f"Section '{name}' must be a mapping, got {type(value).__name__}")
    return value


def _as_int(section: str, key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{section}.{key} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{section}.{key} must be an integer, got {value!r}") from e


def _as_bool(section: str, key: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(f"{section}.{key} must be true or false, got {value!r}")
    return value


def _as_dir(section: str, key: str, value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str) or not value:
        raise ConfigurationError(f"{section}.{key} must be a path or null, got {value!r}")
    return value


def parse_config(cfg: Dict[str, Any]) -> RunConfig:
    """Build a :class:`RunConfig` from an already loaded mapping."""
    if not isinstance(cfg, dict):
        raise ConfigurationError("Configuration root must be a mapping")
    inst_cfg = _section(cfg, "instance")
    tabu_cfg = _section(cfg, "tabu")
    out_cfg = _section(cfg, "output")

    source = str(inst_cfg.get("source", "builtin"))
    if source not in INSTANCE_SOURCES:
        raise ConfigurationError(
            f"instance.source must be one of {', '.join(INSTANCE_SOURCES)}, got {source!r}"
        )
    instance = InstanceSettings(
        source=source,
        file=inst_cfg.get("file"),
        jobs=_as_int("instance", "jobs", inst_cfg.get("jobs", 15)),
        seed=_as_int("instance", "seed", inst_cfg.get("seed", 0)),
    )
    if instance.source == "file" and not instance.file:
        raise ConfigurationError("instance.file is required when instance.source is 'file'")

    tabu = TabuParams(
        capacity=_as_int("tabu", "capacity", tabu_cfg.get("capacity", 11)),
        rounds=_as_int("tabu", "rounds", tabu_cfg.get("rounds", 200)),
    )
    output = OutputSettings(
        print_progress=_as_bool("output", "print_progress", out_cfg.get("print_progress", True)),
        dir=_as_dir("output", "dir", out_cfg.get("dir", "output")),
        charts_dir=_as_dir("output", "charts_dir", out_cfg.get("charts_dir", "charts")),
        trace=_as_bool("output", "trace", out_cfg.get("trace", True)),
    )
    return RunConfig(
        instance=instance,
        tabu=tabu,
        output=output,
        log_level=str(cfg.get("log_level", "INFO")),
    )


def load_config(config_file: str = "config.yaml") -> RunConfig:
    """Load and parse a YAML or JSON configuration file."""
    if not os.path.isfile(config_file):
        raise FileNotFoundError(f"Config file not found: {config_file}")
    with open(config_file, "r", encoding="utf-8") as f:
        text = f.read()
    if config_file.endswith((".yml", ".yaml")):
        try:
            raw = yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_file}: {e}") from e
    else:
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {config_file}: {e}") from e
    return parse_config(raw)
