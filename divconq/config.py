"""Benchmark configuration.

A run of the benchmark harness is described by a :class:`BenchmarkConfig`,
either built in code or loaded from a YAML file with :func:`load_config`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import yaml

ALGORITHMS = ("mergesort", "quicksort", "select", "closest")
DATA_PATTERNS = ("random", "sorted", "reverse", "duplicates", "nearly_sorted")


@dataclass
class BenchmarkConfig:
    """Configuration for a size sweep of the benchmark harness.

    Parameters
    ----------
    algorithms:
        Names from ``mergesort``, ``quicksort``, ``select``, ``closest``;
        ``all`` expands to every one of them.
    min_size / max_size / growth_factor:
        Input sizes run from ``min_size`` and are multiplied by
        ``growth_factor`` while they do not exceed ``max_size``.
    trials:
        Repetitions per algorithm and size.
    data_pattern:
        Shape of the generated integer arrays.
    closest_max_size:
        Closest pair is skipped for sizes above this.
    brute_force_verify_limit:
        Closest pair results are checked against brute force up to this size.
    depth_slack:
        Constant added to the theoretical recursion depth bound.
    seed:
        Seed for the data generators; ``None`` draws fresh data every run.
    """

    algorithms: List[str] = field(default_factory=lambda: ["all"])
    min_size: int = 10
    max_size: int = 1000
    growth_factor: int = 2
    trials: int = 3
    data_pattern: str = "random"
    closest_max_size: int = 10000
    brute_force_verify_limit: int = 100
    depth_slack: int = 10
    seed: Optional[int] = None
    output_file: str = "metrics.csv"
    results_dir: str = "benchmarks/results"

    def __post_init__(self) -> None:
        if isinstance(self.algorithms, str):
            self.algorithms = [self.algorithms]
        names = [name.lower() for name in self.algorithms]
        if "all" in names:
            names = list(ALGORITHMS)
        unknown = [name for name in names if name not in ALGORITHMS]
        if unknown:
            raise ValueError(f"Unknown algorithm(s): {', '.join(unknown)}")
        self.algorithms = names

        if self.min_size < 1 or self.max_size < self.min_size:
            raise ValueError("sizes must satisfy 1 <= min_size <= max_size")
        if self.growth_factor < 2:
            raise ValueError("growth_factor must be at least 2")
        if self.trials < 1:
            raise ValueError("trials must be positive")
        if self.data_pattern not in DATA_PATTERNS:
            raise ValueError(f"Unknown data pattern: {self.data_pattern}")

    def sizes(self) -> List[int]:
        sizes = []
        n = self.min_size
        while n <= self.max_size:
            sizes.append(n)
            n *= self.growth_factor
        return sizes


def load_config(path: str) -> BenchmarkConfig:
    """Load :class:`BenchmarkConfig` from a YAML file."""
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    return BenchmarkConfig(**data)
