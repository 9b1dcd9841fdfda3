#!/usr/bin/env python3
"""Command line driver for the divide-and-conquer laboratory.

Runs a size sweep of the selected algorithms and writes one CSV row per run::

    divconq mergesort 100000 results.csv
    divconq all 4096 --trials 5 --pattern duplicates
    divconq --config config/benchmark.yaml

``--verify`` runs the built-in correctness checks and ``--demo`` prints a
short demonstration on a fixed input.
"""

from __future__ import annotations

import argparse
import dataclasses
import random
import sys
from typing import List, Optional, Sequence

import structlog

from .config import ALGORITHMS, DATA_PATTERNS, BenchmarkConfig, load_config
from .geometry.advanced.closest_pair import ClosestPair, Point, generate_random_points
from .logging_setup import LoggingConfig, setup_logging
from .performance.benchmark_system import DataGenerator, PerformanceBenchmark, log2_floor
from .performance.metrics import RunRecord, get_max_depth, reset_depth
from .selection.advanced.deterministic_select import DeterministicSelect
from .sorting.advanced.merge_sort import MergeSort
from .sorting.advanced.quick_sort import QuickSort
from .utils import is_sorted

log = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="divconq",
        description="Benchmark instrumented divide-and-conquer algorithms",
    )
    parser.add_argument(
        "algorithm",
        nargs="?",
        choices=[*ALGORITHMS, "all"],
        help="Algorithm to benchmark",
    )
    parser.add_argument("max_size", nargs="?", type=int, help="Largest input size of the sweep")
    parser.add_argument("output_file", nargs="?", help="CSV file for the metrics (default: metrics.csv)")
    parser.add_argument("--config", help="YAML benchmark configuration")
    parser.add_argument("--trials", type=int, help="Trials per algorithm and size")
    parser.add_argument("--pattern", choices=DATA_PATTERNS, help="Shape of the generated arrays")
    parser.add_argument("--seed", type=int, help="Seed for the data generators")
    parser.add_argument("--results-dir", help="Directory for the CSV, JSON summary and log")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--verify", action="store_true", help="Run the correctness checks and exit")
    parser.add_argument("--demo", action="store_true", help="Print a demonstration and exit")
    return parser


def _resolve_config(args: argparse.Namespace, parser: argparse.ArgumentParser) -> BenchmarkConfig:
    config = load_config(args.config) if args.config else None
    if config is None and (args.algorithm is None or args.max_size is None):
        parser.error("algorithm and max_size are required unless --config is given")

    overrides = {}
    if args.algorithm is not None:
        overrides["algorithms"] = [args.algorithm]
    if args.max_size is not None:
        overrides["max_size"] = args.max_size
    if args.output_file is not None:
        overrides["output_file"] = args.output_file
    if args.trials is not None:
        overrides["trials"] = args.trials
    if args.pattern is not None:
        overrides["data_pattern"] = args.pattern
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.results_dir is not None:
        overrides["results_dir"] = args.results_dir
    if config is None:
        # positional runs write into the working directory
        overrides.setdefault("results_dir", ".")
        return BenchmarkConfig(**overrides)
    return dataclasses.replace(config, **overrides)


def _print_record(record: RunRecord) -> None:
    print(f"  {record}")
    log.info(
        "run_recorded",
        algorithm=record.algorithm_name,
        n=record.input_size,
        millis=round(record.elapsed_millis, 3),
        comparisons=record.comparisons,
        depth=record.max_depth,
    )


def run_benchmarks(config: BenchmarkConfig) -> int:
    print("=== Running Benchmarks ===")
    print(f"Algorithms: {', '.join(config.algorithms)}")
    print(f"Sizes: {config.min_size}..{config.max_size}, trials: {config.trials}")

    benchmark = PerformanceBenchmark(config)
    try:
        result = benchmark.run(on_record=_print_record)
    finally:
        benchmark.close()

    for violation in result.violations:
        print(f"  VIOLATION {violation.algorithm_name} n={violation.input_size}: {violation.message}",
              file=sys.stderr)
    for error in result.errors:
        print(f"  ERROR {error}", file=sys.stderr)
    if result.csv_path:
        print(f"Results exported to {result.csv_path}")
    return 0 if result.passed else 1


def _check(label: str, outcomes: List[bool]) -> bool:
    print(f"  {label}: passed {sum(outcomes)}/{len(outcomes)}")
    return all(outcomes)


def run_correctness_tests(seed: Optional[int] = None) -> bool:
    """Check every algorithm against an independent oracle; return True when all pass."""
    rng = random.Random(seed)
    generator = DataGenerator(seed)
    ok = True
    print("=== Running Correctness Tests ===")

    merge_sort = MergeSort()
    cases = [
        generator.random_integers(100),
        generator.sorted_integers(100),
        generator.reverse_sorted_integers(100),
        generator.duplicate_heavy(100),
        [],
        [42],
        [3, 1, 4, 1, 5, 9, 2, 6],
    ]
    outcomes = []
    for case in cases:
        merge_sort.sort(case)
        outcomes.append(is_sorted(case))
    ok &= _check("MergeSort", outcomes)

    quick_sort = QuickSort(seed=seed)
    random_data = generator.random_integers(1000)
    quick_sort.sort(random_data)
    duplicates = generator.duplicate_heavy(1000)
    quick_sort.sort_3way(duplicates)
    ascending = generator.sorted_integers(1000)
    quick_sort.sort_median_of_three(ascending)
    reset_depth()
    quick_sort.sort(generator.random_integers(1024))
    depth_bound = 2 * log2_floor(1024) + 10
    ok &= _check("QuickSort", [
        is_sorted(random_data),
        is_sorted(duplicates),
        is_sorted(ascending),
        get_max_depth() <= depth_bound,
    ])

    select = DeterministicSelect(seed=seed)
    outcomes = []
    for _ in range(100):
        size = rng.randint(10, 999)
        data = generator.random_integers(size)
        k = rng.randrange(size)
        expected = sorted(data)[k]
        outcomes.append(select.select(data, k) == expected == select.quick_select(data, k))
    ok &= _check("DeterministicSelect", outcomes)

    closest = ClosestPair()
    outcomes = []
    for n in (10, 20, 50, 100, 200):
        points = generate_random_points(n, 100.0, rng)
        fast = closest.find_closest_pair(points).distance
        slow = closest.find_closest_pair_brute_force(points).distance
        outcomes.append(abs(fast - slow) < 1e-4)
    ok &= _check("ClosestPair vs brute force", outcomes)

    print("=== All Tests Completed ===")
    return ok


def run_demo() -> None:
    demo = [64, 34, 25, 12, 22, 11, 90]
    print("=== Algorithm Demonstration ===")
    print(f"Original array: {demo}")
    print(f"After MergeSort: {MergeSort().execute(demo)}")
    print(f"After QuickSort: {QuickSort().execute(demo)}")
    print(f"Median (3rd element): {DeterministicSelect().select(demo, 3)}")

    points = [Point(2, 3), Point(12, 30), Point(40, 50), Point(5, 1), Point(12, 10), Point(3, 4)]
    print("Closest Pair Demo:")
    for point in points:
        print(f"  {point}")
    print(f"Closest pair: {ClosestPair().find_closest_pair(points)}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(LoggingConfig(level=args.log_level))

    if args.demo:
        run_demo()
        return 0
    if args.verify:
        return 0 if run_correctness_tests(args.seed) else 1

    config = _resolve_config(args, parser)
    return run_benchmarks(config)


if __name__ == "__main__":
    sys.exit(main())
