"""Run instrumentation and benchmarking."""

from .metrics import (
    DepthTracker,
    MetricsCollector,
    RunRecord,
    clear_all_metrics,
    current_tracker,
    enter_recursion,
    exit_recursion,
    export_to_csv,
    get_all_metrics,
    get_max_depth,
    reset_depth,
)

__all__ = [
    "DepthTracker",
    "MetricsCollector",
    "RunRecord",
    "clear_all_metrics",
    "current_tracker",
    "enter_recursion",
    "exit_recursion",
    "export_to_csv",
    "get_all_metrics",
    "get_max_depth",
    "reset_depth",
]
