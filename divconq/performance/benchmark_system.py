"""
分治算法基准测试系统

按规模倍增扫描各算法，每个规模重复多次：生成数据、清零深度、运行、
用独立的参照（排序结果 / 暴力最近点对）验证正确性、检查递归深度上界，
并把每次运行归档到全局指标历史，最后导出 CSV 与 JSON 摘要。
"""

import json
import logging
import math
import statistics
from dataclasses import dataclass, asdict, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Any, Optional, Callable
from enum import Enum

import numpy as np

from ..config import BenchmarkConfig
from ..geometry.advanced.closest_pair import ClosestPair, Point
from ..selection.advanced.deterministic_select import DeterministicSelect
from ..sorting.advanced.merge_sort import MergeSort
from ..sorting.advanced.quick_sort import QuickSort
from ..utils import is_sorted
from .metrics import RunRecord, clear_all_metrics, export_to_csv, reset_depth

CLOSEST_PAIR_TOLERANCE = 1e-4


class BenchmarkStatus(Enum):
    """基准测试状态"""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class Violation:
    """一次正确性或深度上界违例"""
    algorithm_name: str
    input_size: int
    trial: int
    message: str


@dataclass
class BenchmarkResult:
    """基准测试结果"""
    config: BenchmarkConfig
    records: List[RunRecord] = field(default_factory=list)
    violations: List[Violation] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    status: BenchmarkStatus = BenchmarkStatus.PENDING
    start_time: str = field(default_factory=lambda: datetime.now().isoformat())
    end_time: Optional[str] = None
    error_message: Optional[str] = None
    csv_path: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.status == BenchmarkStatus.COMPLETED and not self.violations and not self.errors

    def get_summary_statistics(self) -> Dict[str, Any]:
        """按算法与输入规模分组的汇总统计"""
        groups: Dict[str, Dict[int, List[RunRecord]]] = {}
        for record in self.records:
            groups.setdefault(record.algorithm_name, {}).setdefault(record.input_size, []).append(record)

        summary: Dict[str, Any] = {}
        for name, by_size in groups.items():
            summary[name] = {}
            for size, records in sorted(by_size.items()):
                times = [r.elapsed_millis for r in records]
                comparisons = [r.comparisons for r in records]
                depths = [r.max_depth for r in records]
                summary[name][f"size_{size}"] = {
                    "input_size": size,
                    "sample_count": len(records),
                    "time_millis": {
                        "mean": statistics.mean(times),
                        "median": statistics.median(times),
                        "std": statistics.stdev(times) if len(times) > 1 else 0,
                        "min": min(times),
                        "max": max(times),
                    },
                    "comparisons_mean": statistics.mean(comparisons),
                    "max_depth": max(depths),
                }
        return summary


class DataGenerator:
    """测试数据生成器"""

    def __init__(self, seed: Optional[int] = None):
        self.rng = np.random.default_rng(seed)

    def random_integers(self, size: int) -> List[int]:
        """[0, 10n) 范围内的随机整数"""
        return self.rng.integers(0, max(1, size * 10), size).tolist()

    @staticmethod
    def sorted_integers(size: int) -> List[int]:
        return list(range(size))

    @staticmethod
    def reverse_sorted_integers(size: int) -> List[int]:
        return list(range(size, 0, -1))

    def duplicate_heavy(self, size: int) -> List[int]:
        """约 10% 不同取值的数据"""
        unique_count = max(1, size // 10)
        return self.rng.integers(0, unique_count, size).tolist()

    def nearly_sorted(self, size: int, disorder_ratio: float = 0.1) -> List[int]:
        """生成接近有序的数据"""
        data = list(range(size))
        if size < 2:
            return data
        for _ in range(int(size * disorder_ratio)):
            i, j = self.rng.choice(size, 2, replace=False)
            data[i], data[j] = data[j], data[i]
        return data

    def integers(self, pattern: str, size: int) -> List[int]:
        generators: Dict[str, Callable[[int], List[int]]] = {
            "random": self.random_integers,
            "sorted": self.sorted_integers,
            "reverse": self.reverse_sorted_integers,
            "duplicates": self.duplicate_heavy,
            "nearly_sorted": self.nearly_sorted,
        }
        return generators[pattern](size)

    def points(self, size: int, max_coord: float = 1000.0) -> List[Point]:
        coords = self.rng.random((size, 2)) * max_coord
        return [Point(float(x), float(y)) for x, y in coords]


def log2_ceil(n: int) -> int:
    return math.ceil(math.log2(n)) if n > 1 else 0


def log2_floor(n: int) -> int:
    return max(0, n.bit_length() - 1)


class PerformanceBenchmark:
    """
    分治算法基准测试系统

    对配置中的每个算法、每个输入规模运行若干次试验，
    验证结果并把指标写入全局历史。
    """

    def __init__(self, config: Optional[BenchmarkConfig] = None, results_dir: Optional[str] = None):
        """
        初始化基准测试系统

        Args:
            config: 测试配置，缺省时使用默认配置
            results_dir: 结果存储目录，覆盖配置中的目录
        """
        self.config = config or BenchmarkConfig()
        self.results_dir = Path(results_dir or self.config.results_dir)
        self.results_dir.mkdir(parents=True, exist_ok=True)

        self.logger = logging.getLogger(__name__)
        self._file_handler: Optional[logging.Handler] = None
        self._setup_logging()

        self.data_generator = DataGenerator(self.config.seed)
        self._on_record: Optional[Callable[[RunRecord], None]] = None
        self._runners: Dict[str, Callable[[int, int, BenchmarkResult], None]] = {
            "mergesort": self._run_merge_sort,
            "quicksort": self._run_quick_sort,
            "select": self._run_select,
            "closest": self._run_closest_pair,
        }

    def _setup_logging(self) -> None:
        """设置日志记录"""
        log_file = self.results_dir / "benchmark.log"

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        self._file_handler = logging.FileHandler(log_file, encoding="utf-8")
        self._file_handler.setFormatter(formatter)

        self.logger.addHandler(self._file_handler)
        self.logger.setLevel(logging.INFO)

    def close(self) -> None:
        """移除并关闭日志文件处理器"""
        if self._file_handler is not None:
            self.logger.removeHandler(self._file_handler)
            self._file_handler.close()
            self._file_handler = None

    def run(self, on_record: Optional[Callable[[RunRecord], None]] = None) -> BenchmarkResult:
        """
        运行整个规模扫描

        Args:
            on_record: 每完成一次运行后的回调

        Returns:
            测试结果
        """
        cfg = self.config
        result = BenchmarkResult(config=cfg, status=BenchmarkStatus.RUNNING)
        self._on_record = on_record
        clear_all_metrics()

        try:
            self.logger.info(f"开始基准测试: {', '.join(cfg.algorithms)}")
            for size in cfg.sizes():
                self.logger.info(f"测试数据大小: {size}")
                for trial in range(cfg.trials):
                    for name in cfg.algorithms:
                        if name == "closest" and size > cfg.closest_max_size:
                            continue
                        try:
                            self._runners[name](size, trial, result)
                        except Exception as e:
                            message = f"{name} n={size} trial={trial}: {e}"
                            self.logger.error(f"测试迭代失败 ({message})")
                            result.errors.append(message)

            csv_path = self.results_dir / cfg.output_file
            result.csv_path = str(export_to_csv(csv_path, result.records))
            result.status = BenchmarkStatus.COMPLETED
            self.logger.info(f"基准测试完成，共 {len(result.records)} 次运行")

        except Exception as e:
            result.status = BenchmarkStatus.FAILED
            result.error_message = str(e)
            self.logger.error(f"基准测试失败: {e}")

        finally:
            result.end_time = datetime.now().isoformat()
            self._save_summary(result)

        return result

    # 单次试验 ------------------------------------------------------
    def _finish(self, algorithm, result: BenchmarkResult) -> RunRecord:
        record = algorithm.get_metrics().record_run()
        result.records.append(record)
        if self._on_record is not None:
            self._on_record(record)
        return record

    def _violation(self, result: BenchmarkResult, record: RunRecord, trial: int, message: str) -> None:
        self.logger.warning(f"{record.algorithm_name} n={record.input_size}: {message}")
        result.violations.append(Violation(record.algorithm_name, record.input_size, trial, message))

    def _check_depth(self, result: BenchmarkResult, record: RunRecord, trial: int, bound: int) -> None:
        if record.max_depth > bound:
            self._violation(result, record, trial, f"递归深度 {record.max_depth} 超过上界 {bound}")

    def _run_merge_sort(self, size: int, trial: int, result: BenchmarkResult) -> None:
        data = self.data_generator.integers(self.config.data_pattern, size)
        expected = sorted(data)
        sorter = MergeSort()

        reset_depth()
        sorter.sort(data)
        record = self._finish(sorter, result)

        if data != expected:
            self._violation(result, record, trial, "排序结果错误")
        self._check_depth(result, record, trial, log2_ceil(size) + self.config.depth_slack)

    def _run_quick_sort(self, size: int, trial: int, result: BenchmarkResult) -> None:
        data = self.data_generator.integers(self.config.data_pattern, size)
        sorter = QuickSort(seed=None if self.config.seed is None else self.config.seed + trial)

        reset_depth()
        sorter.sort(data)
        record = self._finish(sorter, result)

        if not is_sorted(data):
            self._violation(result, record, trial, "排序结果错误")
        self._check_depth(result, record, trial, 2 * log2_floor(size) + self.config.depth_slack)

    def _run_select(self, size: int, trial: int, result: BenchmarkResult) -> None:
        data = self.data_generator.integers(self.config.data_pattern, size)
        k = size // 2
        selector = DeterministicSelect()

        reset_depth()
        value = selector.select(data, k)
        record = self._finish(selector, result)

        expected = sorted(data)[k]
        if value != expected:
            self._violation(result, record, trial, f"选择结果错误: 期望 {expected}，得到 {value}")

    def _run_closest_pair(self, size: int, trial: int, result: BenchmarkResult) -> None:
        if size < 2:
            return
        points = self.data_generator.points(size)
        finder = ClosestPair()

        reset_depth()
        pair = finder.find_closest_pair(points)
        record = self._finish(finder, result)

        if size <= self.config.brute_force_verify_limit:
            oracle = ClosestPair().find_closest_pair_brute_force(points)
            if abs(pair.distance - oracle.distance) > CLOSEST_PAIR_TOLERANCE:
                self._violation(
                    result, record, trial,
                    f"最近点对不一致: 分治={pair.distance:.4f}，暴力={oracle.distance:.4f}",
                )
        self._check_depth(result, record, trial, log2_ceil(size) + self.config.depth_slack)

    def _save_summary(self, result: BenchmarkResult) -> Path:
        """保存 JSON 摘要"""
        summary_file = self.results_dir / f"summary_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"
        report = {
            "config": asdict(result.config),
            "status": result.status.value,
            "start_time": result.start_time,
            "end_time": result.end_time,
            "error_message": result.error_message,
            "csv_path": result.csv_path,
            "violations": [asdict(v) for v in result.violations],
            "errors": result.errors,
            "summary": result.get_summary_statistics(),
        }
        with open(summary_file, 'w', encoding='utf-8') as f:
            json.dump(report, f, indent=2, ensure_ascii=False)
        return summary_file
