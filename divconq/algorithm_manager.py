"""
算法管理器 - 分治算法的注册、执行与指标归档

提供统一的算法接口，支持按名称注册、同步/异步/批量执行、
按线程隔离的递归深度测量以及每次运行的指标快照。
"""

import logging
import threading
from typing import Dict, Any, Optional, Type, List
from concurrent.futures import ThreadPoolExecutor, Future
from dataclasses import dataclass, field
from enum import Enum

from .base import Algorithm
from .performance.metrics import RunRecord, reset_depth
from .sorting.advanced.merge_sort import MergeSort
from .sorting.advanced.quick_sort import QuickSort
from .selection.advanced.deterministic_select import DeterministicSelect
from .geometry.advanced.closest_pair import ClosestPair


class AlgorithmCategory(Enum):
    """算法分类枚举"""
    SORTING = "sorting"
    SELECTION = "selection"
    GEOMETRY = "geometry"


@dataclass
class AlgorithmConfig:
    """算法配置"""
    options: Dict[str, Any] = field(default_factory=dict)  # 传给 execute 的默认关键字参数
    record_runs: bool = True  # 是否把运行快照写入全局历史
    max_history: int = 1000


@dataclass(frozen=True)
class RegisteredAlgorithm:
    """注册表中的一项：算法类、分类与默认配置"""
    algorithm_class: Type[Algorithm]
    category: AlgorithmCategory
    config: AlgorithmConfig


class AlgorithmRegistry:
    """按名称索引的算法变体；同一个类可以用不同默认选项注册多次"""

    def __init__(self):
        self._entries: Dict[str, RegisteredAlgorithm] = {}
        self._register_default_algorithms()

    def _register_default_algorithms(self) -> None:
        sorting, selection, geometry = (
            AlgorithmCategory.SORTING, AlgorithmCategory.SELECTION, AlgorithmCategory.GEOMETRY,
        )
        defaults = [
            ("merge_sort", MergeSort, sorting, {}),
            ("merge_sort_no_reuse", MergeSort, sorting, {"reuse_buffer": False}),
            ("quick_sort", QuickSort, sorting, {}),
            ("quick_sort_3way", QuickSort, sorting, {"strategy": "three_way"}),
            ("quick_sort_median_of_three", QuickSort, sorting, {"strategy": "median_of_three"}),
            ("quick_sort_basic", QuickSort, sorting, {"strategy": "basic"}),
            ("deterministic_select", DeterministicSelect, selection, {}),
            ("quick_select", DeterministicSelect, selection, {"randomized": True}),
            ("closest_pair", ClosestPair, geometry, {}),
            ("closest_pair_brute_force", ClosestPair, geometry, {"brute_force": True}),
        ]
        for name, algorithm_class, category, options in defaults:
            self.register(name, algorithm_class, category, AlgorithmConfig(options=options))

    def register(self, name: str, algorithm_class: Type[Algorithm],
                 category: AlgorithmCategory, config: Optional[AlgorithmConfig] = None) -> None:
        """
        注册算法变体，同名时覆盖

        Raises:
            ValueError: algorithm_class 不是 Algorithm 的子类
        """
        if not isinstance(algorithm_class, type) or not issubclass(algorithm_class, Algorithm):
            raise ValueError(f"{algorithm_class!r} 不是 Algorithm 的子类")
        self._entries[name] = RegisteredAlgorithm(algorithm_class, category, config or AlgorithmConfig())

    def get(self, name: str) -> RegisteredAlgorithm:
        try:
            return self._entries[name]
        except KeyError:
            raise KeyError(f"未注册的算法: {name}") from None

    def list_algorithms(self, category: Optional[AlgorithmCategory] = None) -> List[str]:
        return [name for name, entry in self._entries.items()
                if category is None or entry.category == category]


class AlgorithmManager:
    """
    算法管理器

    每次执行都会新建算法实例，并在执行线程上清零递归深度，
    因此在线程池中并发执行的多个运行互不污染深度计数。
    """

    def __init__(self, max_workers: int = 4):
        self.logger = logging.getLogger(__name__)
        self.registry = AlgorithmRegistry()
        self.executor = ThreadPoolExecutor(max_workers=max_workers)
        self._metrics_history: Dict[str, List[RunRecord]] = {}
        self._history_lock = threading.Lock()

    def execute_algorithm(self, algorithm_name: str, *args, **kwargs) -> Any:
        """
        执行算法

        Args:
            algorithm_name: 算法名称
            *args: 算法参数
            **kwargs: 算法关键字参数，覆盖注册时的默认选项

        Returns:
            算法执行结果

        Raises:
            KeyError: 算法不存在
            InvalidArgumentError: 输入无效
        """
        entry = self.registry.get(algorithm_name)
        config = entry.config
        options = {**config.options, **kwargs}

        algorithm = entry.algorithm_class()
        reset_depth()

        try:
            result = algorithm.execute(*args, **options)
        except Exception as e:
            self.logger.error(f"算法 {algorithm_name} 执行失败: {e}")
            raise

        metrics = algorithm.get_metrics()
        record = metrics.record_run() if config.record_runs else metrics.snapshot()
        self._record_metrics(algorithm_name, record, config.max_history)

        self.logger.info(
            f"算法 {algorithm_name} 执行成功，n={record.input_size}，"
            f"耗时: {record.elapsed_millis:.3f}ms，深度: {record.max_depth}"
        )
        return result

    def execute_algorithm_async(self, algorithm_name: str, *args, **kwargs) -> Future:
        """
        在线程池中异步执行算法

        Returns:
            Future对象
        """
        return self.executor.submit(self.execute_algorithm, algorithm_name, *args, **kwargs)

    def batch_execute(self, tasks: List[Dict[str, Any]]) -> List[Any]:
        """
        批量并发执行算法

        Args:
            tasks: 任务列表，每个任务包含 ``algorithm``，可选 ``args`` 与 ``kwargs``

        Returns:
            与任务顺序对应的结果列表，失败的任务结果为 None
        """
        futures = []
        for task in tasks:
            algorithm_name = task['algorithm']
            args = task.get('args', [])
            kwargs = task.get('kwargs', {})
            futures.append(self.execute_algorithm_async(algorithm_name, *args, **kwargs))

        results = []
        for future in futures:
            try:
                results.append(future.result())
            except Exception as e:
                self.logger.error(f"批量执行任务失败: {e}")
                results.append(None)

        return results

    def get_metrics(self, algorithm_name: str) -> List[RunRecord]:
        """获取算法的运行快照"""
        with self._history_lock:
            return list(self._metrics_history.get(algorithm_name, []))

    def get_performance_summary(self, algorithm_name: str) -> Dict[str, Any]:
        """
        获取算法性能摘要

        Returns:
            性能摘要字典，无记录时为空字典
        """
        records = self.get_metrics(algorithm_name)
        if not records:
            return {}

        times = [r.elapsed_millis for r in records]
        return {
            "total_executions": len(records),
            "avg_time_millis": sum(times) / len(times),
            "min_time_millis": min(times),
            "max_time_millis": max(times),
            "total_comparisons": sum(r.comparisons for r in records),
            "max_depth": max(r.max_depth for r in records),
        }

    def _record_metrics(self, algorithm_name: str, record: RunRecord, max_history: int) -> None:
        """记录运行快照，超出上限时丢弃最旧的记录"""
        with self._history_lock:
            history = self._metrics_history.setdefault(algorithm_name, [])
            history.append(record)
            if len(history) > max_history:
                del history[:-max_history]

    def shutdown(self) -> None:
        """关闭算法管理器"""
        self.executor.shutdown(wait=True)


# 全局算法管理器实例
_algorithm_manager = None


def get_algorithm_manager() -> AlgorithmManager:
    """获取全局算法管理器实例"""
    global _algorithm_manager
    if _algorithm_manager is None:
        _algorithm_manager = AlgorithmManager()
    return _algorithm_manager


def execute_algorithm(algorithm_name: str, *args, **kwargs) -> Any:
    """便捷函数：执行算法"""
    return get_algorithm_manager().execute_algorithm(algorithm_name, *args, **kwargs)


def register_algorithm(name: str, algorithm_class: Type[Algorithm],
                       category: AlgorithmCategory, config: Optional[AlgorithmConfig] = None) -> None:
    """便捷函数：注册算法"""
    get_algorithm_manager().registry.register(name, algorithm_class, category, config)
