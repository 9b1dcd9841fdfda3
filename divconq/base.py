import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from .performance.metrics import DepthTracker, MetricsCollector, current_tracker

logger = logging.getLogger(__name__)


class Algorithm(ABC):
    """所有分治算法的基类。

    这是一个抽象基类，定义了算法的通用接口。每个算法实例在构造时
    创建自己的指标收集器，每次运行开始时清零计数器（保留算法名称）。

    子类必须实现:
        execute: 执行算法并返回结果的抽象方法

    参数:
        name: 写入指标记录的算法名称
        tracker: 可选的显式递归深度跟踪器；为 None 时使用当前线程的跟踪器
    """

    def __init__(self, name: str, tracker: Optional[DepthTracker] = None) -> None:
        self.metrics = MetricsCollector(name)
        self.tracker = tracker

    @abstractmethod
    def execute(self, *args, **kwargs) -> Any:
        """执行算法并返回结果，不修改调用方传入的数据。

        参数:
            *args: 位置参数，具体参数取决于算法实现
            **kwargs: 关键字参数，具体参数取决于算法实现

        返回:
            Any: 算法执行的结果，类型取决于具体算法
        """
        raise NotImplementedError

    def get_metrics(self) -> MetricsCollector:
        """返回最近一次运行的指标。"""
        return self.metrics

    @contextmanager
    def _measured_run(self, input_size: int) -> Iterator[DepthTracker]:
        """包裹一次公开调用：清零计数、记录规模、计时，并在结束时写入最大深度。

        产出本次运行使用的深度跟踪器，由调用方显式传给递归辅助函数。
        """
        tracker = self.tracker or current_tracker()
        self.metrics.reset()
        self.metrics.set_input_size(input_size)
        self.metrics.start_timer()
        try:
            yield tracker
        finally:
            self.metrics.stop_timer()
            self.metrics.recorded_max_depth = tracker.max_depth
        logger.debug(
            "%s finished: n=%d, time=%.3fms, depth=%d",
            self.metrics.algorithm_name,
            input_size,
            self.metrics.get_elapsed_time_millis(),
            tracker.max_depth,
        )
