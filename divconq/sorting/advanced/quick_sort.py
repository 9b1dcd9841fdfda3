"""快速排序算法实现。"""
import random
from ...base import Algorithm
from ...performance.metrics import DepthTracker
from ...utils import INSERTION_SORT_CUTOFF, insertion_sort, partition, partition_3way, shuffle, swap
from typing import List, Optional


class QuickSort(Algorithm):
    """带指标统计的快速排序，提供三种可独立选择的策略。

    - ``sort``: 预先洗牌 + 随机基准；递归较小的一侧、循环处理较大的一侧，
      无论基准好坏栈深度都不超过 O(log n)
    - ``sort_3way``: 预先洗牌 + 三路分区，两侧都真正递归，适合大量重复元素
    - ``sort_median_of_three``: 与 ``sort`` 控制结构相同，基准取
      low/mid/high 三者的中位数，对已有序或逆序输入无需洗牌

    递推式: T(n) = T(k) + T(n-k-1) + O(n)，k 为分区大小
    """

    STRATEGIES = ("random", "three_way", "median_of_three", "basic")

    def __init__(self, tracker: Optional[DepthTracker] = None, seed: Optional[int] = None) -> None:
        super().__init__("QuickSort", tracker)
        self._random = random.Random(seed)

    def execute(self, data: List, strategy: str = "random") -> List:
        """返回数据的排序副本。

        参数:
            data: 待排序的数据列表
            strategy: ``random``、``three_way``、``median_of_three`` 或 ``basic``

        返回:
            List: 排序后的数据副本

        时间复杂度:
            - 平均情况: O(n log n)
            - 最坏情况: O(n^2)，随机化与三数取中使其极不可能出现
        空间复杂度: O(log n) - 递归调用栈
        """
        sorters = {
            "random": self.sort,
            "three_way": self.sort_3way,
            "median_of_three": self.sort_median_of_three,
            "basic": self.sort_basic,
        }
        if strategy not in sorters:
            raise ValueError(f"未知的快速排序策略: {strategy}")
        arr = list(data)
        sorters[strategy](arr)
        return arr

    # 随机基准 ------------------------------------------------------
    def sort(self, arr: Optional[List]) -> None:
        """原地排序。先整体洗牌一次，再以随机基准分区。"""
        if arr is None or len(arr) <= 1:
            return

        with self._measured_run(len(arr)) as tracker:
            shuffle(arr, self._random)
            self._quick_sort(arr, 0, len(arr) - 1, tracker)

    def _quick_sort(self, arr: List, low: int, high: int, tracker: DepthTracker) -> None:
        if low >= high:
            return

        with tracker:
            while low < high:
                if high - low < INSERTION_SORT_CUTOFF:
                    insertion_sort(arr, low, high, self.metrics)
                    return

                pivot_index = self._random.randint(low, high)
                p = partition(arr, low, high, pivot_index, self.metrics)

                # 递归较小的一侧，较大的一侧留在循环中继续处理
                if p - low < high - p:
                    self._quick_sort(arr, low, p - 1, tracker)
                    low = p + 1
                else:
                    self._quick_sort(arr, p + 1, high, tracker)
                    high = p - 1

    # 三路分区 ------------------------------------------------------
    def sort_3way(self, arr: Optional[List]) -> None:
        """三路快速排序：先整体洗牌一次，等于基准的元素一次就位，不再参与递归。"""
        if arr is None or len(arr) <= 1:
            return

        with self._measured_run(len(arr)) as tracker:
            shuffle(arr, self._random)
            self._quick_sort_3way(arr, 0, len(arr) - 1, tracker)

    def _quick_sort_3way(self, arr: List, low: int, high: int, tracker: DepthTracker) -> None:
        if low >= high:
            return

        with tracker:
            if high - low < INSERTION_SORT_CUTOFF:
                insertion_sort(arr, low, high, self.metrics)
                return

            lt, gt = partition_3way(arr, low, high, self.metrics)
            self._quick_sort_3way(arr, low, lt - 1, tracker)
            self._quick_sort_3way(arr, gt + 1, high, tracker)

    # 三数取中 ------------------------------------------------------
    def sort_median_of_three(self, arr: Optional[List]) -> None:
        """以 low/mid/high 三数中位数为基准的快速排序，不洗牌。"""
        if arr is None or len(arr) <= 1:
            return

        with self._measured_run(len(arr)) as tracker:
            self._quick_sort_median_of_three(arr, 0, len(arr) - 1, tracker)

    def _median_of_three(self, arr: List, low: int, high: int) -> int:
        """三次两两比较，把中位数交换到 mid 并返回 mid。"""
        mid = low + (high - low) // 2

        self.metrics.increment_comparisons()
        if arr[low] > arr[mid]:
            swap(arr, low, mid, self.metrics)

        self.metrics.increment_comparisons()
        if arr[low] > arr[high]:
            swap(arr, low, high, self.metrics)

        self.metrics.increment_comparisons()
        if arr[mid] > arr[high]:
            swap(arr, mid, high, self.metrics)

        return mid

    def _quick_sort_median_of_three(self, arr: List, low: int, high: int, tracker: DepthTracker) -> None:
        if low >= high:
            return

        with tracker:
            while low < high:
                if high - low < INSERTION_SORT_CUTOFF:
                    insertion_sort(arr, low, high, self.metrics)
                    return

                pivot_index = self._median_of_three(arr, low, high)
                p = partition(arr, low, high, pivot_index, self.metrics)

                if p - low < high - p:
                    self._quick_sort_median_of_three(arr, low, p - 1, tracker)
                    low = p + 1
                else:
                    self._quick_sort_median_of_three(arr, p + 1, high, tracker)
                    high = p - 1

    # 基础版本 ------------------------------------------------------
    def sort_basic(self, arr: Optional[List]) -> None:
        """未优化的随机基准快速排序（两侧都递归，无截断、不洗牌），用于对比。

        分区采用三路分区，全部相同的输入也只需一层递归。
        """
        if arr is None or len(arr) <= 1:
            return

        with self._measured_run(len(arr)) as tracker:
            self._quick_sort_basic(arr, 0, len(arr) - 1, tracker)

    def _quick_sort_basic(self, arr: List, low: int, high: int, tracker: DepthTracker) -> None:
        if low >= high:
            return

        with tracker:
            pivot_index = self._random.randint(low, high)
            swap(arr, low, pivot_index, self.metrics)
            lt, gt = partition_3way(arr, low, high, self.metrics)
            self._quick_sort_basic(arr, low, lt - 1, tracker)
            self._quick_sort_basic(arr, gt + 1, high, tracker)
