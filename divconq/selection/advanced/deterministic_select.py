"""确定性线性时间选择算法（中位数的中位数）实现。"""
import random
from contextlib import ExitStack
from ...base import Algorithm
from ...errors import EmptyInputError, IndexOutOfRangeError
from ...performance.metrics import DepthTracker
from ...utils import partition_3way, shuffle, swap
from typing import Any, List, Optional, Sequence

GROUP_SIZE = 5


class DeterministicSelect(Algorithm):
    """查找第 k 小元素（k 从 0 开始）。

    中位数的中位数保证基准两侧各至少有约 30% 的元素，
    因此最坏情况下也是线性时间。每层只进入一侧递归，
    包括 ``_median_of_medians`` 内部对同一选择过程的调用，
    这两层嵌套递归都计入同一个深度跟踪器。

    递推式: T(n) <= T(n/5) + T(7n/10) + O(n)
    """

    def __init__(self, tracker: Optional[DepthTracker] = None, seed: Optional[int] = None) -> None:
        super().__init__("DeterministicSelect", tracker)
        self._random = random.Random(seed)

    def execute(self, data: Sequence, k: int, randomized: bool = False) -> Any:
        """返回 data 中第 k 小的元素，不修改 data。

        参数:
            data: 非空数据序列
            k: 顺序统计量的索引，范围 [0, len(data))
            randomized: 为 True 时使用随机化快速选择

        返回:
            Any: 第 k 小的元素

        异常:
            EmptyInputError: data 为 None 或为空
            IndexOutOfRangeError: k 超出范围

        时间复杂度: O(n) 最坏情况（随机化版本为期望 O(n)）
        """
        if randomized:
            return self.quick_select(data, k)
        return self.select(data, k)

    def select(self, arr: Optional[Sequence], k: int) -> Any:
        """中位数的中位数选择，在内部副本上操作。"""
        self._validate(arr, k)

        with self._measured_run(len(arr)) as tracker:
            work = list(arr)
            self.metrics.increment_allocations(len(arr))
            return self._select(work, 0, len(work) - 1, k, tracker)

    def find_median(self, arr: Sequence) -> Any:
        """返回上中位数，即第 len(arr)//2 小的元素。"""
        return self.select(arr, len(arr) // 2 if arr else 0)

    @staticmethod
    def _validate(arr: Optional[Sequence], k: int) -> None:
        if arr is None or len(arr) == 0:
            raise EmptyInputError()
        if k < 0 or k >= len(arr):
            raise IndexOutOfRangeError(k, len(arr))

    def _select(self, arr: List, low: int, high: int, k: int, tracker: DepthTracker) -> Any:
        # 每轮循环计为一层递归深度
        with ExitStack() as levels:
            while True:
                levels.enter_context(tracker)
                if low == high:
                    return arr[low]

                pivot_index = self._median_of_medians(arr, low, high, tracker)
                swap(arr, low, pivot_index, self.metrics)
                found, low, high, k = self._narrow(arr, low, high, k)
                if found:
                    return arr[low]

    def _narrow(self, arr: List, low: int, high: int, k: int):
        """以 arr[low] 为基准三路分区，返回 (是否命中, low, high, k)。

        等于基准的元素一次全部就位，因此大量重复值不会让区间每层只缩小一个元素。
        命中时返回的 low 即为答案所在的索引。
        """
        lt, gt = partition_3way(arr, low, high, self.metrics)
        if k < lt - low:
            return False, low, lt - 1, k
        if k > gt - low:
            return False, gt + 1, high, k - (gt + 1 - low)
        return True, lt, high, k

    def _median_of_medians(self, arr: List, low: int, high: int, tracker: DepthTracker) -> int:
        """把每组 5 个元素的中位数移到区间前部，返回这些中位数的中位数所在索引。"""
        n = high - low + 1
        if n <= GROUP_SIZE:
            return self._median_index(arr, low, high)

        num_groups = (n + GROUP_SIZE - 1) // GROUP_SIZE
        medians = [0] * num_groups
        self.metrics.increment_allocations(num_groups)

        for i in range(num_groups):
            group_start = low + i * GROUP_SIZE
            group_end = min(group_start + GROUP_SIZE - 1, high)

            median_index = self._median_index(arr, group_start, group_end)
            medians[i] = arr[median_index]
            # 组中位数依次放到 arr[low..low+num_groups-1]
            swap(arr, low + i, median_index, self.metrics)

        if num_groups == 1:
            return low

        value = self._select(medians, 0, num_groups - 1, num_groups // 2, tracker)
        for i in range(low, low + num_groups):
            if arr[i] == value:
                return i
        return low

    def _median_index(self, arr: List, low: int, high: int) -> int:
        """对小区间的索引做插入排序，返回中位数的索引；值相同时按原位置排序。"""
        indices = list(range(low, high + 1))
        for i in range(1, len(indices)):
            j = i
            while j > 0:
                self.metrics.increment_comparisons()
                if arr[indices[j]] < arr[indices[j - 1]]:
                    indices[j], indices[j - 1] = indices[j - 1], indices[j]
                    j -= 1
                else:
                    break
        return indices[len(indices) // 2]

    # 随机化版本 ----------------------------------------------------
    def quick_select(self, arr: Optional[Sequence], k: int) -> Any:
        """随机化快速选择：洗牌一次后总以最左元素为基准，期望 O(n)。"""
        self._validate(arr, k)

        with self._measured_run(len(arr)) as tracker:
            work = list(arr)
            self.metrics.increment_allocations(len(arr))
            shuffle(work, self._random)
            return self._randomized_select(work, 0, len(work) - 1, k, tracker)

    def _randomized_select(self, arr: List, low: int, high: int, k: int, tracker: DepthTracker) -> Any:
        with ExitStack() as levels:
            while True:
                levels.enter_context(tracker)
                if low == high:
                    return arr[low]

                found, low, high, k = self._narrow(arr, low, high, k)
                if found:
                    return arr[low]
