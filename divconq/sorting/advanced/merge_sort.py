"""归并排序算法实现。"""
from ...base import Algorithm
from ...performance.metrics import DepthTracker
from ...utils import INSERTION_SORT_CUTOFF, insertion_sort
from typing import List, Optional


class MergeSort(Algorithm):
    """带指标统计的归并排序。

    归并排序是一种稳定的分治排序算法：将数组对半分开，分别排序后再合并。
    本实现的优化点:
        - 整个递归树共享一个与输入等长的辅助缓冲区，总辅助分配为 O(n)
        - 子区间较小时改用插入排序
        - 合并时 ``<=`` 优先取左半部分，保证稳定性

    递推式: T(n) = 2T(n/2) + O(n)
    """

    def __init__(self, tracker: Optional[DepthTracker] = None) -> None:
        super().__init__("MergeSort", tracker)
        self._aux: Optional[List] = None

    def execute(self, data: List, reuse_buffer: bool = True) -> List:
        """返回数据的排序副本。

        参数:
            data: 待排序的数据列表
            reuse_buffer: 为 False 时使用每次合并都新分配缓冲区的版本

        返回:
            List: 排序后的数据副本

        时间复杂度: O(n log n)
        空间复杂度: O(n)
        """
        arr = list(data)  # 创建数据副本，避免修改原数组
        if reuse_buffer:
            self.sort(arr)
        else:
            self.sort_without_buffer_reuse(arr)
        return arr

    def sort(self, arr: Optional[List]) -> None:
        """原地排序。空输入、单元素输入或 None 时不做任何操作。"""
        if arr is None or len(arr) <= 1:
            return

        with self._measured_run(len(arr)) as tracker:
            # 辅助数组只分配一次
            self._aux = [0] * len(arr)
            self.metrics.increment_allocations(len(arr))
            try:
                self._merge_sort(arr, 0, len(arr) - 1, tracker)
            finally:
                self._aux = None

    def _merge_sort(self, arr: List, low: int, high: int, tracker: DepthTracker) -> None:
        with tracker:
            # 小区间直接插入排序
            if high - low < INSERTION_SORT_CUTOFF:
                insertion_sort(arr, low, high, self.metrics)
                return

            mid = low + (high - low) // 2
            self._merge_sort(arr, low, mid, tracker)
            self._merge_sort(arr, mid + 1, high, tracker)
            self._merge(arr, low, mid, high)

    def _merge(self, arr: List, low: int, mid: int, high: int) -> None:
        """合并有序子数组 arr[low..mid] 与 arr[mid+1..high]。"""
        aux = self._aux
        aux[low:high + 1] = arr[low:high + 1]

        i, j = low, mid + 1
        k = low
        while i <= mid and j <= high:
            self.metrics.increment_comparisons()
            if aux[i] <= aux[j]:
                arr[k] = aux[i]
                i += 1
            else:
                arr[k] = aux[j]
                j += 1
            k += 1

        # 剩余部分直接拷贝，不计比较
        while i <= mid:
            arr[k] = aux[i]
            i += 1
            k += 1
        while j <= high:
            arr[k] = aux[j]
            j += 1
            k += 1

    def sort_without_buffer_reuse(self, arr: Optional[List]) -> None:
        """不复用缓冲区、不做插入排序截断的经典归并排序，用于对比分配次数。

        每次合并都为左右两半新分配列表，总分配量为 O(n log n)。
        """
        if arr is None or len(arr) <= 1:
            return

        with self._measured_run(len(arr)) as tracker:
            self._merge_sort_no_reuse(arr, 0, len(arr) - 1, tracker)

    def _merge_sort_no_reuse(self, arr: List, low: int, high: int, tracker: DepthTracker) -> None:
        with tracker:
            if low < high:
                mid = low + (high - low) // 2
                self._merge_sort_no_reuse(arr, low, mid, tracker)
                self._merge_sort_no_reuse(arr, mid + 1, high, tracker)
                self._merge_with_new_buffer(arr, low, mid, high)

    def _merge_with_new_buffer(self, arr: List, low: int, mid: int, high: int) -> None:
        left = arr[low:mid + 1]
        right = arr[mid + 1:high + 1]
        self.metrics.increment_allocations(len(left) + len(right))

        i = j = 0
        k = low
        while i < len(left) and j < len(right):
            self.metrics.increment_comparisons()
            if left[i] <= right[j]:
                arr[k] = left[i]
                i += 1
            else:
                arr[k] = right[j]
                j += 1
            k += 1

        rest = left[i:] if i < len(left) else right[j:]
        arr[k:high + 1] = rest
