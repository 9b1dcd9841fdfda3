"""分治算法共用的数组与分区辅助函数。

本模块提供元素交换、Fisher-Yates 洗牌、Lomuto 单基准分区、
三路（荷兰国旗）分区、插入排序以及有序性检查。
所有带 ``metrics`` 参数的函数都会在对应计数器上累加比较或交换次数。
"""
from __future__ import annotations

import random
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

if TYPE_CHECKING:
    from .performance.metrics import MetricsCollector

# 子区间长度低于该阈值时改用插入排序
INSERTION_SORT_CUTOFF = 10

_random = random.Random()


def swap(items: List, i: int, j: int, metrics: Optional["MetricsCollector"] = None) -> None:
    """在列表中原地交换两个元素的位置。

    当 ``i == j`` 时不做任何操作；否则交换元素，
    并且在提供 ``metrics`` 时交换计数器恰好加一。

    参数:
        items: 要操作的列表
        i: 第一个元素的索引
        j: 第二个元素的索引
        metrics: 可选的指标收集器

    示例:
        >>> arr = [1, 2, 3]
        >>> swap(arr, 0, 2)
        >>> print(arr)  # [3, 2, 1]
    """
    if i == j:
        return
    if metrics is not None:
        metrics.increment_swaps()
    items[i], items[j] = items[j], items[i]


def shuffle(items: List, rng: Optional[random.Random] = None) -> None:
    """Fisher-Yates 原地洗牌。

    从最后一个索引向下遍历到索引 1，每个位置与 ``[0, i]`` 中
    均匀随机选出的位置交换。洗牌本身不计入交换次数。
    """
    rng = rng or _random
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        swap(items, i, j)


def partition(items: List, low: int, high: int, pivot_index: int,
              metrics: "MetricsCollector") -> int:
    """Lomuto 分区，返回基准元素的最终位置。

    先把基准移到 ``high``，然后从左到右扫描 ``[low, high)``，
    每检查一个元素比较计数加一，把小于基准的元素交换进左侧的存储区，
    最后把基准放到存储区末尾。

    参数:
        items: 待分区的数组
        low: 分区范围的起始索引
        high: 分区范围的结束索引（包含）
        pivot_index: 基准元素当前所在的索引
        metrics: 指标收集器

    返回:
        int: 基准值的最终位置索引
    """
    pivot_value = items[pivot_index]
    swap(items, pivot_index, high, metrics)

    store = low
    for i in range(low, high):
        metrics.increment_comparisons()
        if items[i] < pivot_value:
            swap(items, i, store, metrics)
            store += 1

    swap(items, store, high, metrics)
    return store


def partition_3way(items: List, low: int, high: int,
                   metrics: "MetricsCollector") -> Tuple[int, int]:
    """以 ``items[low]`` 为基准的三路分区（荷兰国旗问题）。

    返回 ``(lt, gt)``，满足:
        - ``items[low..lt-1]`` 全部小于基准
        - ``items[lt..gt]`` 全部等于基准
        - ``items[gt+1..high]`` 全部大于基准
    """
    if high <= low:
        return low, high

    pivot = items[low]
    i = lt = low
    gt = high

    while i <= gt:
        metrics.increment_comparisons()
        if items[i] < pivot:
            swap(items, i, lt, metrics)
            i += 1
            lt += 1
        elif items[i] > pivot:
            swap(items, i, gt, metrics)
            gt -= 1
        else:
            i += 1

    return lt, gt


def insertion_sort(items: List, low: int, high: int, metrics: "MetricsCollector") -> None:
    """对闭区间 ``[low, high]`` 做原地插入排序。

    每次元素比较都计数，包括使内层移动循环终止的那一次比较。

    时间复杂度: O(k^2)，k 为区间长度
    空间复杂度: O(1)
    """
    for i in range(low + 1, high + 1):
        key = items[i]
        j = i - 1
        while j >= low and items[j] > key:
            metrics.increment_comparisons()
            items[j + 1] = items[j]
            j -= 1
        if j >= low:
            metrics.increment_comparisons()
        items[j + 1] = key


def is_sorted(items: Sequence) -> bool:
    """检查序列是否为非递减顺序。空序列与单元素序列视为有序。"""
    return all(items[i - 1] <= items[i] for i in range(1, len(items)))
