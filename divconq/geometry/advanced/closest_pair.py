"""平面最近点对的分治算法实现。"""
import math
import random
from dataclasses import dataclass, field
from ...base import Algorithm
from ...errors import InsufficientPointsError
from ...performance.metrics import DepthTracker
from typing import List, Optional, Sequence

# 子集规模不超过该值时直接暴力求解
BRUTE_FORCE_CUTOFF = 3
# 带状区域内每个点最多只需与其后 7 个点比较
STRIP_LOOKAHEAD = 7


@dataclass(frozen=True)
class Point:
    """不可变的二维坐标点。"""

    x: float
    y: float

    def distance_to(self, other: "Point") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def __str__(self) -> str:
        return f"({self.x:.2f}, {self.y:.2f})"


@dataclass(frozen=True)
class PointPair:
    """点对及其欧氏距离；距离在构造时计算一次。"""

    p1: Point
    p2: Point
    distance: float = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "distance", self.p1.distance_to(self.p2))

    def __str__(self) -> str:
        return f"Points: {self.p1} - {self.p2}, Distance: {self.distance:.4f}"


class ClosestPair(Algorithm):
    """分治法查找平面上距离最近的两个点。

    算法步骤:
        1. 预先分别按 x 和 y 坐标排序一次
        2. 按 x 序的中点把点集分成左右两半，并把 y 序数组对应拆分
        3. 递归求两半各自的最近点对，取较小者为 delta
        4. 检查距分割线 delta 以内的带状区域，每点只看 y 序中其后的少数几个点

    时间复杂度: O(n log n)
    空间复杂度: O(n)
    递推式: T(n) = 2T(n/2) + O(n)
    """

    def __init__(self, tracker: Optional[DepthTracker] = None) -> None:
        super().__init__("ClosestPair", tracker)

    def execute(self, points: Sequence[Point], brute_force: bool = False) -> PointPair:
        """返回距离最近的点对。

        参数:
            points: 至少包含两个点的序列
            brute_force: 为 True 时使用 O(n^2) 暴力算法

        返回:
            PointPair: 最近点对

        异常:
            InsufficientPointsError: 点数少于 2
        """
        if brute_force:
            return self.find_closest_pair_brute_force(points)
        return self.find_closest_pair(points)

    def find_closest_pair(self, points: Optional[Sequence[Point]]) -> PointPair:
        """分治法求最近点对。"""
        self._validate(points)

        with self._measured_run(len(points)) as tracker:
            # x 相同时按 y 排序，使左右两半的 x 序与 y 序拆分结果一致
            px = sorted(points, key=lambda p: (p.x, p.y))
            py = sorted(points, key=lambda p: (p.y, p.x))
            self.metrics.increment_allocations(2 * len(points))
            return self._closest_pair(px, py, tracker)

    def find_closest_pair_brute_force(self, points: Optional[Sequence[Point]]) -> PointPair:
        """O(n^2) 全对比较，作为分治结果的正确性参照。"""
        self._validate(points)

        with self._measured_run(len(points)):
            return self._brute_force(points)

    @staticmethod
    def _validate(points: Optional[Sequence[Point]]) -> None:
        count = 0 if points is None else len(points)
        if count < 2:
            raise InsufficientPointsError(count)

    def _closest_pair(self, px: List[Point], py: List[Point], tracker: DepthTracker) -> PointPair:
        with tracker:
            n = len(px)
            if n <= BRUTE_FORCE_CUTOFF:
                return self._brute_force(px)

            mid = n // 2
            mid_point = px[mid]
            mid_key = (mid_point.x, mid_point.y)

            # 左半部分中与分割点坐标完全相同的点数，即左侧留给并列点的名额
            left_ties = 0
            i = mid - 1
            while i >= 0 and (px[i].x, px[i].y) == mid_key:
                left_ties += 1
                i -= 1

            # 按 y 序拆分；名额用完后，与分割点并列的点进入右侧
            pyl: List[Point] = []
            pyr: List[Point] = []
            for p in py:
                self.metrics.increment_comparisons()
                key = (p.x, p.y)
                if key < mid_key:
                    pyl.append(p)
                elif key == mid_key and left_ties > 0:
                    pyl.append(p)
                    left_ties -= 1
                else:
                    pyr.append(p)
            self.metrics.increment_allocations(n)

            pxl = px[:mid]
            pxr = px[mid:]
            self.metrics.increment_allocations(n)

            left = self._closest_pair(pxl, pyl, tracker)
            right = self._closest_pair(pxr, pyr, tracker)

            self.metrics.increment_comparisons()
            best = left if left.distance < right.distance else right

            return self._check_strip(py, mid_point.x, best)

    def _check_strip(self, py: List[Point], mid_x: float, best: PointPair) -> PointPair:
        """检查分割线两侧 delta 带状区域内的跨侧点对。"""
        delta = best.distance

        strip: List[Point] = []
        for p in py:
            self.metrics.increment_comparisons()
            if abs(p.x - mid_x) < delta:
                strip.append(p)

        for i, p in enumerate(strip):
            for q in strip[i + 1:i + 1 + STRIP_LOOKAHEAD]:
                self.metrics.increment_comparisons()
                if q.y - p.y >= delta:
                    break

                dist = p.distance_to(q)
                self.metrics.increment_comparisons()
                if dist < best.distance:
                    best = PointPair(p, q)
                    delta = dist  # 立即收缩 delta 以加快剪枝

        return best

    def _brute_force(self, points: Sequence[Point]) -> PointPair:
        best = PointPair(points[0], points[1])
        for i in range(len(points)):
            for j in range(i + 1, len(points)):
                self.metrics.increment_comparisons()
                if points[i].distance_to(points[j]) < best.distance:
                    best = PointPair(points[i], points[j])
        return best


def generate_random_points(n: int, max_coord: float = 1000.0,
                           rng: Optional[random.Random] = None) -> List[Point]:
    """在 [0, max_coord) x [0, max_coord) 中均匀生成 n 个随机点。"""
    rng = rng or random.Random()
    return [Point(rng.random() * max_coord, rng.random() * max_coord) for _ in range(n)]


def generate_grid_points(grid_size: int) -> List[Point]:
    """生成 grid_size x grid_size 的整点网格。"""
    return [Point(i, j) for i in range(grid_size) for j in range(grid_size)]
