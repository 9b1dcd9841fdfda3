import random

import pytest

from divconq.geometry.advanced.closest_pair import ClosestPair, generate_random_points
from divconq.selection.advanced.deterministic_select import DeterministicSelect
from divconq.sorting.advanced.merge_sort import MergeSort
from divconq.sorting.advanced.quick_sort import QuickSort


def _generate_data(size: int = 2000) -> list[int]:
    random.seed(0)
    return random.sample(range(size * 5), size)


@pytest.mark.parametrize("reuse_buffer", [True, False])
def test_merge_sort_benchmark(benchmark, reuse_buffer) -> None:
    data = _generate_data()
    algo = MergeSort()
    result = benchmark(algo.execute, data, reuse_buffer=reuse_buffer)
    assert result == sorted(data)


@pytest.mark.parametrize("strategy", QuickSort.STRATEGIES)
def test_quick_sort_benchmark(benchmark, strategy) -> None:
    data = _generate_data()
    algo = QuickSort(seed=0)
    result = benchmark(algo.execute, data, strategy=strategy)
    assert result == sorted(data)


def test_deterministic_select_benchmark(benchmark) -> None:
    data = _generate_data()
    algo = DeterministicSelect()
    assert benchmark(algo.select, data, len(data) // 2) == sorted(data)[len(data) // 2]


def test_quick_select_benchmark(benchmark) -> None:
    data = _generate_data()
    algo = DeterministicSelect(seed=0)
    assert benchmark(algo.quick_select, data, len(data) // 2) == sorted(data)[len(data) // 2]


def test_sort_then_index_benchmark(benchmark) -> None:
    data = _generate_data()
    benchmark(lambda: sorted(data)[len(data) // 2])


def test_closest_pair_benchmark(benchmark) -> None:
    points = generate_random_points(2000, rng=random.Random(0))
    algo = ClosestPair()
    benchmark(algo.find_closest_pair, points)


def test_closest_pair_brute_force_benchmark(benchmark) -> None:
    points = generate_random_points(300, rng=random.Random(0))
    algo = ClosestPair()
    benchmark(algo.find_closest_pair_brute_force, points)
