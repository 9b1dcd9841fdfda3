import pytest

from divconq.algorithm_manager import (
    AlgorithmCategory,
    AlgorithmConfig,
    AlgorithmManager,
    AlgorithmRegistry,
)
from divconq.base import Algorithm
from divconq.errors import IndexOutOfRangeError
from divconq.geometry.advanced.closest_pair import Point
from divconq.performance.metrics import clear_all_metrics, get_all_metrics
from divconq.sorting.advanced.merge_sort import MergeSort


@pytest.fixture
def manager():
    clear_all_metrics()
    mgr = AlgorithmManager(max_workers=4)
    yield mgr
    mgr.shutdown()
    clear_all_metrics()


def test_default_registrations():
    registry = AlgorithmRegistry()
    assert set(registry.list_algorithms(AlgorithmCategory.SORTING)) == {
        "merge_sort", "merge_sort_no_reuse", "quick_sort", "quick_sort_3way",
        "quick_sort_median_of_three", "quick_sort_basic",
    }
    assert set(registry.list_algorithms(AlgorithmCategory.SELECTION)) == {"deterministic_select", "quick_select"}
    assert set(registry.list_algorithms(AlgorithmCategory.GEOMETRY)) == {"closest_pair", "closest_pair_brute_force"}
    assert registry.get("quick_sort_3way").config.options == {"strategy": "three_way"}


def test_register_rejects_non_algorithm():
    with pytest.raises(ValueError):
        AlgorithmRegistry().register("bad", dict, AlgorithmCategory.SORTING)


def test_unknown_algorithm(manager):
    with pytest.raises(KeyError):
        manager.execute_algorithm("bogo_sort", [1])


@pytest.mark.parametrize("name", [
    "merge_sort", "merge_sort_no_reuse", "quick_sort", "quick_sort_3way",
    "quick_sort_median_of_three", "quick_sort_basic",
])
def test_sorting_through_manager(manager, name):
    assert manager.execute_algorithm(name, [3, 1, 4, 1, 5, 9, 2, 6]) == [1, 1, 2, 3, 4, 5, 6, 9]


@pytest.mark.parametrize("name", ["deterministic_select", "quick_select"])
def test_selection_through_manager(manager, name):
    assert manager.execute_algorithm(name, [3, 1, 4, 1, 5, 9, 2, 6], 7) == 9


def test_closest_pair_through_manager(manager):
    points = [Point(0, 0), Point(1, 1), Point(2, 2), Point(0.5, 0.5)]
    fast = manager.execute_algorithm("closest_pair", points)
    slow = manager.execute_algorithm("closest_pair_brute_force", points)
    assert fast.distance == pytest.approx(slow.distance)


def test_errors_propagate(manager):
    with pytest.raises(IndexOutOfRangeError):
        manager.execute_algorithm("deterministic_select", [1, 2, 3], 3)
    assert manager.get_metrics("deterministic_select") == []


def test_history_and_summary(manager):
    manager.execute_algorithm("merge_sort", list(range(50, 0, -1)))
    manager.execute_algorithm("merge_sort", list(range(80, 0, -1)))
    records = manager.get_metrics("merge_sort")
    assert [r.input_size for r in records] == [50, 80]
    assert get_all_metrics() == tuple(records)

    summary = manager.get_performance_summary("merge_sort")
    assert summary["total_executions"] == 2
    assert summary["total_comparisons"] == sum(r.comparisons for r in records)
    assert summary["max_depth"] == max(r.max_depth for r in records)
    assert manager.get_performance_summary("quick_sort") == {}


def test_max_history_is_enforced(manager):
    manager.registry.register("tiny", MergeSort, AlgorithmCategory.SORTING,
                              AlgorithmConfig(record_runs=False, max_history=2))
    for size in (10, 20, 30):
        manager.execute_algorithm("tiny", list(range(size)))
    assert [r.input_size for r in manager.get_metrics("tiny")] == [20, 30]
    assert get_all_metrics() == ()


def test_batch_execute_isolates_depth(manager):
    tasks = [{"algorithm": "merge_sort", "args": [list(range(1024, 0, -1))]} for _ in range(8)]
    tasks.append({"algorithm": "deterministic_select", "args": [[], 0]})
    results = manager.batch_execute(tasks)

    assert results[-1] is None
    assert all(r == list(range(1, 1025)) for r in results[:-1])
    depths = {r.max_depth for r in manager.get_metrics("merge_sort")}
    assert len(depths) == 1


def test_async_execution(manager):
    future = manager.execute_algorithm_async("quick_sort", [5, 4, 3], strategy="basic")
    assert future.result(timeout=10) == [3, 4, 5]


def test_registry_accepts_custom_algorithm():
    class Reverse(Algorithm):
        def __init__(self):
            super().__init__("Reverse")

        def execute(self, data):
            with self._measured_run(len(data)):
                return list(reversed(data))

    registry = AlgorithmRegistry()
    registry.register("reverse", Reverse, AlgorithmCategory.SORTING)
    entry = registry.get("reverse")
    assert entry.algorithm_class is Reverse
    assert entry.category is AlgorithmCategory.SORTING
    assert "reverse" in registry.list_algorithms(AlgorithmCategory.SORTING)


def test_registry_lookup_of_unknown_name():
    with pytest.raises(KeyError):
        AlgorithmRegistry().get("bogo_sort")
