import math
import random

import pytest

from divconq.errors import InsufficientPointsError
from divconq.geometry.advanced.closest_pair import (
    ClosestPair,
    Point,
    PointPair,
    generate_grid_points,
    generate_random_points,
)
from divconq.performance.metrics import get_max_depth, reset_depth


def test_diagonal_points():
    points = [Point(0, 0), Point(1, 1), Point(2, 2), Point(0.5, 0.5)]
    pair = ClosestPair().find_closest_pair(points)
    assert pair.distance == pytest.approx(math.sqrt(0.5))
    assert {pair.p1, pair.p2} == {Point(0, 0), Point(0.5, 0.5)}


def test_collinear_points():
    points = [Point(0, 0), Point(1, 0), Point(2, 0), Point(3, 0)]
    assert ClosestPair().find_closest_pair(points).distance == pytest.approx(1.0)


def test_two_points():
    pair = ClosestPair().find_closest_pair([Point(0, 0), Point(3, 4)])
    assert pair.distance == pytest.approx(5.0)


@pytest.mark.parametrize("points", [None, [], [Point(1, 1)]])
def test_insufficient_points(points):
    with pytest.raises(InsufficientPointsError) as excinfo:
        ClosestPair().find_closest_pair(points)
    assert excinfo.value.count == (0 if points is None else len(points))
    with pytest.raises(InsufficientPointsError):
        ClosestPair().find_closest_pair_brute_force(points)


@pytest.mark.parametrize("n", [5, 17, 64, 200, 500])
def test_matches_brute_force(n):
    rng = random.Random(n)
    points = generate_random_points(n, 100.0, rng)
    finder = ClosestPair()
    fast = finder.find_closest_pair(points).distance
    slow = finder.find_closest_pair_brute_force(points).distance
    assert fast == pytest.approx(slow, abs=1e-9)


def test_duplicate_points_give_zero():
    points = [Point(1, 1), Point(5, 5), Point(9, 2), Point(1, 1), Point(7, 7)]
    assert ClosestPair().find_closest_pair(points).distance == 0.0


def test_many_ties_on_the_split_line():
    points = [Point(0, y) for y in range(0, 40, 4)] + [Point(0, 2), Point(10, 0), Point(10, 2.5)]
    finder = ClosestPair()
    fast = finder.find_closest_pair(points).distance
    assert fast == pytest.approx(finder.find_closest_pair_brute_force(points).distance)
    assert fast == pytest.approx(2.0)


def test_stacked_duplicates():
    rng = random.Random(5)
    points = [Point(rng.randint(0, 3), rng.randint(0, 3)) for _ in range(60)]
    finder = ClosestPair()
    assert finder.find_closest_pair(points).distance == finder.find_closest_pair_brute_force(points).distance


def test_grid_points():
    points = generate_grid_points(10)
    assert len(points) == 100
    assert ClosestPair().find_closest_pair(points).distance == pytest.approx(1.0)


def test_depth_is_logarithmic():
    points = generate_random_points(4096, rng=random.Random(1))
    reset_depth()
    ClosestPair().find_closest_pair(points)
    assert get_max_depth() <= math.ceil(math.log2(4096)) + 2


def test_input_is_not_mutated():
    points = [Point(3, 3), Point(0, 0), Point(2, 1), Point(5, 0)]
    original = list(points)
    ClosestPair().find_closest_pair(points)
    assert points == original


def test_execute_switches_to_brute_force():
    points = [Point(0, 0), Point(2, 0), Point(5, 0)]
    finder = ClosestPair()
    assert finder.execute(points).distance == pytest.approx(2.0)
    assert finder.execute(points, brute_force=True).distance == pytest.approx(2.0)
    # three points: three pairwise comparisons
    assert finder.get_metrics().comparisons == 3


def test_point_and_pair_formatting():
    pair = PointPair(Point(0, 0), Point(3, 4))
    assert str(Point(1, 2.5)) == "(1.00, 2.50)"
    assert pair.distance == 5.0
    assert str(pair) == "Points: (0.00, 0.00) - (3.00, 4.00), Distance: 5.0000"


def test_point_is_immutable():
    point = Point(1, 2)
    with pytest.raises(AttributeError):
        point.x = 5


def test_generate_random_points_bounds():
    points = generate_random_points(100, 10.0, random.Random(0))
    assert len(points) == 100
    assert all(0 <= p.x < 10.0 and 0 <= p.y < 10.0 for p in points)
