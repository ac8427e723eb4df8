"""Tests for observation merging."""

import pytest

from shapecomplete.engine.errors import IllegalTransition, InvalidDimensions, OutOfBounds
from shapecomplete.engine.grid import CellState, Grid
from shapecomplete.engine.observer import Observation, Observer


def test_point_observation():
    grid = Grid(5, 5)
    observer = Observer()
    observer.apply(grid, Observation.point(2, 2, CellState.OCCUPIED))
    assert grid.get(2, 2) == CellState.OCCUPIED
    assert grid.count(CellState.UNKNOWN) == 24
    assert observer.applied == 1


def test_region_observation():
    grid = Grid(5, 5)
    Observer().apply(grid, Observation.region(1, 2, 3, 2, CellState.FREE))
    assert grid.cells(CellState.FREE) == [(1, 2), (2, 2), (3, 2), (1, 3), (2, 3), (3, 3)]


def test_region_over_same_state_is_allowed():
    grid = Grid(4, 4)
    observer = Observer()
    observer.apply(grid, Observation.point(1, 1, CellState.OCCUPIED))
    observer.apply(grid, Observation.region(0, 0, 3, 3, CellState.OCCUPIED))
    assert grid.count(CellState.OCCUPIED) == 9


def test_region_commit_is_atomic():
    grid = Grid(5, 5)
    observer = Observer()
    observer.apply(grid, Observation.point(3, 3, CellState.FREE))
    observer.apply(grid, Observation.point(2, 3, CellState.FREE))
    before = grid.copy()

    with pytest.raises(IllegalTransition) as exc:
        observer.apply(grid, Observation.region(1, 1, 3, 3, CellState.OCCUPIED))

    # first conflict in row-major order
    assert (exc.value.x, exc.value.y) == (2, 3)
    assert grid == before
    assert observer.applied == 2


def test_region_out_of_bounds_leaves_grid_unchanged():
    grid = Grid(4, 4)
    before = grid.copy()
    with pytest.raises(OutOfBounds):
        Observer().apply(grid, Observation.region(2, 2, 3, 1, CellState.FREE))
    with pytest.raises(OutOfBounds):
        Observer().apply(grid, Observation.region(-1, 0, 2, 2, CellState.FREE))
    assert grid == before


def test_point_conflict():
    grid = Grid(5, 5)
    observer = Observer()
    observer.apply(grid, Observation.point(0, 0, CellState.OCCUPIED))
    with pytest.raises(IllegalTransition):
        observer.apply(grid, Observation.point(0, 0, CellState.FREE))
    assert grid.get(0, 0) == CellState.OCCUPIED


def test_observation_cannot_assign_unknown():
    with pytest.raises(IllegalTransition):
        Observation.point(0, 0, CellState.UNKNOWN)


def test_observation_needs_positive_extent():
    with pytest.raises(InvalidDimensions):
        Observation.region(0, 0, 0, 2, CellState.FREE)


def test_apply_all_in_order_stops_at_first_failure():
    grid = Grid(3, 3)
    observer = Observer()
    observations = [
        Observation.point(0, 0, CellState.OCCUPIED),
        Observation.point(1, 0, CellState.FREE),
        Observation.point(0, 0, CellState.FREE),
        Observation.point(2, 2, CellState.OCCUPIED),
    ]
    with pytest.raises(IllegalTransition):
        observer.apply_all(grid, observations)

    assert grid.get(0, 0) == CellState.OCCUPIED
    assert grid.get(1, 0) == CellState.FREE
    assert grid.get(2, 2) == CellState.UNKNOWN
    assert observer.applied == 2


def test_apply_all_returns_count():
    grid = Grid(3, 3)
    n = Observer().apply_all(grid, [Observation.point(x, 1, CellState.FREE) for x in range(3)])
    assert n == 3
    assert grid.count(CellState.FREE) == 3
