"""Boundary tracer — regions and their outer boundaries, derived on demand.

Regions are maximal 4-connected components of one committed state. Nothing is
cached: every call rescans the grid it is given.

Boundary trace: a left-hand wall follower that moves in 4-steps with the
outside of the region on its left. Starting at the region's lowest (y, x) cell
heading east, this walks the outer contour clockwise on screen (y down).
Consecutive entries are 4-adjacent and the last entry is 4-adjacent to the
first. One-cell-thick parts of a region are walked out and back, so their
cells appear twice. Cells past the grid edge count as outside, so a region
filling the whole grid still traces the grid perimeter. Concave corners whose
outside neighbour is only diagonal are part of the walk.

Hole edges are not on the outer trace. The frontier adds them after it.
"""

from __future__ import annotations

import functools
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from scipy import ndimage

from shapecomplete.engine.grid import CellState, Coord, GridView

# Clockwise on screen: N, E, S, W. (index + 1) % 4 is a right turn.
DIRECTIONS_4: tuple[Coord, ...] = ((0, -1), (1, 0), (0, 1), (-1, 0))
# N, NE, E, SE, S, SW, W, NW
DIRECTIONS_8: tuple[Coord, ...] = (
    (0, -1), (1, -1), (1, 0), (1, 1), (0, 1), (-1, 1), (-1, 0), (-1, -1),
)

FOUR_CONNECTED = ndimage.generate_binary_structure(2, 1)


@dataclass(frozen=True)
class Region:
    """A maximal 4-connected set of same-state cells."""

    label: int
    state: CellState
    # Row-major (y, then x) order; cells[0] is the trace start.
    cells: tuple[Coord, ...]

    @property
    def size(self) -> int:
        return len(self.cells)

    @property
    def origin(self) -> Coord:
        return self.cells[0]

    @functools.cached_property
    def cell_set(self) -> frozenset[Coord]:
        return frozenset(self.cells)

    @property
    def bbox(self) -> tuple[int, int, int, int]:
        """(xmin, ymin, xmax, ymax), inclusive."""
        xs = [c[0] for c in self.cells]
        ys = [c[1] for c in self.cells]
        return (min(xs), min(ys), max(xs), max(ys))

    def __contains__(self, cell: object) -> bool:
        return cell in self.cell_set


class RegionSequence:
    """Restartable, lazily built sequence of regions for one grid.

    Each iteration labels the grid afresh, so iterating twice over an
    unchanged grid yields identical regions in identical order.
    """

    def __init__(
        self,
        grid: GridView,
        states: Sequence[CellState] = (CellState.FREE, CellState.OCCUPIED),
    ) -> None:
        self._grid = grid
        self._states = tuple(CellState(s) for s in states)

    def __iter__(self) -> Iterator[Region]:
        cells = self._grid.to_array()
        components: list[tuple[Coord, CellState, list[Coord]]] = []

        for state in self._states:
            labels, n = ndimage.label(cells == state, structure=FOUR_CONNECTED)
            if n == 0:
                continue
            ys, xs = np.nonzero(labels)
            ids = labels[ys, xs]
            # Stable sort keeps each component's cells in row-major order
            order = np.argsort(ids, kind="stable")
            bounds = np.searchsorted(ids[order], np.arange(1, n + 2))
            for k in range(n):
                idx = order[bounds[k] : bounds[k + 1]]
                members = [(int(xs[i]), int(ys[i])) for i in idx]
                components.append(((members[0][1], members[0][0]), state, members))

        components.sort(key=lambda c: c[0])
        for label, (_, state, members) in enumerate(components):
            yield Region(label=label, state=state, cells=tuple(members))

    def __repr__(self) -> str:
        return f"RegionSequence({self._grid!r}, states={[s.name for s in self._states]})"


def regions(
    grid: GridView,
    states: Sequence[CellState] = (CellState.FREE, CellState.OCCUPIED),
) -> RegionSequence:
    """Regions of ``grid`` ordered by each region's lowest (y, x) cell."""
    return RegionSequence(grid, states)


def boundary(region: Region) -> list[Coord]:
    """Clockwise outer boundary trace of ``region``, starting at its origin.

    Edges against the grid border are followed like any other outside edge.
    """
    start = region.origin
    if region.size == 1:
        return [start]

    cells = region.cell_set
    trace = [start]
    current = start
    heading = 1  # east; north and west of the origin are outside
    first_move: int | None = None

    for _ in range(4 * region.size + 1):
        for turn in (-1, 0, 1, 2):  # left, straight, right, back
            d = (heading + turn) % 4
            dx, dy = DIRECTIONS_4[d]
            nxt = (current[0] + dx, current[1] + dy)
            if nxt in cells:
                break

        if first_move is None:
            first_move = d
        elif current == start and d == first_move:
            trace.pop()
            return trace

        heading = d
        current = nxt
        trace.append(current)

    raise RuntimeError(f"Boundary trace of region {region.label} did not close")


def neighbours(cell: Coord, connectivity: int = 4) -> list[Coord]:
    """Neighbour coordinates in fixed clockwise order (may be out of bounds)."""
    x, y = cell
    steps = DIRECTIONS_4 if connectivity == 4 else DIRECTIONS_8
    return [(x + dx, y + dy) for dx, dy in steps]


def frontier(region: Region, grid: GridView) -> list[Coord]:
    """Region cells that still touch an UNKNOWN 4-neighbour.

    Outer boundary cells come first in trace order, then hole-edge cells in
    row-major order. Each cell appears once.
    """
    return seed_frontier(region, grid.to_array())


def seed_frontier(region: Region, states: NDArray[np.int8]) -> list[Coord]:
    """``frontier`` over a raw ``(height, width)`` state array."""
    height, width = states.shape

    def touches_unknown(cell: Coord) -> bool:
        for nx, ny in neighbours(cell):
            if 0 <= nx < width and 0 <= ny < height and states[ny, nx] == CellState.UNKNOWN:
                return True
        return False

    seen: set[Coord] = set()
    result: list[Coord] = []
    for cell in boundary(region):
        if cell not in seen:
            seen.add(cell)
            if touches_unknown(cell):
                result.append(cell)
    for cell in region.cells:
        if cell not in seen and touches_unknown(cell):
            result.append(cell)
    return result
