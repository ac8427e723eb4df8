"""Growth policies — decide which unknown cells a region claims per iteration.

A policy sees the region, the current frontier (boundary cells on the first
iteration, the cells claimed last iteration afterwards) and the working state
array. It returns cells to claim, in a deterministic order, and never mutates
the array itself.
"""

from __future__ import annotations

import abc
import functools
from collections.abc import Sequence

import numpy as np
import shapely
from numpy.typing import NDArray
from shapely.geometry import MultiPoint

from shapecomplete.engine.grid import CellState, Coord
from shapecomplete.engine.tracer import Region, neighbours

# Float slack when comparing hull distances against the tolerance.
_DISTANCE_EPS = 1e-9


class GrowthPolicy(abc.ABC):
    """Strategy interface: (region, frontier) -> newly claimed cells."""

    connectivity: int = 4

    @abc.abstractmethod
    def admits(self, region: Region, shape: tuple[int, int]) -> NDArray[np.bool_]:
        """Boolean ``(height, width)`` mask of cells ``region`` may ever claim."""

    def claim(
        self,
        region: Region,
        frontier: Sequence[Coord],
        states: NDArray[np.int8],
    ) -> list[Coord]:
        """Unknown, admitted neighbours of the frontier, in frontier order."""
        height, width = states.shape
        admitted = self.admits(region, (height, width))
        claimed: list[Coord] = []
        taken: set[Coord] = set()

        for cell in frontier:
            for nx, ny in neighbours(cell, self.connectivity):
                if not (0 <= nx < width and 0 <= ny < height):
                    continue
                if states[ny, nx] != CellState.UNKNOWN or not admitted[ny, nx]:
                    continue
                if (nx, ny) in taken:
                    continue
                taken.add((nx, ny))
                claimed.append((nx, ny))
        return claimed


class HullTolerancePolicy(GrowthPolicy):
    """Claim cells within ``tolerance`` cells of the region's convex hull.

    The hull is built from the region's observed cells only, so growth stays
    bounded no matter how many iterations run. Tolerance 0 fills concavities
    up to the hull and never goes past it.
    """

    def __init__(self, tolerance: float = 1.0, connectivity: int = 4) -> None:
        self.tolerance = float(tolerance)
        self.connectivity = connectivity

    def admits(self, region: Region, shape: tuple[int, int]) -> NDArray[np.bool_]:
        return _hull_mask(region.cells, shape, self.tolerance)

    def __repr__(self) -> str:
        return f"HullTolerancePolicy(tolerance={self.tolerance}, connectivity={self.connectivity})"


@functools.lru_cache(maxsize=128)
def _hull_mask(
    cells: tuple[Coord, ...],
    shape: tuple[int, int],
    tolerance: float,
) -> NDArray[np.bool_]:
    height, width = shape
    mask = np.zeros((height, width), dtype=bool)
    hull = MultiPoint(cells).convex_hull

    # Only cells inside the hull's bbox grown by the tolerance can qualify
    reach = int(np.ceil(tolerance))
    xmin, ymin, xmax, ymax = (int(round(v)) for v in hull.bounds)
    x0, x1 = max(0, xmin - reach), min(width - 1, xmax + reach)
    y0, y1 = max(0, ymin - reach), min(height - 1, ymax + reach)

    ys, xs = np.mgrid[y0 : y1 + 1, x0 : x1 + 1]
    points = shapely.points(xs.ravel().astype(float), ys.ravel().astype(float))
    distances = shapely.distance(hull, points)
    window = (distances <= tolerance + _DISTANCE_EPS).reshape(xs.shape)
    mask[y0 : y1 + 1, x0 : x1 + 1] = window

    mask.flags.writeable = False
    return mask
