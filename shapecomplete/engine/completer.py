"""Completer — resolves every UNKNOWN cell of a grid to FREE or OCCUPIED.

Steps, all deterministic:
1. Find regions of the live grid (tracer order).
2. Grow each OCCUPIED region from its frontier (outer boundary, then hole
   edges) into UNKNOWN cells, one sweep per iteration, as far as the growth
   policy admits.
3. Stop a region when a sweep claims nothing or the iteration cap is reached.
4. Optionally fill UNKNOWN pockets enclosed only by OCCUPIED cells.
5. Everything still UNKNOWN becomes FREE.

The live grid is read, never written; results go into a fresh CompletedGrid.
"""

from __future__ import annotations

import logging
import threading
import time

import numpy as np
from numpy.typing import NDArray
from scipy import ndimage

from shapecomplete.engine.config import CompletionConfig
from shapecomplete.engine.errors import Cancelled
from shapecomplete.engine.grid import CellState, CompletedGrid, GridView
from shapecomplete.engine.policy import GrowthPolicy, HullTolerancePolicy
from shapecomplete.engine.tracer import FOUR_CONNECTED, Region, regions, seed_frontier

logger = logging.getLogger(__name__)


class CancelToken:
    """Cooperative cancellation flag, safe to set from another thread."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise Cancelled()


class Completer:
    """Runs completions with one fixed configuration and growth policy."""

    def __init__(
        self,
        config: CompletionConfig | None = None,
        policy: GrowthPolicy | None = None,
    ) -> None:
        self.config = config or CompletionConfig()
        self.policy = policy or HullTolerancePolicy(
            tolerance=self.config.tolerance,
            connectivity=self.config.connectivity,
        )

    def complete(self, grid: GridView, cancel: CancelToken | None = None) -> CompletedGrid:
        start = time.perf_counter()
        if cancel is not None:
            cancel.raise_if_cancelled()
        states = np.array(grid.to_array(), dtype=np.int8, copy=True)
        unknown_before = int(np.count_nonzero(states == CellState.UNKNOWN))

        grown = 0
        for region in regions(grid):
            if region.state != CellState.OCCUPIED:
                continue
            grown += self._grow(region, states, cancel)

        enclosed = 0
        if self.config.fill_enclosed:
            enclosed = fill_enclosed_pockets(states)

        states[states == CellState.UNKNOWN] = CellState.FREE
        result = CompletedGrid(states)

        logger.info(
            "Completion: %d unknown cells resolved (%d grown, %d enclosed) in %.1fms",
            unknown_before,
            grown,
            enclosed,
            (time.perf_counter() - start) * 1000,
        )
        return result

    def _grow(
        self,
        region: Region,
        states: NDArray[np.int8],
        cancel: CancelToken | None,
    ) -> int:
        """Grow one region in place. Returns the number of cells claimed."""
        cap = self.config.max_iterations
        frontier = seed_frontier(region, states)
        total = 0
        iterations = 0

        while iterations < cap:
            if cancel is not None:
                cancel.raise_if_cancelled()
            claimed = self.policy.claim(region, frontier, states)
            if not claimed:
                break
            for x, y in claimed:
                states[y, x] = CellState.OCCUPIED
            total += len(claimed)
            frontier = claimed
            iterations += 1
        else:
            # Warn only if another sweep would still have claimed cells
            if cap > 0 and self.policy.claim(region, frontier, states):
                logger.warning(
                    "Region %d stopped at the iteration cap (%d) after claiming %d cells",
                    region.label,
                    cap,
                    total,
                )

        logger.debug(
            "Region %d (%d cells at %s): claimed %d cells in %d iterations",
            region.label,
            region.size,
            region.origin,
            total,
            iterations,
        )
        return total


def fill_enclosed_pockets(states: NDArray[np.int8]) -> int:
    """Mark UNKNOWN pockets bordered only by OCCUPIED cells as OCCUPIED.

    A pocket touching the grid edge or any FREE cell is left alone.
    Returns the number of cells filled.
    """
    unknown = states == CellState.UNKNOWN
    labels, n = ndimage.label(unknown, structure=FOUR_CONNECTED)
    if n == 0:
        return 0

    open_ids = set(np.unique(labels[0, :])) | set(np.unique(labels[-1, :]))
    open_ids |= set(np.unique(labels[:, 0])) | set(np.unique(labels[:, -1]))
    near_free = ndimage.binary_dilation(states == CellState.FREE, structure=FOUR_CONNECTED)
    open_ids |= set(np.unique(labels[near_free & unknown]))

    enclosed = [i for i in range(1, n + 1) if i not in open_ids]
    if not enclosed:
        return 0
    mask = np.isin(labels, enclosed)
    states[mask] = CellState.OCCUPIED
    return int(np.count_nonzero(mask))


def complete(
    grid: GridView,
    config: CompletionConfig | None = None,
    cancel: CancelToken | None = None,
) -> CompletedGrid:
    """Convenience wrapper: ``Completer(config).complete(grid, cancel)``."""
    return Completer(config).complete(grid, cancel)
