"""Observer — merges observation events into a live Grid.

A point observation is one ``Grid.set``. A region observation commits the same
state to every cell of a rectangle, or to none of them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np

from shapecomplete.engine.errors import IllegalTransition, InvalidDimensions
from shapecomplete.engine.grid import CellState, Grid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Observation:
    """A revealed cell or axis-aligned rectangle of cells."""

    x: int
    y: int
    state: CellState
    width: int = 1
    height: int = 1

    def __post_init__(self) -> None:
        object.__setattr__(self, "state", CellState(self.state))
        if self.state == CellState.UNKNOWN:
            raise IllegalTransition(self.x, self.y, None, self.state)
        if self.width < 1 or self.height < 1:
            raise InvalidDimensions(self.width, self.height)

    @classmethod
    def point(cls, x: int, y: int, state: CellState) -> Observation:
        return cls(x, y, state)

    @classmethod
    def region(cls, x: int, y: int, width: int, height: int, state: CellState) -> Observation:
        return cls(x, y, state, width, height)

    @property
    def is_point(self) -> bool:
        return self.width == 1 and self.height == 1


class Observer:
    """Applies observations in submission order."""

    def __init__(self) -> None:
        self.applied = 0

    def apply(self, grid: Grid, observation: Observation) -> None:
        if observation.is_point:
            grid.set(observation.x, observation.y, observation.state)
        else:
            self._apply_region(grid, observation)
        self.applied += 1
        logger.debug(
            "Applied observation #%d: %s at (%d, %d) size %dx%d",
            self.applied,
            observation.state.name,
            observation.x,
            observation.y,
            observation.width,
            observation.height,
        )

    def apply_all(self, grid: Grid, observations: Iterable[Observation]) -> int:
        """Apply in order; stops at the first failure. Returns how many applied."""
        count = 0
        for observation in observations:
            self.apply(grid, observation)
            count += 1
        return count

    def _apply_region(self, grid: Grid, obs: Observation) -> None:
        # block() raises OutOfBounds before anything is touched
        block = grid.block(obs.x, obs.y, obs.width, obs.height)
        conflicts = (block != CellState.UNKNOWN) & (block != obs.state)
        if np.any(conflicts):
            row, col = (int(v) for v in np.argwhere(conflicts)[0])
            current = CellState(int(block[row, col]))
            logger.debug(
                "Rejected region observation at (%d, %d): conflict at (%d, %d)",
                obs.x,
                obs.y,
                obs.x + col,
                obs.y + row,
            )
            raise IllegalTransition(obs.x + col, obs.y + row, current, obs.state)
        grid._assign_block(obs.x, obs.y, obs.width, obs.height, obs.state)
