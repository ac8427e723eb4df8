"""Occupancy grid — the authoritative per-cell state store.

Cells live in a ``(height, width)`` int8 array indexed ``[y, x]``. Public
methods all take ``(x, y)``: column first, origin top-left.
"""

from __future__ import annotations

import enum
import numbers
from collections.abc import Iterable, Iterator

import numpy as np
from numpy.typing import NDArray

from shapecomplete.engine.errors import IllegalTransition, InvalidDimensions, OutOfBounds

Coord = tuple[int, int]


class CellState(enum.IntEnum):
    UNKNOWN = 0
    FREE = 1
    OCCUPIED = 2


# Text glyphs used by from_rows / to_text.
GLYPHS: dict[CellState, str] = {
    CellState.UNKNOWN: "?",
    CellState.FREE: ".",
    CellState.OCCUPIED: "#",
}
_STATE_BY_GLYPH = {glyph: state for state, glyph in GLYPHS.items()}


def _check_dimensions(width: object, height: object) -> tuple[int, int]:
    for value in (width, height):
        if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value <= 0:
            raise InvalidDimensions(width, height)
    return int(width), int(height)


class GridView:
    """Read-only API shared by the live Grid and CompletedGrid."""

    _cells: NDArray[np.int8]

    @property
    def width(self) -> int:
        return int(self._cells.shape[1])

    @property
    def height(self) -> int:
        return int(self._cells.shape[0])

    def dimensions(self) -> tuple[int, int]:
        return (self.width, self.height)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def _require(self, x: int, y: int) -> None:
        if not self.in_bounds(x, y):
            raise OutOfBounds(x, y, self.width, self.height)

    def get(self, x: int, y: int) -> CellState:
        self._require(x, y)
        return CellState(int(self._cells[y, x]))

    def count(self, state: CellState) -> int:
        return int(np.count_nonzero(self._cells == state))

    def cells(self, state: CellState) -> list[Coord]:
        """Coordinates holding ``state``, in row-major order."""
        ys, xs = np.nonzero(self._cells == state)
        return [(int(x), int(y)) for y, x in zip(ys, xs)]

    def block(self, x: int, y: int, width: int, height: int) -> NDArray[np.int8]:
        """Read-only view of a rectangle. Both corners must be in bounds."""
        self._require(x, y)
        self._require(x + width - 1, y + height - 1)
        view = self._cells[y : y + height, x : x + width]
        view.flags.writeable = False
        return view

    def to_array(self) -> NDArray[np.int8]:
        """Read-only view of the backing ``(height, width)`` array."""
        view = self._cells.view()
        view.flags.writeable = False
        return view

    def to_text(self, sep: str = "") -> str:
        rows = []
        for row in self._cells:
            rows.append(sep.join(GLYPHS[CellState(int(v))] for v in row))
        return "\n".join(rows)

    def __iter__(self) -> Iterator[tuple[Coord, CellState]]:
        for y in range(self.height):
            for x in range(self.width):
                yield (x, y), CellState(int(self._cells[y, x]))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GridView):
            return NotImplemented
        return self._cells.shape == other._cells.shape and bool(
            np.array_equal(self._cells, other._cells)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.width}x{self.height})"


class Grid(GridView):
    """Live grid. Cells only move from UNKNOWN to a committed state."""

    def __init__(self, width: int, height: int) -> None:
        width, height = _check_dimensions(width, height)
        self._cells = np.zeros((height, width), dtype=np.int8)

    @classmethod
    def create(cls, width: int, height: int) -> Grid:
        return cls(width, height)

    @classmethod
    def from_rows(cls, rows: Iterable[str]) -> Grid:
        """Build a grid from text rows of ``?``, ``.`` and ``#`` (spaces ignored)."""
        parsed: list[list[int]] = []
        for line in rows:
            row = line.replace(" ", "").strip()
            if not row:
                continue
            try:
                parsed.append([int(_STATE_BY_GLYPH[ch]) for ch in row])
            except KeyError as e:
                raise ValueError(f"Unknown grid glyph {e.args[0]!r}") from None

        if not parsed:
            raise InvalidDimensions(0, 0)
        width = len(parsed[0])
        if any(len(r) != width for r in parsed):
            raise ValueError("Grid rows must all have the same length")

        grid = cls(width, len(parsed))
        grid._cells[:, :] = np.array(parsed, dtype=np.int8)
        return grid

    def can_set(self, x: int, y: int, state: CellState) -> bool:
        """True if ``set(x, y, state)`` would succeed. Bounds are checked."""
        self._require(x, y)
        state = CellState(state)
        if state == CellState.UNKNOWN:
            return False
        current = int(self._cells[y, x])
        return current == CellState.UNKNOWN or current == state

    def set(self, x: int, y: int, state: CellState) -> None:
        """Commit ``state`` at (x, y). Re-asserting the current state is a no-op."""
        state = CellState(state)
        if not self.can_set(x, y, state):
            raise IllegalTransition(x, y, self.get(x, y), state)
        self._cells[y, x] = state

    def copy(self) -> Grid:
        clone = Grid.__new__(Grid)
        clone._cells = self._cells.copy()
        return clone

    def _assign_block(self, x: int, y: int, width: int, height: int, state: CellState) -> None:
        # Caller has already validated every cell of the block.
        self._cells[y : y + height, x : x + width] = state


class CompletedGrid(GridView):
    """Immutable completion result: every cell is FREE or OCCUPIED."""

    def __init__(self, cells: NDArray[np.int8]) -> None:
        if cells.ndim != 2 or cells.shape[0] == 0 or cells.shape[1] == 0:
            raise InvalidDimensions(
                cells.shape[1] if cells.ndim == 2 else 0,
                cells.shape[0] if cells.ndim >= 1 else 0,
            )
        if np.any(cells == CellState.UNKNOWN):
            raise ValueError("A completed grid cannot contain UNKNOWN cells")
        self._cells = np.array(cells, dtype=np.int8, copy=True)
        self._cells.flags.writeable = False

    def occupied(self) -> list[Coord]:
        return self.cells(CellState.OCCUPIED)
