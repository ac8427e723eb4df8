"""Shared test fixtures."""

from __future__ import annotations

import pytest

from shapecomplete.engine.config import CompletionConfig
from shapecomplete.engine.grid import CompletedGrid, Grid


# Text grids: ? unknown, . free, # occupied

SINGLE_CELL = [
    "?????",
    "?????",
    "??#??",
    "?????",
    "?????",
]

L_SHAPE = [
    "?????",
    "?#???",
    "?#???",
    "?###?",
    "?????",
]

# L shape with long arms; its hull is the triangle x + y <= 8
LONG_L = [
    "#########",
    "#????????",
    "#????????",
    "#????????",
    "#????????",
    "#????????",
    "#????????",
    "#????????",
    "#????????",
]

THIN_RING = [
    ".....",
    ".###.",
    ".#?#.",
    ".###.",
    ".....",
]

THICK_RING = [
    "........",
    ".######.",
    ".######.",
    ".##??##.",
    ".##??##.",
    ".######.",
    ".######.",
    "........",
]

# Four single-cell regions around one unknown cell
DIAMOND = [
    ".#.",
    "#?#",
    ".#.",
]

MIXED = [
    "#.?",
    "??#",
    "##?",
]

FULLY_KNOWN = [
    "#..#",
    "##..",
    "..##",
]

# Region origins, row-major: (0,0), (1,0), (2,1), (0,2)
MIXED_ORIGINS = [(0, 0), (1, 0), (2, 1), (0, 2)]

NO_GROWTH = CompletionConfig(tolerance=0.0)
HULL_ONLY = CompletionConfig(tolerance=0.0, fill_enclosed=False)


def grid_of(rows: list[str]) -> Grid:
    return Grid.from_rows(rows)


def completed_of(rows: list[str]) -> CompletedGrid:
    return CompletedGrid(Grid.from_rows(rows).to_array())


@pytest.fixture
def empty_grid() -> Grid:
    return Grid(5, 5)


@pytest.fixture
def single_cell_grid() -> Grid:
    return grid_of(SINGLE_CELL)


@pytest.fixture
def l_shape_grid() -> Grid:
    return grid_of(L_SHAPE)


@pytest.fixture
def mixed_grid() -> Grid:
    return grid_of(MIXED)
