"""Shape completion engine: grid, observer, tracer, completer, snapshots."""

from shapecomplete.engine.completer import CancelToken, Completer, complete
from shapecomplete.engine.config import CompletionConfig
from shapecomplete.engine.errors import (
    Cancelled,
    ErrorKind,
    IllegalTransition,
    InvalidDimensions,
    OutOfBounds,
    ShapeCompletionError,
)
from shapecomplete.engine.grid import CellState, CompletedGrid, Grid
from shapecomplete.engine.observer import Observation, Observer
from shapecomplete.engine.policy import GrowthPolicy, HullTolerancePolicy
from shapecomplete.engine.session import CompletionSession, Failure, Success
from shapecomplete.engine.snapshot import Snapshot, export_snapshot
from shapecomplete.engine.tracer import Region, boundary, frontier, regions

__all__ = [
    "CancelToken",
    "Cancelled",
    "CellState",
    "CompletedGrid",
    "CompletionConfig",
    "CompletionSession",
    "Completer",
    "ErrorKind",
    "Failure",
    "Grid",
    "GrowthPolicy",
    "HullTolerancePolicy",
    "IllegalTransition",
    "InvalidDimensions",
    "Observation",
    "Observer",
    "OutOfBounds",
    "Region",
    "ShapeCompletionError",
    "Snapshot",
    "Success",
    "boundary",
    "complete",
    "export_snapshot",
    "frontier",
    "regions",
]
