"""Completion session — the facade the rendering/binding layer talks to.

Owns the live grid and serializes every mutation through one lock. Engine
errors come back as ``Failure`` results instead of exceptions; they are
converted, never dropped.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Annotated, Literal, TypeVar, Union

from pydantic import BaseModel, Field

from shapecomplete.engine.completer import CancelToken, Completer
from shapecomplete.engine.config import CompletionConfig
from shapecomplete.engine.errors import ErrorKind, ShapeCompletionError
from shapecomplete.engine.grid import CellState, CompletedGrid, Grid
from shapecomplete.engine.observer import Observation, Observer
from shapecomplete.engine.snapshot import Snapshot, export_snapshot

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorInfo(BaseModel):
    kind: ErrorKind
    message: str


class Success(BaseModel):
    status: Literal["ok"] = "ok"
    snapshot: Snapshot | None = None


class Failure(BaseModel):
    status: Literal["error"] = "error"
    error: ErrorInfo


Result = Annotated[Union[Success, Failure], Field(discriminator="status")]


def failure_from(exc: ShapeCompletionError) -> Failure:
    return Failure(error=ErrorInfo(kind=exc.kind, message=str(exc)))


class CompletionSession:
    """One live grid plus the observer and completer that work on it."""

    def __init__(
        self,
        width: int,
        height: int,
        config: CompletionConfig | None = None,
    ) -> None:
        self.grid = Grid(width, height)
        self.config = config or CompletionConfig.from_settings()
        self.observer = Observer()
        self.completer = Completer(self.config)
        self.last_completion: CompletedGrid | None = None
        self._lock = threading.Lock()
        # Completion runs are numbered in start order; later starts win
        self._runs_started = 0
        self._stored_run = 0

    def observe(self, observation: Observation) -> Result:
        with self._lock:
            return self._guard(lambda: self.observer.apply(self.grid, observation))

    def observe_point(self, x: int, y: int, state: CellState) -> Result:
        return self._guard(lambda: self.observe(Observation.point(x, y, state)))

    def observe_region(self, x: int, y: int, width: int, height: int, state: CellState) -> Result:
        return self._guard(lambda: self.observe(Observation.region(x, y, width, height, state)))

    def complete(self, cancel: CancelToken | None = None) -> Result:
        with self._lock:
            grid = self.grid.copy()
            self._runs_started += 1
            run_id = self._runs_started

        def run() -> Success:
            completed = self.completer.complete(grid, cancel)
            with self._lock:
                if run_id > self._stored_run:
                    self._stored_run = run_id
                    self.last_completion = completed
            return Success(snapshot=export_snapshot(completed))

        return self._guard(run)

    def snapshot(self) -> Result:
        with self._lock:
            return Success(snapshot=export_snapshot(self.grid))

    def _guard(self, fn: Callable[[], T]) -> Result:
        try:
            value = fn()
        except ShapeCompletionError as e:
            logger.info("Session operation failed: %s (%s)", e.kind.value, e)
            return failure_from(e)
        if isinstance(value, (Success, Failure)):
            return value
        return Success()
