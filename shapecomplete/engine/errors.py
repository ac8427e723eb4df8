"""Engine error hierarchy.

Grid and Observer raise these and leave state untouched. The completer only
ever raises ``Cancelled``. The session boundary turns them into result values.
"""

from __future__ import annotations

import enum


class ErrorKind(str, enum.Enum):
    INVALID_DIMENSIONS = "InvalidDimensions"
    OUT_OF_BOUNDS = "OutOfBounds"
    ILLEGAL_TRANSITION = "IllegalTransition"
    CANCELLED = "Cancelled"


class ShapeCompletionError(Exception):
    """Base class for every error the engine raises."""

    kind: ErrorKind


class InvalidDimensions(ShapeCompletionError, ValueError):
    kind = ErrorKind.INVALID_DIMENSIONS

    def __init__(self, width: object, height: object) -> None:
        super().__init__(f"Grid dimensions must be positive integers, got {width}x{height}")
        self.width = width
        self.height = height


class OutOfBounds(ShapeCompletionError, IndexError):
    kind = ErrorKind.OUT_OF_BOUNDS

    def __init__(self, x: int, y: int, width: int, height: int) -> None:
        super().__init__(f"Cell ({x}, {y}) is outside the {width}x{height} grid")
        self.x = x
        self.y = y


class IllegalTransition(ShapeCompletionError, ValueError):
    kind = ErrorKind.ILLEGAL_TRANSITION

    def __init__(self, x: int, y: int, current: object, requested: object) -> None:
        if current is None:
            message = f"Cell ({x}, {y}) cannot be assigned {_name(requested)}"
        else:
            message = f"Cell ({x}, {y}) cannot go from {_name(current)} to {_name(requested)}"
        super().__init__(message)
        self.x = x
        self.y = y
        self.current = current
        self.requested = requested


class Cancelled(ShapeCompletionError):
    kind = ErrorKind.CANCELLED

    def __init__(self, message: str = "Completion cancelled") -> None:
        super().__init__(message)


def _name(state: object) -> str:
    return getattr(state, "name", str(state))
