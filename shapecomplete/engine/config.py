"""Completion configuration — controls how far growth reaches into unknown cells."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shapecomplete.config import Settings


@dataclass(frozen=True)
class CompletionConfig:
    """Per-run settings, passed explicitly to the completer."""

    # Growth neighbourhood: 4 = edge neighbours, 8 = edges + diagonals
    connectivity: int = 4

    # Max distance (in cells) a claimed cell centre may sit outside the
    # convex hull of the region's observed cells. 0 = hull only.
    tolerance: float = 1.0

    # Growth iterations per region; reaching it stops growth, never fails
    max_iterations: int = 64

    # Unknown pockets bordered only by occupied cells become occupied
    fill_enclosed: bool = True

    def __post_init__(self) -> None:
        if self.connectivity not in (4, 8):
            raise ValueError(f"connectivity must be 4 or 8, got {self.connectivity}")
        if self.tolerance < 0:
            raise ValueError(f"tolerance must be >= 0, got {self.tolerance}")
        if self.max_iterations < 0:
            raise ValueError(f"max_iterations must be >= 0, got {self.max_iterations}")

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> CompletionConfig:
        """Build a config from process-wide defaults."""
        if settings is None:
            from shapecomplete.config import settings
        return cls(
            connectivity=settings.default_connectivity,
            tolerance=settings.default_tolerance,
            max_iterations=settings.default_max_iterations,
            fill_enclosed=settings.default_fill_enclosed,
        )
