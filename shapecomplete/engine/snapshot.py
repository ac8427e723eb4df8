"""Snapshot exporter — packed bitmaps for the rendering boundary.

Wire layout (little-endian header)::

    u32 width | u32 height | occupied plane | [known plane]

Each plane is one bit per cell, row-major, packed MSB-first and padded to a
whole byte. The ``known`` plane is only present for live grids, where a clear
occupied bit alone cannot tell FREE from UNKNOWN.
"""

from __future__ import annotations

import struct

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, ConfigDict, Field, model_validator

from shapecomplete.engine.errors import InvalidDimensions
from shapecomplete.engine.grid import CellState, CompletedGrid, GridView

_HEADER = struct.Struct("<II")


def _plane_size(width: int, height: int) -> int:
    return (width * height + 7) // 8


class Snapshot(BaseModel):
    model_config = ConfigDict(frozen=True, ser_json_bytes="base64", val_json_bytes="base64")

    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    occupied: bytes
    known: bytes | None = None

    @model_validator(mode="after")
    def check_planes(self) -> Snapshot:
        size = _plane_size(self.width, self.height)
        for name, plane in (("occupied", self.occupied), ("known", self.known)):
            if plane is not None and len(plane) != size:
                raise ValueError(f"{name} plane is {len(plane)} bytes, expected {size}")
        return self

    def occupied_mask(self) -> NDArray[np.bool_]:
        return _unpack(self.occupied, self.width, self.height)

    def known_mask(self) -> NDArray[np.bool_]:
        """Known cells; all True when the snapshot came from a completed grid."""
        if self.known is None:
            return np.ones((self.height, self.width), dtype=bool)
        return _unpack(self.known, self.width, self.height)

    @property
    def is_complete(self) -> bool:
        return self.known is None

    def to_bytes(self) -> bytes:
        payload = _HEADER.pack(self.width, self.height) + self.occupied
        if self.known is not None:
            payload += self.known
        return payload

    @classmethod
    def from_bytes(cls, data: bytes) -> Snapshot:
        if len(data) < _HEADER.size:
            raise InvalidDimensions(0, 0)
        width, height = _HEADER.unpack_from(data)
        if width == 0 or height == 0:
            raise InvalidDimensions(width, height)

        size = _plane_size(width, height)
        body = data[_HEADER.size :]
        if len(body) == size:
            return cls(width=width, height=height, occupied=body)
        if len(body) == 2 * size:
            return cls(width=width, height=height, occupied=body[:size], known=body[size:])
        raise ValueError(
            f"Snapshot payload is {len(body)} bytes, expected {size} or {2 * size} "
            f"for a {width}x{height} grid"
        )


def export_snapshot(grid: GridView) -> Snapshot:
    """Pack ``grid`` into a Snapshot. Live grids also carry the known plane."""
    width, height = grid.dimensions()
    if width == 0 or height == 0:
        raise InvalidDimensions(width, height)

    cells = grid.to_array()
    occupied = _pack(cells == CellState.OCCUPIED)
    known = None
    if not isinstance(grid, CompletedGrid):
        known = _pack(cells != CellState.UNKNOWN)
    return Snapshot(width=width, height=height, occupied=occupied, known=known)


def _pack(mask: NDArray[np.bool_]) -> bytes:
    return np.packbits(mask.ravel(), bitorder="big").tobytes()


def _unpack(plane: bytes, width: int, height: int) -> NDArray[np.bool_]:
    bits = np.unpackbits(np.frombuffer(plane, dtype=np.uint8), count=width * height, bitorder="big")
    return bits.reshape(height, width).astype(bool)
