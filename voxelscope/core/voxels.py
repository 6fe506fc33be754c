# Voxel semantics for voxelscope
#
# Single definition site for voxel cell values and layer indices:
#   0 = EMPTY  (walkable / air, no geometry)
#   1 = SOLID  (wall / floor / ceiling mass, renders as geometry)
#   2 = STAIR  (special traversable element)
#
# Public API:
# - VoxelKind, Layer, LAYER_NAMES
# - Position(x, layer, z)
# - voxel_kind(value) -> VoxelKind | None
# - is_voxel_value(value) -> bool
# - voxel_meaning(value) -> str

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Optional, Tuple


class VoxelKind(IntEnum):
    EMPTY = 0
    SOLID = 1
    STAIR = 2


class Layer(IntEnum):
    FLOOR = 0
    MID = 1
    CEILING = 2


LAYER_NAMES: Tuple[str, str, str] = ("floor", "mid", "ceiling")


@dataclass(frozen=True)
class Position:
    x: int
    layer: int
    z: int

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.x, self.layer, self.z)

    def __str__(self) -> str:
        return f"({self.x},{self.layer},{self.z})"


def voxel_kind(value: Any) -> Optional[VoxelKind]:
    """Return the VoxelKind for a stored cell value, or None if it is not one."""
    # bool is an int subclass; True must not read as SOLID
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    try:
        return VoxelKind(value)
    except ValueError:
        return None


def is_voxel_value(value: Any) -> bool:
    return voxel_kind(value) is not None


def voxel_meaning(value: Any) -> str:
    """
    Human readable meaning of a cell value: 'empty', 'solid', 'stair',
    or 'unknown' for anything else.
    """
    kind = voxel_kind(value)
    if kind is None:
        return "unknown"
    return kind.name.lower()


__all__ = [
    "VoxelKind",
    "Layer",
    "LAYER_NAMES",
    "Position",
    "voxel_kind",
    "is_voxel_value",
    "voxel_meaning",
]
