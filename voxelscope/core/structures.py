# Tile structure tables for voxelscope
#
# A structure is a named 3-layer voxel template [floor, mid, ceiling]; each layer
# is a grid of rows (z) of cells (x). Only one rotation of each built-in structure
# is defined here; rotational variants are a concern of the tileset, not of this table.
#
# Tables are read-only inputs. The diagnostics analyzer accepts any mapping of
# structure_id -> TileStructure (or a raw {"structure": [...]} record).

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .voxels import VoxelKind
from .validation import assert_valid_structure_record

logger = logging.getLogger(__name__)

Grid = Tuple[Tuple[Any, ...], ...]


@dataclass(frozen=True)
class TileStructure:
    structure_id: str
    layers: Tuple[Grid, Grid, Grid]
    edges: Tuple[str, ...] = ()
    type: Optional[str] = None

    @property
    def floor(self) -> Grid:
        return self.layers[0]

    @property
    def mid(self) -> Grid:
        return self.layers[1]

    @property
    def ceiling(self) -> Grid:
        return self.layers[2]


def _freeze_grid(layer: Sequence[Sequence[Any]]) -> Grid:
    return tuple(tuple(row) for row in layer)


def layers_of(record: Any) -> Optional[Sequence[Sequence[Sequence[Any]]]]:
    """
    Return the three layers of a table entry, whether it is a TileStructure or a
    raw record mapping with a "structure" key. None if neither.
    """
    if isinstance(record, TileStructure):
        return record.layers
    if isinstance(record, Mapping):
        return record.get("structure")
    return None


_E = VoxelKind.EMPTY
_S = VoxelKind.SOLID
_T = VoxelKind.STAIR


def _slab(kind: VoxelKind) -> Grid:
    return ((kind, kind, kind),) * 3


def _builtin(structure_id: str, floor: Grid, mid: Grid, ceiling: Grid, edges: Tuple[str, ...], typ: str) -> TileStructure:
    return TileStructure(structure_id=structure_id, layers=(floor, mid, ceiling), edges=edges, type=typ)


_BUILTINS = (
    # Cross intersection, open in all four directions
    _builtin(
        "corridor_nsew",
        _slab(_S),
        ((_S, _E, _S),
         (_E, _E, _E),
         (_S, _E, _S)),
        _slab(_S),
        ("101", "101", "101", "101"),
        "corridor",
    ),
    # Straight corridor north-south
    _builtin(
        "corridor_ns",
        _slab(_S),
        ((_S, _S, _S),
         (_E, _E, _E),
         (_S, _S, _S)),
        _slab(_S),
        ("101", "000", "101", "000"),
        "corridor",
    ),
    # T-junction north, south, east
    _builtin(
        "corridor_nse",
        _slab(_S),
        ((_S, _S, _S),
         (_E, _E, _E),
         (_S, _E, _S)),
        _slab(_S),
        ("101", "101", "101", "000"),
        "corridor",
    ),
    # L-corner north and east
    _builtin(
        "corner_ne",
        _slab(_S),
        ((_S, _E, _E),
         (_S, _E, _S),
         (_S, _E, _S)),
        _slab(_S),
        ("101", "101", "000", "000"),
        "corridor",
    ),
    _builtin(
        "open_space_3x3",
        _slab(_E),
        _slab(_E),
        _slab(_E),
        ("111", "111", "111", "111"),
        "room",
    ),
    # Ceiling open above the shaft for vertical traversal
    _builtin(
        "stair_up",
        _slab(_S),
        ((_S, _S, _S),
         (_E, _T, _E),
         (_S, _E, _S)),
        ((_S, _S, _S),
         (_E, _E, _E),
         (_E, _E, _E)),
        ("101", "101", "101", "101"),
        "stair",
    ),
    _builtin(
        "stair_down",
        ((_S, _S, _S),
         (_E, _E, _E),
         (_E, _E, _E)),
        ((_S, _E, _S),
         (_E, _T, _E),
         (_S, _S, _S)),
        _slab(_S),
        ("101", "101", "101", "101"),
        "stair",
    ),
    _builtin(
        "dead_end_n",
        _slab(_S),
        ((_S, _S, _S),
         (_S, _E, _S),
         (_S, _E, _S)),
        _slab(_S),
        ("101", "000", "000", "000"),
        "corridor",
    ),
    _builtin(
        "multi_level_open_down",
        _slab(_E),
        _slab(_E),
        _slab(_S),
        ("000", "000", "000", "000"),
        "open_space",
    ),
    _builtin(
        "multi_level_open_up",
        _slab(_S),
        _slab(_E),
        _slab(_E),
        ("000", "000", "000", "000"),
        "open_space",
    ),
)

DEFAULT_TILE_STRUCTURES: Mapping[str, TileStructure] = MappingProxyType(
    {s.structure_id: s for s in _BUILTINS}
)


def list_built_in_structure_ids() -> List[str]:
    return list(DEFAULT_TILE_STRUCTURES.keys())


def is_built_in_structure(structure_id: str) -> bool:
    return structure_id in DEFAULT_TILE_STRUCTURES


def structures_by_type(typ: str, table: Mapping[str, TileStructure] = DEFAULT_TILE_STRUCTURES) -> Dict[str, TileStructure]:
    """Return the subset of a table whose structures carry the given type, in table order."""
    return {sid: s for sid, s in table.items() if getattr(s, "type", None) == typ}


def structure_from_record(structure_id: str, record: Mapping[str, Any]) -> TileStructure:
    """
    Build an immutable TileStructure from a raw JSON-style record.
    Raises StructureTableError if the record shape is invalid.
    """
    assert_valid_structure_record(structure_id, record)
    floor, mid, ceiling = (_freeze_grid(layer) for layer in record["structure"])
    return TileStructure(
        structure_id=structure_id,
        layers=(floor, mid, ceiling),
        edges=tuple(record.get("edges") or ()),
        type=record.get("type"),
    )


def structure_table_from_mapping(raw: Mapping[str, Mapping[str, Any]]) -> Mapping[str, TileStructure]:
    """
    Build a read-only structure table from a mapping of structure_id -> raw record,
    e.g. the parsed contents of a JSON structure file.
    """
    table: Dict[str, TileStructure] = {}
    for structure_id, record in raw.items():
        table[structure_id] = structure_from_record(structure_id, record)
    logger.debug(f"Loaded structure table with {len(table)} entries")
    return MappingProxyType(table)


__all__ = [
    "DEFAULT_TILE_STRUCTURES",
    "TileStructure",
    "layers_of",
    "list_built_in_structure_ids",
    "is_built_in_structure",
    "structures_by_type",
    "structure_from_record",
    "structure_table_from_mapping",
]
