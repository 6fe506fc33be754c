# voxelscope Structure Diagnostics
# Verifies what voxel->mesh generation should produce for a tile structure.
#
# This module provides:
# - classify(): bucket every cell of the three layers into SOLID / EMPTY / STAIR
# - format_report(): human-readable lines for an analysis
# - report(): classify + format, sending each line to a caller-supplied sink
#
# Notes:
# - Cells are scanned layer by layer (floor, mid, ceiling), rows first (z), then columns (x).
#   Position lists keep that order so reports are reproducible.
# - Cells holding a value other than the three voxel kinds are counted in no total.
#   They are listed under unclassified_voxels and logged as a warning so malformed
#   structure data does not go unnoticed.
# - An unknown structure id yields a StructureNotFound value; nothing here raises.

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .structures import layers_of
from .voxels import LAYER_NAMES, Position, VoxelKind, voxel_kind

logger = logging.getLogger(__name__)


@dataclass
class LayerAnalysis:
    solid_voxels: List[str] = field(default_factory=list)
    empty_voxels: List[str] = field(default_factory=list)
    stair_voxels: List[str] = field(default_factory=list)
    unclassified_voxels: List[str] = field(default_factory=list)


@dataclass
class StructureAnalysis:
    structure_id: str
    layers: Dict[str, LayerAnalysis] = field(default_factory=dict)
    total_solid: int = 0
    total_empty: int = 0
    total_stair: int = 0

    @property
    def total_voxels(self) -> int:
        return self.total_solid + self.total_empty + self.total_stair

    @property
    def total_unclassified(self) -> int:
        return sum(len(la.unclassified_voxels) for la in self.layers.values())


@dataclass(frozen=True)
class StructureNotFound:
    structure_id: str

    @property
    def message(self) -> str:
        return f"Structure '{self.structure_id}' not found"

    def __str__(self) -> str:
        return self.message


AnalysisResult = Union[StructureAnalysis, StructureNotFound]


def _record(analysis: StructureAnalysis, layer: LayerAnalysis, kind: Optional[VoxelKind], pos: str) -> None:
    if kind is VoxelKind.SOLID:
        layer.solid_voxels.append(pos)
        analysis.total_solid += 1
    elif kind is VoxelKind.EMPTY:
        layer.empty_voxels.append(pos)
        analysis.total_empty += 1
    elif kind is VoxelKind.STAIR:
        layer.stair_voxels.append(pos)
        analysis.total_stair += 1
    else:
        layer.unclassified_voxels.append(pos)


def classify(structure_table: Mapping[str, Any], structure_id: str) -> AnalysisResult:
    """
    Analyze one structure of a table and report what should be rendered.

    Returns a StructureAnalysis, or StructureNotFound carrying the requested id
    when the table has no such entry (or the entry holds no layers).
    """
    record = structure_table.get(structure_id) if structure_table is not None else None
    layers = layers_of(record) if record is not None else None
    if layers is None:
        logger.debug(f"classify: structure '{structure_id}' not in table")
        return StructureNotFound(structure_id)

    analysis = StructureAnalysis(structure_id=structure_id)
    for layer_idx, layer in enumerate(layers[:len(LAYER_NAMES)]):
        layer_analysis = LayerAnalysis()
        for z, row in enumerate(layer):
            for x, value in enumerate(row):
                pos = str(Position(x, layer_idx, z))
                _record(analysis, layer_analysis, voxel_kind(value), pos)
        analysis.layers[LAYER_NAMES[layer_idx]] = layer_analysis

        if layer_analysis.unclassified_voxels:
            logger.warning(
                f"Structure '{structure_id}' {LAYER_NAMES[layer_idx]} layer has "
                f"{len(layer_analysis.unclassified_voxels)} cell(s) with unknown voxel values: "
                f"{', '.join(layer_analysis.unclassified_voxels)}"
            )

    return analysis


def format_report(analysis: AnalysisResult) -> List[str]:
    """Render an analysis as report lines (without trailing newlines)."""
    if isinstance(analysis, StructureNotFound):
        return [analysis.message]

    lines: List[str] = [
        "",
        f"=== DIAGNOSTIC REPORT: {analysis.structure_id} ===",
        f"Total voxels: {analysis.total_voxels}",
        f"  Solid (should render): {analysis.total_solid}",
        f"  Empty (traversable air): {analysis.total_empty}",
        f"  Stairs: {analysis.total_stair}",
    ]
    if analysis.total_unclassified:
        lines.append(f"  Unclassified (unknown value): {analysis.total_unclassified}")

    groups = (
        ("solid_voxels", "SOLID voxels (should generate meshes)"),
        ("empty_voxels", "EMPTY voxels (no mesh, traversable)"),
        ("stair_voxels", "STAIR voxels"),
        ("unclassified_voxels", "UNCLASSIFIED voxels (unknown value)"),
    )
    for layer_name, data in analysis.layers.items():
        lines.append("")
        lines.append(f"{layer_name.upper()} LAYER:")
        for attr, label in groups:
            positions = getattr(data, attr)
            if positions:
                lines.append(f"  {label}: {len(positions)}")
                lines.append(f"     Positions: {', '.join(positions)}")
    return lines


def _log_sink(is_error: bool) -> Callable[[str], None]:
    return logger.error if is_error else logger.info


def report(
    structure_table: Mapping[str, Any],
    structure_id: str,
    emit: Optional[Callable[[str], None]] = None,
) -> List[str]:
    """
    Classify a structure and emit its diagnostic report line by line.

    emit defaults to this module's logger (INFO for reports, ERROR for a missing
    structure). The emitted lines are also returned.
    """
    analysis = classify(structure_table, structure_id)
    lines = format_report(analysis)
    sink = emit or _log_sink(isinstance(analysis, StructureNotFound))
    for line in lines:
        sink(line)
    return lines


__all__ = [
    "LayerAnalysis",
    "StructureAnalysis",
    "StructureNotFound",
    "AnalysisResult",
    "classify",
    "format_report",
    "report",
]
