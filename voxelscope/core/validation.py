# Structure record validation for voxelscope
# Checks the shape of raw tile structure records before they enter a structure table.
#
# Contract highlights:
# - A record holds exactly three layers (floor, mid, ceiling) under "structure".
# - Every layer is a non-empty list of equal-length rows.
# - All layers share the same bounding box (row count and column count).
# - Cell values are NOT checked against the voxel kinds; unknown values are
#   left for the diagnostics analyzer to flag.
#
# Public API:
# - validate_structure_record(structure_id, record) -> list[ValidationIssue]
# - assert_valid_structure_record(structure_id, record) -> None  (raises StructureTableError)

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from .voxels import LAYER_NAMES

EDGE_COUNT = 4


class StructureTableError(Exception):
    """Raised when a structure table record is malformed."""
    pass


@dataclass
class ValidationIssue:
    path: str
    message: str
    code: str = "invalid"

    def __str__(self) -> str:
        return f"{self.path}: {self.message} ({self.code})"


def _require(cond: bool, issues: list[ValidationIssue], path: str, msg: str, code: str = "invalid") -> None:
    if not cond:
        issues.append(ValidationIssue(path=path, message=msg, code=code))


def _type_of(value: Any) -> str:
    return type(value).__name__


def _is_row(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _layer_shape(layer: Any, path: str, issues: list[ValidationIssue]) -> Optional[Tuple[int, int]]:
    if not _is_row(layer):
        issues.append(ValidationIssue(path, f"layer must be a list of rows, got: {_type_of(layer)}", "type"))
        return None
    if len(layer) == 0:
        issues.append(ValidationIssue(path, "layer must have at least one row", "empty"))
        return None

    width: Optional[int] = None
    ok = True
    for z, row in enumerate(layer):
        if not _is_row(row):
            issues.append(ValidationIssue(f"{path}[{z}]", f"row must be a list, got: {_type_of(row)}", "type"))
            ok = False
            continue
        if width is None:
            width = len(row)
        elif len(row) != width:
            issues.append(ValidationIssue(f"{path}[{z}]", f"row length {len(row)} != {width}", "shape"))
            ok = False
    if not ok or width is None:
        return None
    return len(layer), width


def validate_structure_record(structure_id: str, record: Any) -> list[ValidationIssue]:
    """
    Validate one raw structure record. Returns the list of issues (empty when valid).
    """
    issues: list[ValidationIssue] = []
    root = f"$.{structure_id}"

    _require(isinstance(record, Mapping), issues, root, f"record must be an object, got: {_type_of(record)}", "type")
    if not isinstance(record, Mapping):
        return issues

    layers = record.get("structure")
    _require(layers is not None, issues, root, "Missing required field: structure", "required")
    if layers is None:
        return issues
    if not _is_row(layers) or len(layers) != len(LAYER_NAMES):
        issues.append(ValidationIssue(f"{root}.structure", f"expected {len(LAYER_NAMES)} layers (floor, mid, ceiling)", "shape"))
        return issues

    shapes = []
    for idx, layer in enumerate(layers):
        shape = _layer_shape(layer, f"{root}.structure[{idx}]", issues)
        if shape is not None:
            shapes.append((idx, shape))

    # Uniform bounding box across layers
    if shapes:
        first = shapes[0][1]
        for idx, shape in shapes[1:]:
            _require(
                shape == first,
                issues,
                f"{root}.structure[{idx}]",
                f"{LAYER_NAMES[idx]} layer is {shape[0]}x{shape[1]}, expected {first[0]}x{first[1]}",
                "shape",
            )

    edges = record.get("edges")
    if edges is not None:
        _require(
            _is_row(edges) and len(edges) == EDGE_COUNT and all(isinstance(e, str) for e in edges),
            issues,
            f"{root}.edges",
            "edges must be four strings (n, e, s, w)",
            "format",
        )

    typ = record.get("type")
    if typ is not None:
        _require(isinstance(typ, str), issues, f"{root}.type", f"type must be string, got: {_type_of(typ)}", "type")

    return issues


def assert_valid_structure_record(structure_id: str, record: Any) -> None:
    issues = validate_structure_record(structure_id, record)
    if issues:
        readable = "; ".join(str(i) for i in issues[:10])
        raise StructureTableError(f"Structure '{structure_id}' is malformed: {readable}")


__all__ = [
    "StructureTableError",
    "ValidationIssue",
    "validate_structure_record",
    "assert_valid_structure_record",
]
