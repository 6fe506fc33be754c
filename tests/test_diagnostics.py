import logging

from voxelscope.core.diagnostics import (
    StructureAnalysis,
    StructureNotFound,
    classify,
    format_report,
    report,
)
from voxelscope.core.structures import DEFAULT_TILE_STRUCTURES, TileStructure
from voxelscope.core.voxels import VoxelKind

S, E, T = VoxelKind.SOLID, VoxelKind.EMPTY, VoxelKind.STAIR


def _table():
    floor = ((S, E), (T, S))
    empty = ((E, E), (E, E))
    return {"probe": TileStructure("probe", (floor, empty, empty))}


def test_classify_totals_and_row_major_positions():
    analysis = classify(_table(), "probe")
    assert isinstance(analysis, StructureAnalysis)
    assert analysis.total_solid == 2
    assert analysis.total_empty == 6
    assert analysis.total_stair == 1
    assert analysis.total_voxels == 9
    assert analysis.layers["floor"].solid_voxels == ["(0,0,0)", "(1,0,1)"]
    assert analysis.layers["floor"].empty_voxels == ["(1,0,0)"]
    assert analysis.layers["floor"].stair_voxels == ["(0,0,1)"]
    assert analysis.layers["mid"].empty_voxels == ["(0,1,0)", "(1,1,0)", "(0,1,1)", "(1,1,1)"]
    assert list(analysis.layers) == ["floor", "mid", "ceiling"]


def test_classify_unknown_structure_returns_not_found():
    result = classify(_table(), "missing_tile")
    assert isinstance(result, StructureNotFound)
    assert result.structure_id == "missing_tile"
    assert "missing_tile" in result.message


def test_classify_accepts_raw_records():
    table = {"raw": {"structure": [[[1, 0]], [[0, 0]], [[1, 1]]], "type": "corridor"}}
    analysis = classify(table, "raw")
    assert analysis.total_solid == 3
    assert analysis.total_empty == 3
    assert analysis.layers["ceiling"].solid_voxels == ["(0,2,0)", "(1,2,0)"]


def test_unknown_values_are_flagged_but_not_counted(caplog):
    table = {"odd": {"structure": [[[1, 7]], [[0, "x"]], [[2, 0]]]}}
    with caplog.at_level(logging.WARNING, logger="voxelscope.core.diagnostics"):
        analysis = classify(table, "odd")
    assert analysis.total_solid == 1
    assert analysis.total_empty == 2
    assert analysis.total_stair == 1
    assert analysis.total_voxels == 4
    assert analysis.layers["floor"].unclassified_voxels == ["(1,0,0)"]
    assert analysis.layers["mid"].unclassified_voxels == ["(1,1,0)"]
    assert analysis.total_unclassified == 2
    assert "unknown voxel values" in caplog.text


def test_builtin_stair_up_has_single_stair_in_mid_layer():
    analysis = classify(DEFAULT_TILE_STRUCTURES, "stair_up")
    assert analysis.total_stair == 1
    assert analysis.layers["mid"].stair_voxels == ["(1,1,1)"]
    assert analysis.total_voxels == 27


def test_classify_is_repeatable():
    a = classify(DEFAULT_TILE_STRUCTURES, "corner_ne")
    b = classify(DEFAULT_TILE_STRUCTURES, "corner_ne")
    assert a == b


def test_format_report_sections():
    lines = format_report(classify(_table(), "probe"))
    assert "=== DIAGNOSTIC REPORT: probe ===" in lines
    assert "Total voxels: 9" in lines
    assert "  Solid (should render): 2" in lines
    assert "  Stairs: 1" in lines
    assert "FLOOR LAYER:" in lines
    assert "     Positions: (0,0,0), (1,0,1)" in lines
    # Ceiling is all empty: no solid group printed for it
    ceiling_idx = lines.index("CEILING LAYER:")
    assert not any("SOLID" in line for line in lines[ceiling_idx:])


def test_report_sends_lines_to_sink():
    seen = []
    lines = report(_table(), "probe", emit=seen.append)
    assert seen == lines
    assert any("DIAGNOSTIC REPORT: probe" in line for line in seen)


def test_report_unknown_structure_emits_single_message():
    seen = []
    lines = report(_table(), "nope", emit=seen.append)
    assert lines == ["Structure 'nope' not found"]
    assert seen == lines


def test_report_defaults_to_logger(caplog):
    with caplog.at_level(logging.INFO, logger="voxelscope.core.diagnostics"):
        report(DEFAULT_TILE_STRUCTURES, "dead_end_n")
    assert "DIAGNOSTIC REPORT: dead_end_n" in caplog.text
