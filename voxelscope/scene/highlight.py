# voxelscope Tile Highlighting
# Find the meshes that make up a logical tile and toggle an emissive highlight on them.
#
# Public API:
# - find_meshes_for_tile(container, tile_id) -> list
# - highlight_meshes(meshes, color=None) -> int
# - clear_meshes(meshes) -> int
# - reset_highlight_state(meshes) -> None
# - highlight_tile(container, tile_id, color=None) -> int
# - clear_tile(container, tile_id) -> int
# - apply_tile_identity(node, tile_id, clone_materials=True)
# - TileSelection: single-selection controller for editors
#
# Notes:
# - Only direct children of the container whose tile_id matches are descended into.
#   A matching mesh under a differently tagged child is never returned.
# - The emissive value a mesh had before its first highlight is saved once, exactly
#   as the surface holds it, and never overwritten; clear restores it but keeps it saved.
# - Missing containers, unknown tile ids and meshes without an emissive colour
#   affect nothing and raise nothing.

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Optional

from .nodes import SceneNode, TileId
from ..utils.settings import get_highlight_color

logger = logging.getLogger(__name__)


def iter_subtree(node: SceneNode) -> Iterator[SceneNode]:
    """Pre-order walk: the node itself, then every descendant."""
    stack = [node]
    while stack:
        cur = stack.pop()
        yield cur
        # Reverse so children come out in their stored order
        stack.extend(reversed(list(cur.children)))


def find_meshes_for_tile(container: Optional[SceneNode], tile_id: TileId) -> List[SceneNode]:
    """
    Find all sub-meshes within container that belong to tile_id.
    Includes the matching direct children themselves and their descendants.
    """
    matches: List[SceneNode] = []
    if container is None or tile_id is None:
        return matches
    for child in container.children:
        # Only descend into children that belong to this tile at the root level
        if child is None or child.tile_id != tile_id:
            continue
        for sub in iter_subtree(child):
            if sub.is_mesh and sub.tile_id == tile_id:
                matches.append(sub)
    return matches


def highlight_meshes(meshes: Iterable[SceneNode], color: Optional[int] = None) -> int:
    """
    Apply an emissive highlight, saving each mesh's original emissive colour the
    first time it is highlighted. Returns the number of meshes changed.
    """
    target = get_highlight_color() if color is None else color
    changed = 0
    for m in meshes:
        surface = m.emissive_surface() if m is not None else None
        if surface is None:
            logger.debug(f"highlight: skipping {m!r} (no emissive colour)")
            continue
        if m.original_emissive is None:
            m.original_emissive = surface.snapshot()
        surface.set_color(target)
        surface.mark_dirty()
        changed += 1
    return changed


def clear_meshes(meshes: Iterable[SceneNode]) -> int:
    """
    Restore the saved original emissive value on meshes that have one.
    Returns the number of meshes restored.
    """
    restored = 0
    for m in meshes:
        if m is None or m.original_emissive is None:
            continue
        surface = m.emissive_surface()
        if surface is None:
            logger.debug(f"clear: skipping {m!r} (no emissive colour)")
            continue
        surface.restore(m.original_emissive)
        surface.mark_dirty()
        restored += 1
    return restored


def reset_highlight_state(meshes: Iterable[SceneNode]) -> None:
    """Forget saved originals so the next highlight captures the current colour."""
    for m in meshes:
        if m is not None:
            m.original_emissive = None


def highlight_tile(container: Optional[SceneNode], tile_id: TileId, color: Optional[int] = None) -> int:
    """Highlight all meshes for a tile within container. Returns the number of meshes found."""
    meshes = find_meshes_for_tile(container, tile_id)
    highlight_meshes(meshes, color)
    return len(meshes)


def clear_tile(container: Optional[SceneNode], tile_id: TileId) -> int:
    """Clear the highlight for all meshes of a tile within container. Returns the number found."""
    meshes = find_meshes_for_tile(container, tile_id)
    clear_meshes(meshes)
    return len(meshes)


def apply_tile_identity(node: Optional[SceneNode], tile_id: TileId, clone_materials: bool = True) -> Optional[SceneNode]:
    """
    Tag node and every mesh below it with tile_id.

    With clone_materials, each mesh gets its own copy of its material so that a
    highlight on one tile does not bleed into others sharing the material. The
    root node is tagged even when it is not a mesh, so the container-level lookup
    can descend into it.
    """
    if node is None:
        return node
    node.tile_id = tile_id
    for sub in iter_subtree(node):
        if not sub.is_mesh:
            continue
        sub.tile_id = tile_id
        if clone_materials:
            sub.clone_material()
    return node


class TileSelection:
    """
    Keeps at most one tile highlighted inside a container. Selecting a tile
    clears the previous selection first.
    """

    def __init__(self, container: Optional[SceneNode], color: Optional[int] = None) -> None:
        self.container = container
        self.color = color
        self.selected_tile_id: Optional[TileId] = None

    def select(self, tile_id: TileId, color: Optional[int] = None) -> int:
        self.clear()
        count = highlight_tile(self.container, tile_id, color if color is not None else self.color)
        self.selected_tile_id = tile_id
        logger.debug(f"Selected tile {tile_id!r} ({count} mesh(es))")
        return count

    def clear(self) -> int:
        count = 0
        if self.selected_tile_id is not None:
            count = clear_tile(self.container, self.selected_tile_id)
        self.selected_tile_id = None
        return count


__all__ = [
    "iter_subtree",
    "find_meshes_for_tile",
    "highlight_meshes",
    "clear_meshes",
    "reset_highlight_state",
    "highlight_tile",
    "clear_tile",
    "apply_tile_identity",
    "TileSelection",
]
