# Scene node contract for voxelscope tile highlighting
#
# The highlighter only needs a narrow view of a scene graph:
# - children: ordered direct children
# - tile_id: the tile a node belongs to (None when untagged)
# - is_mesh: whether the node renders geometry
# - emissive_surface(): a settable emissive colour, or None when the node has none
# - original_emissive: slot holding the surface value saved before the first highlight
#
# Two implementations are provided:
# - SceneObject: in-memory nodes for offline tooling and tests
# - BlenderNode: adapter over bpy objects (custom properties + Principled BSDF emission)
#
# Highlight colours are 24-bit 0xRRGGBB ints; BlenderNode converts them to RGBA floats.
# Saved originals are the raw surface value (the exact socket RGBA in Blender) so a
# clear restores HDR and non-8-bit emission unchanged.

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, List, Optional, Protocol, Sequence, Tuple, Union

from ..utils.settings import ORIGINAL_EMISSIVE_KEY, get_tile_id_key, parse_color

try:
    import bpy  # type: ignore
except Exception:
    bpy = None  # Allows import outside Blender for tooling/tests and CI

TileId = Union[str, int]


class EmissiveSurface(Protocol):
    def get_color(self) -> int: ...

    def set_color(self, color: int) -> None: ...

    def mark_dirty(self) -> None: ...

    def snapshot(self) -> Any: ...

    def restore(self, saved: Any) -> None: ...


class SceneNode(Protocol):
    tile_id: Optional[TileId]
    original_emissive: Optional[Any]

    @property
    def children(self) -> Sequence["SceneNode"]: ...

    @property
    def is_mesh(self) -> bool: ...

    def emissive_surface(self) -> Optional[EmissiveSurface]: ...

    def clone_material(self) -> None: ...


# -----------------------------
# Colour conversion
# -----------------------------
def rgba_to_hex(rgba: Sequence[float]) -> int:
    """Convert an RGB(A) float colour in [0, 1] to 0xRRGGBB."""
    r, g, b = (min(1.0, max(0.0, float(c))) for c in rgba[:3])
    return (int(round(r * 255)) << 16) | (int(round(g * 255)) << 8) | int(round(b * 255))


def hex_to_rgba(color: int, alpha: float = 1.0) -> Tuple[float, float, float, float]:
    return (
        ((color >> 16) & 0xFF) / 255.0,
        ((color >> 8) & 0xFF) / 255.0,
        (color & 0xFF) / 255.0,
        alpha,
    )


# -----------------------------
# In-memory scene graph
# -----------------------------
@dataclass(eq=False)
class Material:
    name: str = "material"
    # 0xRRGGBB, or a hex string such as "#ff0000"
    emissive: Optional[Union[int, str]] = 0x000000
    needs_update: bool = False

    def copy(self) -> "Material":
        return replace(self, needs_update=False)


class _MaterialEmissive:
    def __init__(self, material: Material) -> None:
        self._material = material

    def get_color(self) -> Optional[int]:
        return parse_color(self._material.emissive)

    def set_color(self, color: int) -> None:
        self._material.emissive = color

    def mark_dirty(self) -> None:
        self._material.needs_update = True

    def snapshot(self) -> Union[int, str]:
        return self._material.emissive

    def restore(self, saved: Union[int, str]) -> None:
        self._material.emissive = saved


@dataclass(eq=False)
class SceneObject:
    """A plain scene-graph node: a group when is_mesh is False, a mesh otherwise."""
    name: str
    tile_id: Optional[TileId] = None
    is_mesh: bool = False
    material: Optional[Material] = None
    children: List["SceneObject"] = field(default_factory=list)
    original_emissive: Optional[Union[int, str]] = None

    def add(self, child: "SceneObject") -> "SceneObject":
        self.children.append(child)
        return child

    def emissive_surface(self) -> Optional[_MaterialEmissive]:
        if self.material is None or parse_color(self.material.emissive) is None:
            return None
        return _MaterialEmissive(self.material)

    def clone_material(self) -> None:
        if self.material is not None:
            self.material = self.material.copy()


def mesh(name: str, tile_id: Optional[TileId] = None, emissive: Optional[Union[int, str]] = 0x000000) -> SceneObject:
    """Convenience constructor for a mesh node with its own material."""
    return SceneObject(name=name, tile_id=tile_id, is_mesh=True, material=Material(name=f"{name}_mat", emissive=emissive))


def group(name: str, tile_id: Optional[TileId] = None, children: Sequence[SceneObject] = ()) -> SceneObject:
    return SceneObject(name=name, tile_id=tile_id, children=list(children))


# -----------------------------
# Blender adapter
# -----------------------------
PRINCIPLED_NODE_TYPE = "BSDF_PRINCIPLED"
# Blender 4.x renamed the "Emission" socket to "Emission Color"
EMISSION_SOCKETS = ("Emission Color", "Emission")


def _principled_emission_socket(material: Any) -> Optional[Any]:
    if material is None or not getattr(material, "use_nodes", False):
        return None
    node_tree = getattr(material, "node_tree", None)
    if node_tree is None:
        return None
    for node in node_tree.nodes:
        if getattr(node, "type", None) != PRINCIPLED_NODE_TYPE:
            continue
        for socket_name in EMISSION_SOCKETS:
            socket = node.inputs.get(socket_name)
            value = getattr(socket, "default_value", None) if socket is not None else None
            if hasattr(value, "__len__") and len(value) >= 3:
                return socket
    return None


class _PrincipledEmission:
    def __init__(self, material: Any, socket: Any) -> None:
        self._material = material
        self._socket = socket

    def get_color(self) -> int:
        return rgba_to_hex(self._socket.default_value)

    def set_color(self, color: int) -> None:
        alpha = self._socket.default_value[3] if len(self._socket.default_value) > 3 else 1.0
        self._socket.default_value = hex_to_rgba(color, alpha)

    def mark_dirty(self) -> None:
        self._material.update_tag()

    def snapshot(self) -> Tuple[float, ...]:
        return tuple(float(c) for c in self._socket.default_value)

    def restore(self, saved: Sequence[float]) -> None:
        self._socket.default_value = tuple(float(c) for c in saved)


def _float_color(value: Any) -> Optional[Tuple[float, ...]]:
    # IDPropertyArray and plain lists both iterate; anything else is not a saved colour
    if isinstance(value, (str, bytes)) or not hasattr(value, "__len__") or len(value) not in (3, 4):
        return None
    try:
        return tuple(float(c) for c in value)
    except (TypeError, ValueError):
        return None


class BlenderNode:
    """
    Adapter exposing a bpy object through the scene node contract.
    The tile id lives in a custom property (default key "tile_id"), the saved
    highlight original in the "original_emissive" custom property.
    """

    __slots__ = ("obj", "key")

    def __init__(self, obj: Any, key: Optional[str] = None) -> None:
        self.obj = obj
        self.key = key or get_tile_id_key()

    def __repr__(self) -> str:
        return f"BlenderNode({getattr(self.obj, 'name', '?')!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, BlenderNode) and other.obj is self.obj

    def __hash__(self) -> int:
        return id(self.obj)

    @property
    def children(self) -> List["BlenderNode"]:
        return [BlenderNode(c, self.key) for c in self.obj.children]

    @property
    def is_mesh(self) -> bool:
        return self.obj.type == "MESH"

    @property
    def tile_id(self) -> Optional[TileId]:
        value = self.obj.get(self.key)
        if isinstance(value, (str, int)) and not isinstance(value, bool):
            return value
        return None

    @tile_id.setter
    def tile_id(self, value: Optional[TileId]) -> None:
        if value is None:
            if self.key in self.obj:
                del self.obj[self.key]
        else:
            self.obj[self.key] = value

    @property
    def original_emissive(self) -> Optional[Tuple[float, ...]]:
        return _float_color(self.obj.get(ORIGINAL_EMISSIVE_KEY))

    @original_emissive.setter
    def original_emissive(self, value: Optional[Sequence[float]]) -> None:
        if value is None:
            if ORIGINAL_EMISSIVE_KEY in self.obj:
                del self.obj[ORIGINAL_EMISSIVE_KEY]
        else:
            # Stored as a float array property, full precision and unclamped
            self.obj[ORIGINAL_EMISSIVE_KEY] = [float(c) for c in value]

    def emissive_surface(self) -> Optional[_PrincipledEmission]:
        material = self.obj.active_material
        socket = _principled_emission_socket(material)
        if socket is None:
            return None
        return _PrincipledEmission(material, socket)

    def clone_material(self) -> None:
        for slot in self.obj.material_slots:
            if slot.material is not None:
                slot.material = slot.material.copy()


def blender_object(name: str, key: Optional[str] = None) -> Optional[BlenderNode]:
    """
    Look up an object in bpy.data by name and wrap it, e.g. the parent empty that
    holds the editor's tile meshes. Returns None outside Blender or when missing.
    """
    if bpy is None:
        return None
    obj = bpy.data.objects.get(name)
    if obj is None:
        return None
    return BlenderNode(obj, key)


__all__ = [
    "TileId",
    "EmissiveSurface",
    "SceneNode",
    "Material",
    "SceneObject",
    "BlenderNode",
    "blender_object",
    "mesh",
    "group",
    "rgba_to_hex",
    "hex_to_rgba",
]
