import pytest

import voxelscope.scene.nodes as nodes_mod
from voxelscope.scene.highlight import clear_tile, find_meshes_for_tile, highlight_tile
from voxelscope.scene.nodes import BlenderNode, blender_object, hex_to_rgba, rgba_to_hex


# ----------------------------
# Fake bpy objects and materials
# ----------------------------
class _FakeSocket:
    def __init__(self, value):
        self.default_value = value


class _FakeInputs:
    def __init__(self, sockets):
        self._sockets = sockets

    def get(self, name):
        return self._sockets.get(name)


class _FakeNode:
    def __init__(self, type_, inputs):
        self.type = type_
        self.inputs = _FakeInputs(inputs)


class _FakeNodeTree:
    def __init__(self, nodes):
        self.nodes = nodes


class _FakeMaterial:
    def __init__(self, name, emission=(0.0, 0.0, 0.0, 1.0), socket_name="Emission Color", use_nodes=True):
        self.name = name
        self.use_nodes = use_nodes
        self.tagged = 0
        principled = _FakeNode("BSDF_PRINCIPLED", {socket_name: _FakeSocket(list(emission))})
        self.node_tree = _FakeNodeTree([_FakeNode("OUTPUT_MATERIAL", {}), principled])

    def update_tag(self):
        self.tagged += 1

    def copy(self):
        value = self.emission()
        return _FakeMaterial(f"{self.name}.001", emission=value)

    def emission(self):
        for node in self.node_tree.nodes:
            for key in ("Emission Color", "Emission"):
                sock = node.inputs.get(key)
                if sock is not None:
                    return tuple(sock.default_value)
        return None


class _FakeSlot:
    def __init__(self, material):
        self.material = material


class _FakeObject:
    def __init__(self, name, type_="EMPTY", material=None, children=(), **props):
        self.name = name
        self.type = type_
        self.children = list(children)
        self.material_slots = [_FakeSlot(material)] if material is not None else []
        self._props = dict(props)

    @property
    def active_material(self):
        return self.material_slots[0].material if self.material_slots else None

    def get(self, key, default=None):
        return self._props.get(key, default)

    def __contains__(self, key):
        return key in self._props

    def __getitem__(self, key):
        return self._props[key]

    def __setitem__(self, key, value):
        self._props[key] = value

    def __delitem__(self, key):
        del self._props[key]


def _rgba(color):
    return list(hex_to_rgba(color))


def _scene():
    floor = _FakeObject("floor", "MESH", _FakeMaterial("stone", _rgba(0x202020)), tile_id="t1")
    wall = _FakeObject("wall", "MESH", _FakeMaterial("brick", _rgba(0x404040)), tile_id="t1")
    lamp = _FakeObject("lamp", "LIGHT", tile_id="t1")
    tile = _FakeObject("tile_t1", children=[floor, wall, lamp], tile_id="t1")
    other = _FakeObject("tile_t2", children=[_FakeObject("x", "MESH", _FakeMaterial("m"), tile_id="t2")], tile_id="t2")
    root = _FakeObject("EditorTiles", children=[tile, other])
    return root, floor, wall


def test_color_conversion_round_trips():
    for color in (0x000000, 0xFFFFFF, 0x00FF00, 0x123456):
        assert rgba_to_hex(hex_to_rgba(color)) == color
    assert rgba_to_hex((2.0, -1.0, 0.5)) == 0xFF0080


def test_blender_node_reads_tags_and_mesh_type():
    root, floor, _ = _scene()
    node = BlenderNode(root)
    assert node.tile_id is None
    children = node.children
    assert [c.obj.name for c in children] == ["tile_t1", "tile_t2"]
    assert children[0].tile_id == "t1"
    assert BlenderNode(floor).is_mesh is True
    assert children[0].is_mesh is False


def test_find_and_highlight_blender_meshes():
    root, floor, wall = _scene()
    container = BlenderNode(root)
    found = find_meshes_for_tile(container, "t1")
    assert [n.obj.name for n in found] == ["floor", "wall"]

    assert highlight_tile(container, "t1", 0xFF0000) == 2
    mat = floor.active_material
    assert rgba_to_hex(mat.emission()) == 0xFF0000
    assert mat.tagged == 1
    assert floor["original_emissive"] == _rgba(0x202020)

    assert clear_tile(container, "t1") == 2
    assert rgba_to_hex(mat.emission()) == 0x202020
    assert rgba_to_hex(wall.active_material.emission()) == 0x404040
    # saved original survives clearing
    assert floor["original_emissive"] == _rgba(0x202020)
    assert BlenderNode(floor).original_emissive == tuple(_rgba(0x202020))


def test_clear_restores_hdr_emission_exactly():
    hdr = (0.3, 2.0, 0.0, 1.0)
    floor = _FakeObject("floor", "MESH", _FakeMaterial("lava", hdr), tile_id="t1")
    container = BlenderNode(_FakeObject("EditorTiles", children=[_FakeObject("tile", children=[floor], tile_id="t1")]))

    assert highlight_tile(container, "t1", 0xFF0000) == 1
    assert floor.active_material.emission() == (1.0, 0.0, 0.0, 1.0)
    assert floor["original_emissive"] == list(hdr)

    assert clear_tile(container, "t1") == 1
    assert floor.active_material.emission() == hdr
    # a second round trip still restores the unclamped value
    highlight_tile(container, "t1", 0x00FF00)
    clear_tile(container, "t1")
    assert floor.active_material.emission() == hdr


def test_malformed_saved_original_reads_as_none():
    obj = _FakeObject("m", "MESH", _FakeMaterial("m"), original_emissive="#202020")
    assert BlenderNode(obj).original_emissive is None
    obj["original_emissive"] = [0.1, 0.2]
    assert BlenderNode(obj).original_emissive is None
    obj["original_emissive"] = [0.1, 0.2, 0.3]
    assert BlenderNode(obj).original_emissive == (0.1, 0.2, 0.3)
    BlenderNode(obj).original_emissive = None
    assert "original_emissive" not in obj


def test_legacy_emission_socket_name():
    obj = _FakeObject("m", "MESH", _FakeMaterial("old", _rgba(0x010203), socket_name="Emission"), tile_id=1)
    node = BlenderNode(obj)
    surface = node.emissive_surface()
    assert surface is not None
    assert surface.get_color() == 0x010203


def test_materials_without_nodes_have_no_surface():
    plain = _FakeObject("p", "MESH", _FakeMaterial("flat", use_nodes=False), tile_id="t")
    bare = _FakeObject("b", "MESH", tile_id="t")
    assert BlenderNode(plain).emissive_surface() is None
    assert BlenderNode(bare).emissive_surface() is None


def test_tile_id_setter_and_custom_key():
    obj = _FakeObject("o", "MESH", cell="c7")
    assert BlenderNode(obj, key="cell").tile_id == "c7"
    node = BlenderNode(obj)
    node.tile_id = "t9"
    assert obj["tile_id"] == "t9"
    node.tile_id = None
    assert "tile_id" not in obj


def test_non_scalar_tile_tag_is_ignored():
    obj = _FakeObject("o", "MESH", tile_id=True)
    assert BlenderNode(obj).tile_id is None


def test_tile_id_key_from_environment(monkeypatch):
    monkeypatch.setenv("VOXELSCOPE_TILE_ID_KEY", "dungeon_tile")
    obj = _FakeObject("o", "MESH", dungeon_tile="d1")
    assert BlenderNode(obj).tile_id == "d1"


def test_clone_material_copies_each_slot():
    mat = _FakeMaterial("shared")
    obj = _FakeObject("o", "MESH", mat)
    BlenderNode(obj).clone_material()
    assert obj.active_material is not mat
    assert obj.active_material.name == "shared.001"


class _FakeObjects:
    def __init__(self, objs):
        self._objs = {o.name: o for o in objs}

    def get(self, name):
        return self._objs.get(name)


class _FakeData:
    def __init__(self, objs):
        self.objects = _FakeObjects(objs)


class _FakeBpy:
    def __init__(self, objs):
        self.data = _FakeData(objs)


def test_blender_object_lookup(monkeypatch):
    root, _, _ = _scene()
    monkeypatch.setattr(nodes_mod, "bpy", _FakeBpy([root]), raising=True)
    node = blender_object("EditorTiles")
    assert node == BlenderNode(root)
    assert blender_object("Missing") is None


def test_blender_object_outside_blender(monkeypatch):
    monkeypatch.setattr(nodes_mod, "bpy", None, raising=True)
    assert blender_object("EditorTiles") is None
