import voxelscope


def test_bl_info_metadata():
    assert voxelscope.bl_info["name"] == "voxelscope"
    assert voxelscope.bl_info["blender"] >= (4, 0, 0)


def test_register_unregister_without_blender():
    voxelscope.register()
    voxelscope.unregister()
