# voxelscope Scene module: tile-to-mesh lookup and emissive highlighting

# Note: No top-level bpy import to allow offline tests and package import without Blender.

from . import highlight, nodes


def register() -> None:
    """Register scene components."""
    pass

def unregister() -> None:
    """Unregister scene components."""
    pass
