# voxelscope Core module: voxel semantics, structure tables and diagnostics

from . import voxels, validation, structures, diagnostics


def register() -> None:
    """Register core components."""
    # Pure data modules; nothing to hand to Blender.
    pass

def unregister() -> None:
    """Unregister core components."""
    pass
