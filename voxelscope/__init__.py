# voxelscope: tile inspection helpers for voxel dungeon scenes in Blender
#
# This add-on provides two debugging aids for a voxel dungeon editor:
# highlighting every mesh that belongs to a logical tile, and a voxel
# structure analyzer reporting solid/empty/stair cells per layer.
#
# License: MIT
# Compatible with Blender 4.0+

import logging

# Add-on metadata
bl_info = {
    "name": "voxelscope",
    "author": "voxelscope contributors",
    "description": "Tile highlighting and voxel structure diagnostics for dungeon scenes",
    "blender": (4, 0, 0),
    "version": (0, 1, 0),
    "location": "Python console > import voxelscope",
    "warning": "",
    "category": "Development",
    "support": "COMMUNITY",
}

# Global logger for the add-on
logger = logging.getLogger(__name__)
logger.setLevel(logging.DEBUG)

# Handler to Blender console (if available) or stdout
handler = logging.StreamHandler()
handler.setLevel(logging.DEBUG)
formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
handler.setFormatter(formatter)
logger.addHandler(handler)


def register():
    """Register the add-on components."""
    logger.info("Registering voxelscope add-on...")
    # Lazy import to avoid loading bpy in non-Blender environments and tests
    from . import core, scene, utils

    core.register()
    scene.register()
    utils.register()

    logger.info("voxelscope add-on registered successfully.")


def unregister():
    """Unregister the add-on components."""
    logger.info("Unregistering voxelscope add-on...")
    from . import core, scene, utils

    # Unregister in reverse order
    utils.unregister()
    scene.unregister()
    core.unregister()

    logger.info("voxelscope add-on unregistered.")


# Blender calls this on add-on load
if __name__ == "__main__":
    register()
