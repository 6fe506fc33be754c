# voxelscope Utils module

from . import settings


def register() -> None:
    """Register utility components."""
    settings.register()

def unregister() -> None:
    """Unregister utility components."""
    settings.unregister()
