# Settings resolution for voxelscope
#
# Responsibilities:
# - Default highlight colour and the custom-property key used to tag tile nodes
# - Environment variables take precedence over an optional local config file
# - Cross-platform config path resolution (Windows/macOS/Linux)
#
# Environment variables supported:
#   VOXELSCOPE_HIGHLIGHT_COLOR  ("#00ff00", "0x00ff00" or "00ff00")
#   VOXELSCOPE_TILE_ID_KEY      (custom property name, default "tile_id")
#
# Optional config file (JSON) search order:
#   1) %APPDATA%/voxelscope/config.json (Windows)
#   2) ~/.config/voxelscope/config.json (Linux/XDG default)
#   3) ~/Library/Application Support/voxelscope/config.json (macOS)
#   4) ~/.voxelscope/config.json (legacy fallback)

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_HIGHLIGHT_COLOR = 0x00FF00
DEFAULT_TILE_ID_KEY = "tile_id"
ORIGINAL_EMISSIVE_KEY = "original_emissive"

ENV_HIGHLIGHT_COLOR = "VOXELSCOPE_HIGHLIGHT_COLOR"
ENV_TILE_ID_KEY = "VOXELSCOPE_TILE_ID_KEY"


def parse_color(value: Any) -> Optional[int]:
    """
    Parse a 24-bit RGB colour from an int or a hex string.
    Returns None when the value is not a valid colour.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if 0 <= value <= 0xFFFFFF else None
    if not isinstance(value, str):
        return None
    s = value.strip().lower()
    if s.startswith("#"):
        s = s[1:]
    elif s.startswith("0x"):
        s = s[2:]
    if len(s) != 6:
        return None
    try:
        return int(s, 16)
    except ValueError:
        return None


def _config_paths() -> List[str]:
    paths: List[str] = []
    # Windows
    appdata = os.environ.get("APPDATA")
    if appdata:
        paths.append(os.path.join(appdata, "voxelscope", "config.json"))
    # Linux (XDG)
    home = os.path.expanduser("~")
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", os.path.join(home, ".config"))
    paths.append(os.path.join(xdg_config_home, "voxelscope", "config.json"))
    # macOS
    paths.append(os.path.join(home, "Library", "Application Support", "voxelscope", "config.json"))
    # Legacy fallback
    paths.append(os.path.join(home, ".voxelscope", "config.json"))
    return paths


def _load_config_file() -> Dict[str, Any]:
    for path in _config_paths():
        try:
            if os.path.isfile(path):
                with open(path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                    if isinstance(data, dict):
                        return data
        except (OSError, ValueError) as ex:
            logger.warning(f"Failed reading config file {path}: {ex}")
    return {}


def get_highlight_color() -> int:
    """
    Resolve the default highlight colour with precedence:
      1) Environment variable
      2) Config file
      3) Built-in bright green
    """
    env_val = os.environ.get(ENV_HIGHLIGHT_COLOR)
    if env_val:
        color = parse_color(env_val)
        if color is not None:
            return color
        logger.debug(f"Ignoring invalid {ENV_HIGHLIGHT_COLOR}={env_val!r}")

    cfg_val = _load_config_file().get("highlight_color")
    if cfg_val is not None:
        color = parse_color(cfg_val)
        if color is not None:
            return color
        logger.debug(f"Ignoring invalid highlight_color in config: {cfg_val!r}")

    return DEFAULT_HIGHLIGHT_COLOR


def get_tile_id_key() -> str:
    """Custom property name carrying the tile id on Blender objects."""
    env_val = os.environ.get(ENV_TILE_ID_KEY, "").strip()
    if env_val:
        return env_val
    cfg_val = _load_config_file().get("tile_id_key")
    if isinstance(cfg_val, str) and cfg_val.strip():
        return cfg_val.strip()
    return DEFAULT_TILE_ID_KEY


def register():
    # No classes to register in utils
    pass


def unregister():
    # No classes to unregister in utils
    pass


__all__ = [
    "DEFAULT_HIGHLIGHT_COLOR",
    "DEFAULT_TILE_ID_KEY",
    "ORIGINAL_EMISSIVE_KEY",
    "parse_color",
    "get_highlight_color",
    "get_tile_id_key",
]
