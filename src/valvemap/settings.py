"""
Geometry settings and their JSON persistence.

Handles save/load of settings to ~/.config/valvemap/settings.json.
"""

from __future__ import annotations
import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from valvemap.conversion.plane_math import EPSILON

logger = logging.getLogger(__name__)

# TrenchBroom writes this name for faces that have no texture assigned
EMPTY_TEXTURE = "__TB_empty"


@dataclass
class GeometrySettings:
    """
    Tunables for parsing and mesh building.

    Attributes:
        epsilon: Tolerance (map units) for plane intersection and containment
        scale: Uniform scale applied to output positions
        recenter: Emit positions relative to each brush's centroid
        y_up: Swizzle output vectors (x, y, z) -> (y, z, x) for Y-up consumers
        default_texture_size: Pixel size used when a texture cannot be found
        empty_texture: Texture name that always uses the default size
        texture_property: Worldspawn key listing texture directories
        texture_extensions: File extensions tried when resolving textures
        max_workers: Brushes built concurrently (1 = sequential)
        strict: Raise ValidationError when a load produces warnings
    """
    epsilon: float = EPSILON
    scale: float = 1.0
    recenter: bool = False
    y_up: bool = False
    default_texture_size: Tuple[int, int] = (64, 64)
    empty_texture: str = EMPTY_TEXTURE
    texture_property: str = "_tb_textures"
    texture_extensions: Tuple[str, ...] = (".png", ".tga", ".jpg", ".jpeg", ".bmp")
    max_workers: int = 1
    strict: bool = False

    def replace(self, **changes) -> "GeometrySettings":
        """Return a copy with some fields changed."""
        data = asdict(self)
        data.update(changes)
        return GeometrySettings(**data)


def get_config_dir() -> Path:
    """
    Get the directory for storing settings.

    Returns:
        Path to ~/.config/valvemap/ (not created until a save happens)
    """
    return Path.home() / ".config" / "valvemap"


def default_settings_path() -> Path:
    return get_config_dir() / "settings.json"


def _settings_to_dict(settings: GeometrySettings) -> Dict[str, Any]:
    """Convert settings to a JSON-serializable dictionary."""
    data = asdict(settings)
    data["default_texture_size"] = list(settings.default_texture_size)
    data["texture_extensions"] = list(settings.texture_extensions)
    return data


def _dict_to_settings(data: Dict[str, Any]) -> GeometrySettings:
    """Create settings from a dictionary, ignoring unknown keys."""
    known = {f.name for f in fields(GeometrySettings)}
    kwargs = {}
    for key, value in data.items():
        if key not in known:
            logger.warning("Ignoring unknown setting '%s'", key)
            continue
        kwargs[key] = value

    if "default_texture_size" in kwargs:
        width, height = kwargs["default_texture_size"]
        kwargs["default_texture_size"] = (int(width), int(height))
    if "texture_extensions" in kwargs:
        kwargs["texture_extensions"] = tuple(kwargs["texture_extensions"])
    return GeometrySettings(**kwargs)


def save_settings(settings: GeometrySettings, path: Optional[Path] = None) -> Path:
    """
    Save settings as JSON.

    Args:
        settings: Settings to save
        path: Target file, defaults to ~/.config/valvemap/settings.json

    Returns:
        Path to the saved file

    Raises:
        OSError: If the file cannot be written
    """
    file_path = Path(path) if path is not None else default_settings_path()
    file_path.parent.mkdir(parents=True, exist_ok=True)

    with open(file_path, 'w', encoding='utf-8') as f:
        json.dump(_settings_to_dict(settings), f, indent=2, ensure_ascii=False)

    return file_path


def load_settings(path: Optional[Path] = None) -> GeometrySettings:
    """
    Load settings from JSON.

    Missing files give the defaults.  Unreadable or invalid files are logged
    and also give the defaults.
    """
    file_path = Path(path) if path is not None else default_settings_path()
    if not file_path.exists():
        return GeometrySettings()

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise TypeError("settings file must contain a JSON object")
        return _dict_to_settings(data)
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        logger.warning("Invalid settings file %s (%s); using defaults", file_path, e)
        return GeometrySettings()
