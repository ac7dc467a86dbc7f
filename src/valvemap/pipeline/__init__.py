"""
Map loading pipeline: bytes in, per-brush meshes and diagnostics out.
"""

from .map_loader import EntityAsset, MapAsset, load_map, load_map_file

__all__ = [
    'EntityAsset',
    'MapAsset',
    'load_map',
    'load_map_file',
]
