"""
valvemap - Valve 220 .map parsing and brush geometry reconstruction.

Parses Quake-family level files into Map -> Entity -> Brush -> BrushFace
trees and rebuilds each brush's convex polygons, producing per-texture
position/normal/tangent/uv buffers and convex-hull vertex lists.
"""

from valvemap.conversion.map_data import Brush, BrushFace, Entity, Map, UvAxis
from valvemap.conversion.map_parser import MapParser, parse_map, parse_map_file
from valvemap.conversion.plane_math import EPSILON
from valvemap.errors import (
    DegenerateGeometryError,
    MapEncodingError,
    MapError,
    MapSyntaxError,
)
from valvemap.pipeline.map_loader import EntityAsset, MapAsset, load_map, load_map_file
from valvemap.settings import GeometrySettings

__version__ = "0.1.0"

__all__ = [
    'Brush',
    'BrushFace',
    'Entity',
    'Map',
    'UvAxis',
    'MapParser',
    'parse_map',
    'parse_map_file',
    'EPSILON',
    'MapError',
    'MapSyntaxError',
    'MapEncodingError',
    'DegenerateGeometryError',
    'EntityAsset',
    'MapAsset',
    'load_map',
    'load_map_file',
    'GeometrySettings',
]
