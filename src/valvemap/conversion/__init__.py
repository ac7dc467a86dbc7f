"""
Text -> geometry conversion package.

Parses .map text into a typed tree and turns brush half-spaces into wound
convex polygons.
"""

from .map_data import UvAxis, BrushFace, Brush, Entity, Map
from .map_parser import MapParser, parse_map, parse_map_file, decode_source
from .brush_geometry import (
    BrushGeometry,
    FacePolygon,
    intersect_faces,
    face_vertices,
    reconstruct_brush,
    brush_to_polygons,
)
from .winding import wind

__all__ = [
    'UvAxis',
    'BrushFace',
    'Brush',
    'Entity',
    'Map',
    'MapParser',
    'parse_map',
    'parse_map_file',
    'decode_source',
    'BrushGeometry',
    'FacePolygon',
    'intersect_faces',
    'face_vertices',
    'reconstruct_brush',
    'brush_to_polygons',
    'wind',
]
