"""Shared fixtures: a 32-unit cube map and box brush helpers."""

import pytest

from valvemap.conversion.map_data import Brush, BrushFace, UvAxis
from valvemap.conversion.map_parser import parse_map


TEST_MAP = r"""// Game: Quake
// Format: Valve
// entity 0
{
"mapversion" "220"
"classname" "worldspawn"
"_tb_textures" "textures/map"
// brush 0
{
( -16 -64 -16 ) ( -16 -63 -16 ) ( -16 -64 -15 ) map/grass [ 0 -1 0 0 ] [ 0 0 -1 0 ] 0 1 1
( -64 -16 -16 ) ( -64 -16 -15 ) ( -63 -16 -16 ) map/black [ 1 0 0 0 ] [ 0 0 -1 0 ] 0 1 1
( -64 -64 -16 ) ( -63 -64 -16 ) ( -64 -63 -16 ) map/wall [ -1 0 0 0 ] [ 0 -1 0 0 ] 0 1 1
( 64 64 16 ) ( 64 65 16 ) ( 65 64 16 ) map/accent [ 1 0 0 0 ] [ 0 -1 0 0 ] 0 1 1
( 64 16 16 ) ( 65 16 16 ) ( 64 16 17 ) map/dirt [ -1 0 0 0 ] [ 0 0 -1 0 ] 0 1 1
( 16 64 16 ) ( 16 64 17 ) ( 16 65 16 ) map/wall2 [ 0 1 0 0 ] [ 0 0 -1 0 ] 0 1 1
}
}
"""

CUBE_TEXTURES = ["map/grass", "map/black", "map/wall", "map/accent", "map/dirt", "map/wall2"]


def box_brush(mins, maxs, texture="tex", textures=None):
    """Axis-aligned box with outward-facing planes, in -X -Y -Z +Z +Y +X order."""
    x1, y1, z1 = mins
    x2, y2, z2 = maxs
    names = textures or [texture] * 6
    specs = [
        (((x1, y1, z1), (x1, y1 + 1, z1), (x1, y1, z1 + 1)), (0, -1, 0), (0, 0, -1)),
        (((x1, y1, z1), (x1, y1, z1 + 1), (x1 + 1, y1, z1)), (1, 0, 0), (0, 0, -1)),
        (((x1, y1, z1), (x1 + 1, y1, z1), (x1, y1 + 1, z1)), (-1, 0, 0), (0, -1, 0)),
        (((x2, y2, z2), (x2, y2 + 1, z2), (x2 + 1, y2, z2)), (1, 0, 0), (0, -1, 0)),
        (((x2, y2, z2), (x2 + 1, y2, z2), (x2, y2, z2 + 1)), (-1, 0, 0), (0, 0, -1)),
        (((x2, y2, z2), (x2, y2, z2 + 1), (x2, y2 + 1, z2)), (0, 1, 0), (0, 0, -1)),
    ]
    faces = []
    for name, (points, u, v) in zip(names, specs):
        faces.append(BrushFace(
            points=tuple(tuple(float(c) for c in p) for p in points),
            texture=name,
            u=UvAxis(tuple(float(c) for c in u), 0.0),
            v=UvAxis(tuple(float(c) for c in v), 0.0),
        ))
    return Brush(faces=tuple(faces))


def pyramid_brush(texture="tex"):
    """Square pyramid: base z=0 over [-16, 16]^2, apex at (0, 0, 16)."""
    specs = [
        ((0, 0, 0), (1, 0, 0), (0, 1, 0)),
        ((16, -16, 0), (0, 0, 16), (16, 16, 0)),
        ((16, 16, 0), (0, 0, 16), (-16, 16, 0)),
        ((-16, 16, 0), (0, 0, 16), (-16, -16, 0)),
        ((-16, -16, 0), (0, 0, 16), (16, -16, 0)),
    ]
    faces = []
    for points in specs:
        faces.append(BrushFace(
            points=tuple(tuple(float(c) for c in p) for p in points),
            texture=texture,
            u=UvAxis((1.0, 0.0, 0.0), 0.0),
            v=UvAxis((0.0, 1.0, 0.0), 0.0),
        ))
    return Brush(faces=tuple(faces))


@pytest.fixture
def test_map():
    return parse_map(TEST_MAP)


@pytest.fixture
def cube_brush(test_map):
    return test_map.entities[0].brushes[0]
