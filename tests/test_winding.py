"""Tests for clockwise vertex ordering."""

import math

import pytest

from valvemap.conversion.brush_geometry import face_vertices, reconstruct_brush
from valvemap.conversion.winding import project, wind

U = (1.0, 0.0, 0.0)
V = (0.0, 1.0, 0.0)


def pentagon(center=(100.0, -50.0), radius=32.0, z=32.0):
    """Regular pentagon, vertex k at 10 + 72k degrees clockwise from +V."""
    cx, cy = center
    points = []
    for k in range(5):
        theta = math.radians(10 + 72 * k)
        points.append((cx + radius * math.sin(theta), cy + radius * math.cos(theta), z))
    return points


def test_restores_clockwise_order():
    expected = pentagon()
    scrambled = [expected[i] for i in (3, 0, 4, 2, 1)]
    assert wind(U, V, scrambled) == expected


def test_idempotent():
    once = wind(U, V, list(reversed(pentagon())))
    assert wind(U, V, once) == once


def test_cube_faces_are_stable(cube_brush):
    for polygon in reconstruct_brush(cube_brush).polygons:
        face = polygon.face
        assert wind(face.u.axis, face.v.axis, polygon.vertices) == polygon.vertices


def test_cube_face_clockwise_in_uv(cube_brush):
    face = cube_brush.faces[3]
    ordered = wind(face.u.axis, face.v.axis, face_vertices(cube_brush, 3))
    projected = [project(face.u.axis, face.v.axis, p) for p in ordered]
    # Shoelace area is negative for clockwise order in (u, v)
    area = sum(a[0] * b[1] - b[0] * a[1]
               for a, b in zip(projected, projected[1:] + projected[:1]))
    assert area < 0


def test_first_vertex_nearest_twelve_oclock():
    points = [(1.0, 1.0, 0.0), (-1.0, 1.0, 0.0), (-1.0, -1.0, 0.0), (1.0, -1.0, 0.0)]
    assert wind(U, V, points)[0] == (1.0, 1.0, 0.0)


def test_same_direction_ties_by_distance():
    points = [
        (-2.0, -2.0, 0.0),
        (2.0, 2.0, 0.0),
        (-1.0, 1.0, 0.0),
        (1.0, 1.0, 0.0),
        (1.0, -1.0, 0.0),
        (-1.0, -1.0, 0.0),
    ]
    assert wind(U, V, points) == [
        (1.0, 1.0, 0.0),
        (2.0, 2.0, 0.0),
        (1.0, -1.0, 0.0),
        (-1.0, -1.0, 0.0),
        (-2.0, -2.0, 0.0),
        (-1.0, 1.0, 0.0),
    ]


def test_duplicates_are_kept():
    points = pentagon()
    doubled = points + [points[2]]
    result = wind(U, V, doubled)
    assert len(result) == 6
    assert result.count(points[2]) == 2


@pytest.mark.parametrize("count", [0, 1, 2])
def test_fewer_than_three_unchanged(count):
    points = pentagon()[:count]
    assert wind(U, V, points) == points
