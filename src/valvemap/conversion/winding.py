"""
Vertex winding for convex brush faces.

Faces come out of the reconstructor as an unordered point set.  ``wind``
sorts them clockwise in the face's own (u, v) texture basis, starting at
twelve o'clock, so that a fan from vertex 0 covers the polygon.
"""

from __future__ import annotations
from functools import cmp_to_key
from typing import List, Sequence, Tuple

from valvemap.conversion.plane_math import Vec3, _centroid, _dot

Vec2 = Tuple[float, float]


def project(u: Vec3, v: Vec3, point: Vec3) -> Vec2:
    """Project ``point`` onto the plane spanned by ``u`` and ``v``."""
    return (_dot(u, point), _dot(v, point))


def _half(offset: Vec2) -> int:
    # 0: right half including twelve o'clock, 1: left half including six o'clock
    x, y = offset
    if x > 0.0 or (x == 0.0 and y >= 0.0):
        return 0
    return 1


def _compare_offsets(a: Vec2, b: Vec2) -> int:
    half_a, half_b = _half(a), _half(b)
    if half_a != half_b:
        return half_a - half_b

    # | a.x b.x |
    # | a.y b.y |
    det = a[0] * b[1] - b[0] * a[1]
    if det < 0.0:
        return -1
    if det > 0.0:
        return 1

    # Same direction from the centre: nearer point first
    dist_a = a[0] * a[0] + a[1] * a[1]
    dist_b = b[0] * b[0] + b[1] * b[1]
    if dist_a < dist_b:
        return -1
    if dist_a > dist_b:
        return 1
    return 0


def wind(u: Vec3, v: Vec3, vertices: Sequence[Vec3]) -> List[Vec3]:
    """Sort the vertices of a convex face clockwise around its centroid.

    Args:
        u, v: The face's texture axes, used as a 2D basis
        vertices: Unordered coplanar vertices; duplicates are allowed

    Returns:
        New list in winding order.  The ordering is total: exact ties are
        broken by distance from the centroid, and identical points keep
        their input order.
    """
    if len(vertices) < 3:
        return list(vertices)

    center = project(u, v, _centroid(vertices))

    def offset(point: Vec3) -> Vec2:
        p = project(u, v, point)
        return (p[0] - center[0], p[1] - center[1])

    keyed = [(offset(p), p) for p in vertices]
    keyed.sort(key=cmp_to_key(lambda a, b: _compare_offsets(a[0], b[0])))
    return [p for _, p in keyed]
