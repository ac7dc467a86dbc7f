"""
Plane geometry for Valve 220 brush faces.

Primary representation: unit normal vector + signed distance from origin.
Faces in the .map format list their three points clockwise as seen from
outside the brush, so the normal is built from ``(p2 - p0) x (p1 - p0)``
to make it point out of the solid.
"""

from __future__ import annotations
import math
from typing import Optional, Tuple

from valvemap.errors import DegenerateGeometryError

Vec3 = Tuple[float, float, float]
Vec4 = Tuple[float, float, float, float]

# Shared tolerance in map units for determinant and containment checks.
EPSILON = 0.001


def _cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def _dot(a: Vec3, b: Vec3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def _sub(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def _scale(v: Vec3, s: float) -> Vec3:
    return (v[0] * s, v[1] * s, v[2] * s)


def _length(v: Vec3) -> float:
    return math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])


def _normalize(v: Vec3) -> Optional[Vec3]:
    ln = _length(v)
    if ln == 0.0:
        return None
    return (v[0] / ln, v[1] / ln, v[2] / ln)


def _centroid(points) -> Vec3:
    n = len(points)
    return (
        sum(p[0] for p in points) / n,
        sum(p[1] for p in points) / n,
        sum(p[2] for p in points) / n,
    )


def plane_from_points(p0: Vec3, p1: Vec3, p2: Vec3,
                      epsilon: float = EPSILON) -> Tuple[Vec3, float]:
    """Compute the outward (normal, origin_dist) of a face.

    Args:
        p0, p1, p2: Defining points, clockwise as viewed from outside
        epsilon: Minimum sine of the angle at p0 accepted as non-collinear

    Returns:
        Unit normal and signed distance so that ``normal . p0 == dist``

    Raises:
        DegenerateGeometryError: If the points are collinear
    """
    edge1 = _sub(p1, p0)
    edge2 = _sub(p2, p0)
    raw = _cross(edge2, edge1)
    # |a x b| = |a| |b| sin(angle at p0)
    span = _length(edge1) * _length(edge2)
    if span == 0.0 or _length(raw) < epsilon * span:
        raise DegenerateGeometryError(
            f"Collinear face points {p0}, {p1}, {p2} do not define a plane"
        )
    normal = _normalize(raw)
    return normal, _dot(normal, p0)


def intersect_planes(n1: Vec3, d1: float,
                     n2: Vec3, d2: float,
                     n3: Vec3, d3: float,
                     epsilon: float = EPSILON) -> Optional[Vec3]:
    """Find the intersection point of three planes, or None if degenerate."""
    c23 = _cross(n2, n3)
    denom = _dot(n1, c23)
    if abs(denom) < epsilon:
        return None
    c31 = _cross(n3, n1)
    c12 = _cross(n1, n2)
    x = (d1 * c23[0] + d2 * c31[0] + d3 * c12[0]) / denom
    y = (d1 * c23[1] + d2 * c31[1] + d3 * c12[1]) / denom
    z = (d1 * c23[2] + d2 * c31[2] + d3 * c12[2]) / denom
    return (x, y, z)


def tangent_from_axes(normal: Vec3, u_axis: Vec3, v_axis: Vec3) -> Vec4:
    """Build a 4-component tangent from a face's texture axes.

    The xyz part is the U axis.  ``w`` is the handedness, chosen so that
    ``cross(normal, tangent) * w`` points along the V axis.
    """
    handedness = _dot(_cross(normal, u_axis), v_axis)
    w = -1.0 if handedness < 0.0 else 1.0
    return (u_axis[0], u_axis[1], u_axis[2], w)


def signed_distance(normal: Vec3, dist: float, point: Vec3) -> float:
    """Distance of ``point`` in front of the plane (positive = outside)."""
    return _dot(normal, point) - dist
