"""
Brush half-space -> polygon reconstruction.

Converts brush half-space representations to explicit convex polygons via
plane-plane-plane intersection.  For every face, each pair of other faces
is intersected with it; the point is kept when it lies inside every
half-space of the brush.  Cost is O(faces^3) per brush, which is fine for
the 4-12 faces real brushes have.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from valvemap.conversion.map_data import Brush, BrushFace
from valvemap.conversion.plane_math import EPSILON, Vec3, _centroid, intersect_planes
from valvemap.conversion.winding import wind
from valvemap.validation.core import ValidationIssue
from valvemap.validation.rules import GEOM_010

logger = logging.getLogger(__name__)


def intersect_faces(f1: BrushFace, f2: BrushFace, f3: BrushFace,
                    epsilon: float = EPSILON) -> Optional[Vec3]:
    """Intersection point of three face planes, or None if any two are parallel."""
    return intersect_planes(
        f1.normal, f1.origin_dist,
        f2.normal, f2.origin_dist,
        f3.normal, f3.origin_dist,
        epsilon,
    )


def face_vertices(brush: Brush, index: int, epsilon: float = EPSILON) -> List[Vec3]:
    """Collect the unordered vertices of one face of a brush.

    Points where four or more planes meet are found more than once and are
    not de-duplicated.
    """
    faces = brush.faces
    face = faces[index]
    verts: List[Vec3] = []
    for j in range(len(faces)):
        if j == index:
            continue
        for k in range(j + 1, len(faces)):
            if k == index:
                continue
            pt = intersect_faces(face, faces[j], faces[k], epsilon)
            if pt is None:
                continue
            if brush.contains(pt, epsilon):
                verts.append(pt)
    return verts


@dataclass
class FacePolygon:
    """A wound, non-degenerate face of a reconstructed brush."""
    face_index: int
    face: BrushFace
    vertices: List[Vec3]


@dataclass
class BrushGeometry:
    """Explicit polygons for one brush.

    Attributes:
        polygons: Wound polygons, in face order, for faces with >= 3 vertices
        all_vertices: Every accepted vertex of every face (for hull colliders)
        skipped: Indices of faces dropped for having fewer than 3 vertices
        issues: Validation issues raised while reconstructing
    """
    polygons: List[FacePolygon] = field(default_factory=list)
    all_vertices: List[Vec3] = field(default_factory=list)
    skipped: List[int] = field(default_factory=list)
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def centroid(self) -> Vec3:
        if not self.all_vertices:
            return (0.0, 0.0, 0.0)
        return _centroid(self.all_vertices)

    @property
    def is_empty(self) -> bool:
        return not self.polygons


def reconstruct_brush(brush: Brush, epsilon: float = EPSILON,
                      location: Optional[str] = None) -> BrushGeometry:
    """Convert a brush to one wound polygon per face.

    Faces that collect fewer than three vertices have zero area; they are
    skipped with a GEOM-010 issue and the rest of the brush is still built.
    """
    geometry = BrushGeometry()

    for fi, face in enumerate(brush.faces):
        verts = face_vertices(brush, fi, epsilon)
        geometry.all_vertices.extend(verts)

        if len(verts) < 3:
            face_location = f"{location} face {fi}" if location else f"face {fi}"
            logger.warning("Skipping degenerate face '%s' at %s (%d vertices)",
                           face.texture, face_location, len(verts))
            geometry.skipped.append(fi)
            geometry.issues.append(
                GEOM_010.issue(face_location, texture=face.texture, vertex_count=len(verts))
            )
            continue

        ordered = wind(face.u.axis, face.v.axis, verts)
        geometry.polygons.append(FacePolygon(face_index=fi, face=face, vertices=ordered))

    return geometry


def brush_to_polygons(brush: Brush, epsilon: float = EPSILON) -> List[Tuple[List[Vec3], str]]:
    """Convert a brush to a list of (vertex_list, texture) per face."""
    geometry = reconstruct_brush(brush, epsilon)
    return [(p.vertices, p.face.texture) for p in geometry.polygons]
