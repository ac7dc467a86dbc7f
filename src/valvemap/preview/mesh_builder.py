"""
Mesh builder for converting Valve 220 brushes to renderable geometry.

Uses reconstruct_brush() from brush_geometry.py and converts the wound
polygons into per-texture vertex/index buffers: one sub-mesh per distinct
texture per brush, plus a flat vertex list for convex-hull colliders.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from valvemap.conversion.brush_geometry import BrushGeometry, reconstruct_brush
from valvemap.conversion.map_data import Brush, BrushFace
from valvemap.conversion.plane_math import Vec3, Vec4, _dot
from valvemap.preview.texture_manager import TextureProvider, TextureSize
from valvemap.settings import GeometrySettings
from valvemap.validation.core import ValidationIssue

logger = logging.getLogger(__name__)

Vec2 = Tuple[float, float]


def _safe_scale(value: float) -> float:
    return value if value != 0 else 1.0


def project_uv(vertex: Vec3, face: BrushFace) -> Vec2:
    """Compute a vertex's texture coordinate in pixels.

    Uses the face's Valve 220 axes directly.  ``face.rotation`` is not
    applied: editors bake rotation into the stored axis vectors, so the
    field is carried through untouched.

    A zero scale is treated as 1.0.
    """
    u = face.u
    v = face.v
    u_coord = _dot(u.axis, vertex) / _safe_scale(face.x_scale) + u.offset
    v_coord = _dot(v.axis, vertex) / _safe_scale(face.y_scale) + v.offset
    return (u_coord, v_coord)


def compute_uvs(vertices: Sequence[Vec3], face: BrushFace,
                texture_size: TextureSize) -> List[Vec2]:
    """Normalized texture coordinates for an ordered vertex list."""
    width, height = texture_size
    return [(u / width, v / height) for u, v in (project_uv(p, face) for p in vertices)]


def _y_up(a: np.ndarray) -> np.ndarray:
    """Swizzle (x, y, z[, w]) -> (y, z, x[, w])."""
    if a.shape[1] == 4:
        return a[:, [1, 2, 0, 3]]
    return a[:, [1, 2, 0]]


@dataclass
class RenderMesh:
    """Renderable mesh data for one texture of one brush."""
    texture: str
    positions: np.ndarray  # Shape: (N, 3), dtype=float32
    normals: np.ndarray    # Shape: (N, 3), dtype=float32
    tangents: np.ndarray   # Shape: (N, 4), dtype=float32
    uvs: np.ndarray        # Shape: (N, 2), dtype=float32
    indices: np.ndarray    # Shape: (M, 3), dtype=uint32

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    @property
    def triangle_count(self) -> int:
        return len(self.indices)

    @property
    def is_empty(self) -> bool:
        return len(self.positions) == 0

    @property
    def bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        if self.is_empty:
            zero = np.zeros(3, dtype=np.float32)
            return zero, zero
        return self.positions.min(axis=0), self.positions.max(axis=0)


@dataclass
class BrushMeshInfo:
    """
    Geometry for one texture of a brush, before the texture is known.

    Coordinates are in .map space and UVs are in pixels; both are only
    transformed by to_render_mesh().
    """
    texture: str
    positions: List[Vec3] = field(default_factory=list)
    normals: List[Vec3] = field(default_factory=list)
    tangents: List[Vec4] = field(default_factory=list)
    uvs: List[Vec2] = field(default_factory=list)
    indices: List[List[int]] = field(default_factory=list)

    def push_polygon(self, face: BrushFace, vertices: Sequence[Vec3]) -> None:
        """Append an already wound polygon and fan-triangulate it."""
        if len(vertices) < 3:
            return

        first_idx = len(self.positions)
        tangent = face.tangent()

        for vertex in vertices:
            self.positions.append(vertex)
            self.normals.append(face.normal)
            self.tangents.append(tangent)
            self.uvs.append(project_uv(vertex, face))

        # Triangles (fan from first vertex)
        for i in range(1, len(vertices) - 1):
            self.indices.append([first_idx, first_idx + i, first_idx + i + 1])

    def to_render_mesh(self, texture_size: TextureSize,
                       origin: Vec3 = (0.0, 0.0, 0.0),
                       scale: float = 1.0,
                       y_up: bool = False) -> RenderMesh:
        """Build numpy buffers, normalizing UVs by the texture's pixel size."""
        if not self.positions:
            return RenderMesh(
                texture=self.texture,
                positions=np.zeros((0, 3), dtype=np.float32),
                normals=np.zeros((0, 3), dtype=np.float32),
                tangents=np.zeros((0, 4), dtype=np.float32),
                uvs=np.zeros((0, 2), dtype=np.float32),
                indices=np.zeros((0, 3), dtype=np.uint32),
            )

        positions = (np.asarray(self.positions, dtype=np.float64) - np.asarray(origin)) * scale
        normals = np.asarray(self.normals, dtype=np.float64)
        tangents = np.asarray(self.tangents, dtype=np.float64)
        uvs = np.asarray(self.uvs, dtype=np.float64) / np.asarray(texture_size, dtype=np.float64)

        if y_up:
            positions = _y_up(positions)
            normals = _y_up(normals)
            tangents = _y_up(tangents)

        return RenderMesh(
            texture=self.texture,
            positions=positions.astype(np.float32),
            normals=normals.astype(np.float32),
            tangents=tangents.astype(np.float32),
            uvs=uvs.astype(np.float32),
            indices=np.asarray(self.indices, dtype=np.uint32),
        )


@dataclass
class BrushMesh:
    """All render and collision data for one brush.

    Attributes:
        meshes: One RenderMesh per distinct texture, in first-use order
        hull_vertices: Every face vertex, for convex-hull collider builders
        origin: Brush centroid in .map space
        position: Translation to apply to the meshes in output space
        skipped_faces: Indices of faces dropped as degenerate
        issues: Validation issues raised while building
    """
    meshes: Dict[str, RenderMesh]
    hull_vertices: np.ndarray
    origin: Vec3
    position: Vec3
    skipped_faces: List[int] = field(default_factory=list)
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def triangle_count(self) -> int:
        return sum(m.triangle_count for m in self.meshes.values())

    @property
    def vertex_count(self) -> int:
        return sum(m.vertex_count for m in self.meshes.values())

    @property
    def is_empty(self) -> bool:
        return all(m.is_empty for m in self.meshes.values())


class MeshBuilder:
    """Converts brushes to per-texture render meshes."""

    def __init__(self, texture_provider: Optional[TextureProvider] = None,
                 settings: Optional[GeometrySettings] = None):
        self.settings = settings or GeometrySettings()
        self.texture_provider = texture_provider or TextureProvider(self.settings.default_texture_size)

    def build_brush(self, brush: Brush, location: Optional[str] = None) -> BrushMesh:
        """Convert a single brush to triangulated mesh data."""
        geometry = reconstruct_brush(brush, self.settings.epsilon, location)
        return self.build_from_geometry(geometry)

    def build_from_geometry(self, geometry: BrushGeometry) -> BrushMesh:
        settings = self.settings
        infos: Dict[str, BrushMeshInfo] = {}
        for polygon in geometry.polygons:
            texture = polygon.face.texture
            if texture not in infos:
                infos[texture] = BrushMeshInfo(texture)
            infos[texture].push_polygon(polygon.face, polygon.vertices)

        centroid = geometry.centroid
        origin = centroid if settings.recenter else (0.0, 0.0, 0.0)

        meshes = {}
        for texture, info in infos.items():
            size = self.texture_provider.texture_size(texture)
            meshes[texture] = info.to_render_mesh(size, origin, settings.scale, settings.y_up)

        hull = np.zeros((0, 3), dtype=np.float32)
        if geometry.all_vertices:
            hull = (np.asarray(geometry.all_vertices, dtype=np.float64) - np.asarray(origin)) * settings.scale
            if settings.y_up:
                hull = _y_up(hull)
            hull = hull.astype(np.float32)

        position = (0.0, 0.0, 0.0)
        if settings.recenter:
            x, y, z = (c * settings.scale for c in centroid)
            position = (y, z, x) if settings.y_up else (x, y, z)

        return BrushMesh(
            meshes=meshes,
            hull_vertices=hull,
            origin=centroid,
            position=position,
            skipped_faces=list(geometry.skipped),
            issues=list(geometry.issues),
        )


def build_brush_mesh(brush: Brush,
                     texture_provider: Optional[TextureProvider] = None,
                     settings: Optional[GeometrySettings] = None,
                     location: Optional[str] = None) -> BrushMesh:
    """Convenience function to build one brush's meshes in one call."""
    return MeshBuilder(texture_provider, settings).build_brush(brush, location)
