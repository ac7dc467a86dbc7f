"""
In-memory representation of a parsed Valve 220 .map file.

Map -> Entity -> Brush -> BrushFace.  All objects are immutable once the
parser has built them.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, List, Mapping, Optional, Tuple

from valvemap.conversion.plane_math import (
    EPSILON,
    Vec3,
    Vec4,
    plane_from_points,
    signed_distance,
    tangent_from_axes,
)

WORLDSPAWN = "worldspawn"


@dataclass(frozen=True)
class UvAxis:
    """Valve 220 texture axis: ``[ x y z offset ]``."""
    axis: Vec3
    offset: float = 0.0


@dataclass(frozen=True)
class BrushFace:
    """
    One half-space of a brush.

    Point layout (normal points out of the screen)::

        p0----p1
        |
        |
        p2

    ``normal`` and ``origin_dist`` are derived at construction and satisfy
    ``normal . p == origin_dist`` for each of the three points.  Collinear
    points raise DegenerateGeometryError.
    """
    points: Tuple[Vec3, Vec3, Vec3]
    texture: str
    u: UvAxis
    v: UvAxis
    rotation: float = 0.0
    x_scale: float = 1.0
    y_scale: float = 1.0
    epsilon: float = field(default=EPSILON, repr=False, compare=False)

    normal: Vec3 = field(init=False, compare=False)
    origin_dist: float = field(init=False, compare=False)

    def __post_init__(self):
        normal, dist = plane_from_points(*self.points, epsilon=self.epsilon)
        object.__setattr__(self, 'normal', normal)
        object.__setattr__(self, 'origin_dist', dist)

    def tangent(self) -> Vec4:
        """Tangent (u axis) plus handedness for normal mapping."""
        return tangent_from_axes(self.normal, self.u.axis, self.v.axis)

    def distance_to(self, point: Vec3) -> float:
        """Signed distance of a point from this face's plane."""
        return signed_distance(self.normal, self.origin_dist, point)


@dataclass(frozen=True)
class Brush:
    """
    A convex solid: the intersection of its faces' half-spaces.

    Nothing guarantees that the half-spaces enclose a bounded, non-empty
    region; malformed brushes simply produce degenerate geometry.
    """
    faces: Tuple[BrushFace, ...] = ()

    def contains(self, point: Vec3, epsilon: float = EPSILON) -> bool:
        """Check if a point is on or inside every half-space of the brush."""
        for face in self.faces:
            if face.distance_to(point) > epsilon:
                return False
        return True

    @property
    def textures(self) -> List[str]:
        """Distinct texture names in face order."""
        seen = []
        for face in self.faces:
            if face.texture not in seen:
                seen.append(face.texture)
        return seen


@dataclass(frozen=True)
class Entity:
    """
    An entity block: key/value properties plus optional brushes.

    Point entities (lights, spawns) have no brushes; brush entities
    (worldspawn, doors, triggers) own one or more.
    """
    properties: Mapping[str, str] = field(default_factory=dict)
    brushes: Tuple[Brush, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'properties', MappingProxyType(dict(self.properties)))

    @property
    def classname(self) -> Optional[str]:
        return self.properties.get("classname")

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.properties.get(key, default)


@dataclass(frozen=True)
class Map:
    """A whole .map file: an ordered list of entities."""
    entities: Tuple[Entity, ...] = ()

    def worldspawn(self) -> Optional[Entity]:
        """Return the first entity with classname ``worldspawn``."""
        return next((e for e in self.entities if e.classname == WORLDSPAWN), None)

    def texture_collections(self, texture_property: str = "_tb_textures") -> List[str]:
        """Texture directories listed on the worldspawn, in priority order."""
        world = self.worldspawn()
        if world is None:
            return []
        value = world.get(texture_property, "")
        return [part.strip() for part in value.split(";") if part.strip()]

    def iter_brushes(self) -> Iterator[Tuple[int, int, Brush]]:
        """Yield ``(entity_index, brush_index, brush)`` for every brush."""
        for entity_idx, entity in enumerate(self.entities):
            for brush_idx, brush in enumerate(entity.brushes):
                yield entity_idx, brush_idx, brush

    @property
    def brush_count(self) -> int:
        return sum(len(e.brushes) for e in self.entities)

    @property
    def face_count(self) -> int:
        return sum(len(b.faces) for e in self.entities for b in e.brushes)
