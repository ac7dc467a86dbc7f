"""
Structural checks on a parsed Map.

Validates the tree the parser produced before any geometry is built:
- Worldspawn count (MAP-001, MAP-002)
- Open brushes with fewer than four faces (GEOM-003)
- Zero texture scales (GEOM-011)
"""

from typing import List, Optional

from valvemap.conversion.map_data import WORLDSPAWN, Brush, BrushFace, Map
from .core import ValidationIssue, ValidationResult, ValidationStage
from .rules import GEOM_003, GEOM_011, MAP_001, MAP_002


def format_location(entity_index: int,
                    brush_index: Optional[int] = None,
                    face_index: Optional[int] = None) -> str:
    """Build a location string such as ``entity 0 brush 2 face 5``."""
    parts = [f"entity {entity_index}"]
    if brush_index is not None:
        parts.append(f"brush {brush_index}")
    if face_index is not None:
        parts.append(f"face {face_index}")
    return " ".join(parts)


def check_worldspawn(map_data: Map) -> List[ValidationIssue]:
    """Check that exactly one entity is the worldspawn."""
    count = sum(1 for e in map_data.entities if e.classname == WORLDSPAWN)
    if count == 0:
        return [MAP_002.issue()]
    if count > 1:
        return [MAP_001.issue(count=count)]
    return []


def check_brush_face_count(brush: Brush, location: Optional[str] = None) -> List[ValidationIssue]:
    """Flag brushes that cannot enclose a volume."""
    if len(brush.faces) < 4:
        return [GEOM_003.issue(location, face_count=len(brush.faces))]
    return []


def check_texture_scales(face: BrushFace, location: Optional[str] = None) -> List[ValidationIssue]:
    """Flag faces whose texture scale would divide by zero."""
    issues = []
    if face.x_scale == 0:
        issues.append(GEOM_011.issue(location, texture=face.texture, axis="x"))
    if face.y_scale == 0:
        issues.append(GEOM_011.issue(location, texture=face.texture, axis="y"))
    return issues


def check_map(map_data: Map) -> ValidationResult:
    """Run all structural checks over a parsed map."""
    result = ValidationResult(stage=ValidationStage.STRUCTURE)
    for issue in check_worldspawn(map_data):
        result.add_issue(issue)

    for entity_idx, brush_idx, brush in map_data.iter_brushes():
        for issue in check_brush_face_count(brush, format_location(entity_idx, brush_idx)):
            result.add_issue(issue)
        for face_idx, face in enumerate(brush.faces):
            location = format_location(entity_idx, brush_idx, face_idx)
            for issue in check_texture_scales(face, location):
                result.add_issue(issue)

    return result
