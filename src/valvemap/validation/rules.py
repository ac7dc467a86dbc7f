"""
Rule catalogue for non-fatal diagnostics.

A rule pairs a stable code with a severity, the format convention it
enforces, and message/remediation templates filled in per issue.

- GEOM: brush and face geometry
- MAP: entity and map structure
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from .core import Severity, ValidationIssue

RULES_BY_CODE: Dict[str, 'ValidationRule'] = {}


@dataclass(frozen=True)
class ValidationRule:
    """
    Attributes:
        code: Unique rule code (e.g. "GEOM-002")
        severity: Severity of every issue the rule raises
        rule_reference: The convention being enforced
        message: ``str.format`` template for the issue message
        remediation: Optional template for the suggested fix
    """
    code: str
    severity: Severity
    rule_reference: str
    message: str
    remediation: Optional[str] = None

    def issue(self, location: Optional[str] = None, **values) -> ValidationIssue:
        """Instantiate an issue, filling both templates from ``values``."""
        return ValidationIssue(
            severity=self.severity,
            code=self.code,
            message=self.message.format(**values),
            rule_reference=self.rule_reference,
            remediation=self.remediation.format(**values) if self.remediation else None,
            location=location,
        )


def _register(rule: ValidationRule) -> ValidationRule:
    if rule.code in RULES_BY_CODE:
        raise ValueError(f"Duplicate rule code {rule.code}")
    RULES_BY_CODE[rule.code] = rule
    return rule


# Geometry

GEOM_002 = _register(ValidationRule(
    "GEOM-002", Severity.WARN,
    "Brush face: three non-collinear points define the plane",
    "Collinear points in face definition: {points}; face dropped",
    "Move one of the three points off the line through the other two",
))

GEOM_003 = _register(ValidationRule(
    "GEOM-003", Severity.WARN,
    "Brush: at least 4 planes are needed to close a volume",
    "Open brush with only {face_count} faces (minimum 4 required)",
    "Add faces until the brush encloses a volume",
))

GEOM_010 = _register(ValidationRule(
    "GEOM-010", Severity.WARN,
    "Brush face: polygon is the plane clipped by all other half-spaces",
    "Face '{texture}' has {vertex_count} vertices (minimum 3); face skipped",
    "Check that the face plane actually touches the brush volume",
))

GEOM_011 = _register(ValidationRule(
    "GEOM-011", Severity.WARN,
    "Brush face: texture scales must be non-zero",
    "Face '{texture}' has zero {axis} texture scale; using 1.0",
    "Set a non-zero {axis} scale in the editor",
))

# Map structure

MAP_001 = _register(ValidationRule(
    "MAP-001", Severity.WARN,
    "Map: at most one worldspawn entity",
    "Found {count} worldspawn entities; using the first",
    "Merge worldspawn entities into one",
))

MAP_002 = _register(ValidationRule(
    "MAP-002", Severity.INFO,
    "Map: worldspawn carries map-wide properties",
    "No worldspawn entity; texture collections unavailable",
))

MAP_003 = _register(ValidationRule(
    "MAP-003", Severity.WARN,
    "Entity: property keys are unique; the last value wins",
    "Duplicate property '{key}': '{old}' replaced by '{new}'",
    "Remove the earlier '{key}' line",
))

ALL_RULES: List[ValidationRule] = list(RULES_BY_CODE.values())
