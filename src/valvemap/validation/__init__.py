"""
Validation package for non-fatal map problems.

Degenerate faces, open brushes and structural oddities never abort a load;
they are collected as issues so callers can report them.

Public API:
    - ValidationResult, ValidationIssue, Severity: Core result types
    - ValidationStage: Pipeline stage enumeration
    - ValidationError: Exception raised in strict mode
    - check_map(): Structural checks on a parsed Map
"""

from .core import (
    Severity,
    ValidationStage,
    ValidationIssue,
    ValidationResult,
    ValidationError,
)
from .checks import check_map, format_location

__all__ = [
    'Severity',
    'ValidationStage',
    'ValidationIssue',
    'ValidationResult',
    'ValidationError',
    'check_map',
    'format_location',
]
