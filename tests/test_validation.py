"""Tests for the validation result types and structural checks."""

import dataclasses

from valvemap.conversion.map_data import Brush, Entity, Map
from valvemap.validation import (
    Severity,
    ValidationError,
    ValidationIssue,
    ValidationResult,
    ValidationStage,
    check_map,
    format_location,
)
from valvemap.validation.checks import check_texture_scales
from valvemap.validation.rules import ALL_RULES, GEOM_010, RULES_BY_CODE


def test_format_location():
    assert format_location(0) == "entity 0"
    assert format_location(1, 2) == "entity 1 brush 2"
    assert format_location(1, 2, 5) == "entity 1 brush 2 face 5"


def test_rule_catalogue():
    assert [r.code for r in ALL_RULES] == list(RULES_BY_CODE)
    assert RULES_BY_CODE["MAP-002"].severity == Severity.INFO


def test_rule_issue_formatting():
    issue = GEOM_010.issue("entity 0 brush 1 face 2", texture="base/floor", vertex_count=2)
    assert issue.severity == Severity.WARN
    assert issue.code == "GEOM-010"
    assert "base/floor" in issue.message
    assert issue.format().startswith("entity 0 brush 1 face 2: WARN GEOM-010: Face 'base/floor'")
    assert "(fix: " in issue.format()


def test_result_pass_fail():
    result = ValidationResult(stage=ValidationStage.GEOMETRY)
    assert result.passed
    assert result.report() == "Validation passed: No issues found"

    result.add_issue(ValidationIssue(Severity.WARN, "GEOM-003", "open", "ref"))
    assert result.passed
    assert len(result.warnings) == 1

    result.add_issue(ValidationIssue(Severity.FAIL, "X-1", "broken", "ref"))
    assert result.failed
    assert result.worst == Severity.FAIL
    report = result.report().splitlines()
    assert report[0] == "Validation FAILED (geometry): 2 issue(s) [1 FAIL, 1 WARN]"
    assert report[1] == "  <map>: FAIL X-1: broken"


def test_merge_and_to_dict():
    first = ValidationResult(issues=[ValidationIssue(Severity.INFO, "MAP-002", "none", "ref")])
    second = ValidationResult(issues=[ValidationIssue(Severity.WARN, "MAP-001", "two", "ref")])
    data = first.merge(second).to_dict()
    assert data["issue_count"] == 2
    assert data["counts"] == {"FAIL": 0, "WARN": 1, "INFO": 1}
    assert [i["code"] for i in data["issues"]] == ["MAP-002", "MAP-001"]
    assert data["issues"][0]["severity"] == "INFO"


def test_validation_error_carries_result():
    result = ValidationResult(issues=[ValidationIssue(Severity.WARN, "GEOM-003", "open", "ref")])
    error = ValidationError(result)
    assert error.result is result
    assert "GEOM-003" in str(error)


def test_check_map_clean(test_map):
    result = check_map(test_map)
    assert result.issues == []
    assert result.stage == ValidationStage.STRUCTURE


def test_check_map_worldspawn_count(test_map):
    world = test_map.entities[0]
    doubled = Map(entities=(world, world))
    assert check_map(doubled).codes() == ["MAP-001"]
    assert check_map(Map()).codes() == ["MAP-002"]


def test_check_map_open_brush(cube_brush):
    entity = Entity({"classname": "worldspawn"}, (Brush(faces=cube_brush.faces[:2]),))
    result = check_map(Map(entities=(entity,)))
    assert result.codes() == ["GEOM-003"]
    assert result.issues[0].location == "entity 0 brush 0"


def test_zero_texture_scale(cube_brush):
    face = dataclasses.replace(cube_brush.faces[0], x_scale=0.0, y_scale=0.0)
    issues = check_texture_scales(face, "entity 0 brush 0 face 0")
    assert [i.code for i in issues] == ["GEOM-011", "GEOM-011"]
    assert "zero x texture scale" in issues[0].message
