"""
Result types for non-fatal map diagnostics.

- Severity: INFO < WARN < FAIL, ordered so the worst issue can be picked
- ValidationStage: Where in the load an issue was raised
- ValidationIssue: One finding, tied to a rule code and a map location
- ValidationResult: Ordered collection of findings for one load
- ValidationError: Raised in strict mode
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Dict, Iterable, List, Optional

from valvemap.errors import MapError


class Severity(IntEnum):
    """Issue severity.

    - INFO: Worth knowing, nothing was lost
    - WARN: Geometry was dropped or repaired; the load still succeeds
    - FAIL: The result is unusable
    """
    INFO = 1
    WARN = 2
    FAIL = 3

    def __str__(self) -> str:
        return self.name


class ValidationStage(Enum):
    STRUCTURE = "structure"
    GEOMETRY = "geometry"

    def __str__(self) -> str:
        return self.value


@dataclass
class ValidationIssue:
    """A single finding.

    Attributes:
        severity: How bad it is
        code: Rule code, e.g. "GEOM-010"
        message: Human-readable description with the offending values
        rule_reference: The format convention that was broken
        remediation: Suggested fix, if the rule has one
        location: Where in the map, e.g. "entity 0 brush 3 face 1"
    """
    severity: Severity
    code: str
    message: str
    rule_reference: str
    remediation: Optional[str] = None
    location: Optional[str] = None

    def format(self) -> str:
        """One-line form: ``LOCATION: SEVERITY CODE: message (fix: ...)``."""
        text = f"{self.location or '<map>'}: {self.severity.name} {self.code}: {self.message}"
        if self.remediation:
            text += f" (fix: {self.remediation})"
        return text

    def to_dict(self) -> dict:
        return {
            'severity': str(self.severity),
            'code': self.code,
            'message': self.message,
            'rule_reference': self.rule_reference,
            'remediation': self.remediation,
            'location': self.location,
        }

    def __str__(self) -> str:
        return self.format()


@dataclass
class ValidationResult:
    """Issues collected while loading one map, in the order they were found."""
    issues: List[ValidationIssue] = field(default_factory=list)
    stage: Optional[ValidationStage] = None

    @property
    def passed(self) -> bool:
        """True unless any FAIL issue was recorded."""
        return not self.failed

    @property
    def failed(self) -> bool:
        return any(i.severity == Severity.FAIL for i in self.issues)

    @property
    def worst(self) -> Optional[Severity]:
        """Highest severity recorded, or None when there are no issues."""
        return max((i.severity for i in self.issues), default=None)

    @property
    def warnings(self) -> List[ValidationIssue]:
        return self.by_severity(Severity.WARN)

    def by_severity(self, severity: Severity) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == severity]

    def counts(self) -> Dict[str, int]:
        """Issue count per severity name, worst first."""
        return {str(s): len(self.by_severity(s)) for s in sorted(Severity, reverse=True)}

    def codes(self) -> List[str]:
        """Rule codes of all issues, in order."""
        return [i.code for i in self.issues]

    def add_issue(self, issue: ValidationIssue) -> None:
        self.issues.append(issue)

    def extend(self, issues: Iterable[ValidationIssue]) -> None:
        self.issues.extend(issues)

    def merge(self, other: 'ValidationResult') -> 'ValidationResult':
        """Append another result's issues; returns self for chaining."""
        self.issues.extend(other.issues)
        return self

    def report(self) -> str:
        """Multi-line report, worst issues first, input order within a severity."""
        if not self.issues:
            return "Validation passed: No issues found"

        status = "FAILED" if self.failed else "PASSED"
        stage = f" ({self.stage})" if self.stage else ""
        tally = ", ".join(f"{n} {name}" for name, n in self.counts().items() if n)
        lines = [f"Validation {status}{stage}: {len(self.issues)} issue(s) [{tally}]"]
        for issue in sorted(self.issues, key=lambda i: i.severity, reverse=True):
            lines.append(f"  {issue.format()}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """JSON-serializable form."""
        return {
            'passed': self.passed,
            'stage': str(self.stage) if self.stage else None,
            'issue_count': len(self.issues),
            'counts': self.counts(),
            'issues': [issue.to_dict() for issue in self.issues],
        }


class ValidationError(MapError):
    """Raised in strict mode when a load produced WARN or FAIL issues.

    Attributes:
        result: The ValidationResult that caused the failure
    """

    def __init__(self, result: ValidationResult):
        self.result = result
        super().__init__(result.report())
