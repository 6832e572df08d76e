# installcheck/validator/errors.py
"""Validation issue collection and formatting."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

# Issue message template: [FAIL] KIND: location problem -> Fix: action
ISSUE_TEMPLATE = "[{marker}] {kind}: {location} {problem}"
FIX_TEMPLATE = "\n  Fix: {fix_action}"


class ErrorKind(str, Enum):
    """Classification of validation findings."""

    NOT_FOUND = "NotFound"
    PARSE_ERROR = "ParseError"
    CORRUPTED = "Corrupted"
    SCHEMA_ERROR = "SchemaError"
    NAMING_VIOLATION = "NamingViolation"
    DIRECTORY_NOT_FOUND = "DirectoryNotFound"
    NOT_FOUND_IN_LOCATION = "NotFoundInLocation"
    INVOCATION_SYNTAX = "InvocationSyntax"
    BINARY_NOT_FOUND = "BinaryNotFound"
    WARNING = "Warning"
    VALIDATION_FAILURE = "validation_failure"


@dataclass(frozen=True)
class Issue:
    """Structured validation finding."""

    kind: ErrorKind
    location: str
    problem: str
    fix_action: Optional[str] = None

    def message(self) -> str:
        """One-line message used in the overall error/warning lists."""
        return f"{self.kind.value}: {self.location}: {self.problem}"

    def format(self, marker: str = "FAIL") -> str:
        """Format issue in the report template."""
        text = ISSUE_TEMPLATE.format(
            marker=marker,
            kind=self.kind.value,
            location=self.location,
            problem=self.problem,
        )
        if self.fix_action:
            text += FIX_TEMPLATE.format(fix_action=self.fix_action)
        return text

    def to_dict(self) -> Dict[str, Any]:
        """Convert issue to dictionary for JSON serialization."""
        return {
            "type": self.kind.value,
            "location": self.location,
            "problem": self.problem,
            "fix_action": self.fix_action,
        }


class IssueLog:
    """Collects validation errors and warnings in insertion order.

    A log is local to the stage or fold that builds it; callers freeze it with
    ``snapshot()`` before handing results on.
    """

    def __init__(self):
        self.errors: List[Issue] = []
        self.warnings: List[Issue] = []

    def add_error(
        self,
        kind: ErrorKind,
        location: str,
        problem: str,
        fix_action: Optional[str] = None,
    ):
        """Add a hard validation error."""
        self.errors.append(Issue(kind, location, problem, fix_action))

    def add_warning(
        self,
        location: str,
        problem: str,
        fix_action: Optional[str] = None,
        kind: ErrorKind = ErrorKind.WARNING,
    ):
        """Add an advisory warning (never affects success)."""
        self.warnings.append(Issue(kind, location, problem, fix_action))

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def snapshot(self) -> Tuple[Tuple[Issue, ...], Tuple[Issue, ...]]:
        """Return immutable (errors, warnings)."""
        return tuple(self.errors), tuple(self.warnings)

    def to_dict(self) -> Dict[str, Any]:
        """Convert log to dictionary for JSON serialization."""
        return {
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "status": "FAIL" if self.has_errors() else "PASS",
        }
