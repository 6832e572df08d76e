"""
types.py - Result records for the installation validation pipeline.

Every stage produces immutable records; the pipeline folds them into one
ValidationResults value per run. Nothing here is mutated after construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from installcheck.validator.errors import ErrorKind, Issue


class InstallLocation(str, Enum):
    """Supported installation roots for agent artifacts."""

    USER = "user"
    PROJECT = "project"


class InvocationKind(str, Enum):
    """Kinds of synthesized agent commands."""

    INITIAL_INVOCATION = "initial-invocation"
    AGENT_SWITCH = "agent-switch"


@dataclass(frozen=True)
class ConfigGenerationResult:
    """Outcome of re-deriving one agent's configuration from its source."""

    agent_id: str
    success: bool
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None
    parsed_config: Optional[Dict[str, Any]] = None
    content_size: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "agent_id": self.agent_id,
            "success": self.success,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "error": self.error,
            "parsed_config": self.parsed_config,
            "content_size": self.content_size,
        }


@dataclass(frozen=True)
class AgentFileCheck:
    """Existence and parse check for one artifact file in one location."""

    agent_id: str
    file_name: str
    success: bool
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None
    file_size: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "agent_id": self.agent_id,
            "file_name": self.file_name,
            "success": self.success,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "error": self.error,
            "file_size": self.file_size,
        }


@dataclass(frozen=True)
class FileIntegrityResult:
    """File integrity outcome for one install location.

    ``success`` is the conjunction of the per-agent checks, or False when the
    location directory itself is missing (``error_kind`` is then set and
    ``agents`` is empty).
    """

    location: InstallLocation
    path: str
    success: bool
    agents: Tuple[AgentFileCheck, ...] = ()
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "location": self.location.value,
            "path": self.path,
            "success": self.success,
            "agents": [a.to_dict() for a in self.agents],
            "error_kind": self.error_kind.value if self.error_kind else None,
            "error": self.error,
        }


@dataclass(frozen=True)
class SchemaComplianceResult:
    """Schema validation of one persisted artifact (location x agent)."""

    location: InstallLocation
    agent_id: str
    file_name: str
    errors: Tuple[Issue, ...] = ()
    warnings: Tuple[Issue, ...] = ()

    @property
    def success(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "location": self.location.value,
            "agent_id": self.agent_id,
            "file_name": self.file_name,
            "success": self.success,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
        }


@dataclass(frozen=True)
class ContextCheck:
    """One advisory shared-context check."""

    check_name: str
    success: bool
    detail: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "check_name": self.check_name,
            "success": self.success,
            "detail": self.detail,
            "error": self.error,
        }


@dataclass(frozen=True)
class InvocationTest:
    """Structural check of one synthesized agent command."""

    agent_id: str
    command: str
    kind: InvocationKind
    valid: bool
    problems: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "agent_id": self.agent_id,
            "command": self.command,
            "kind": self.kind.value,
            "valid": self.valid,
            "problems": list(self.problems),
        }


@dataclass(frozen=True)
class BinaryProbeCheck:
    """Best-effort runtime binary availability probe."""

    check_name: str
    success: bool
    detail: Optional[str] = None
    warning: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "check_name": self.check_name,
            "success": self.success,
            "detail": self.detail,
            "warning": self.warning,
        }


@dataclass(frozen=True)
class InvocationReadiness:
    """Command syntax checks plus the host binary probe."""

    commands: Tuple[InvocationTest, ...] = ()
    binary: Optional[BinaryProbeCheck] = None

    @property
    def hard_failures(self) -> Tuple[InvocationTest, ...]:
        return tuple(t for t in self.commands if not t.valid)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "commands": [t.to_dict() for t in self.commands],
            "binary": self.binary.to_dict() if self.binary else None,
        }


@dataclass(frozen=True)
class OverallSummary:
    """Final pass/fail decision with separated errors and warnings."""

    success: bool
    error_issues: Tuple[Issue, ...] = ()
    warning_issues: Tuple[Issue, ...] = ()
    summary: Dict[str, str] = field(default_factory=dict)

    @property
    def errors(self) -> Tuple[str, ...]:
        return tuple(issue.message() for issue in self.error_issues)

    @property
    def warnings(self) -> Tuple[str, ...]:
        return tuple(issue.message() for issue in self.warning_issues)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "summary": dict(self.summary),
        }


@dataclass(frozen=True)
class ValidationResults:
    """Complete outcome of one validation run."""

    config_generation: Tuple[ConfigGenerationResult, ...] = ()
    file_integrity: Tuple[FileIntegrityResult, ...] = ()
    schema_compliance: Tuple[SchemaComplianceResult, ...] = ()
    context_setup: Tuple[ContextCheck, ...] = ()
    invocation_readiness: InvocationReadiness = field(default_factory=InvocationReadiness)
    overall: OverallSummary = field(default_factory=lambda: OverallSummary(success=False))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "config_generation": [r.to_dict() for r in self.config_generation],
            "file_integrity": [r.to_dict() for r in self.file_integrity],
            "schema_compliance": [r.to_dict() for r in self.schema_compliance],
            "context_setup": [c.to_dict() for c in self.context_setup],
            "invocation_readiness": self.invocation_readiness.to_dict(),
            "overall": self.overall.to_dict(),
        }


__all__ = [
    "AgentFileCheck",
    "BinaryProbeCheck",
    "ConfigGenerationResult",
    "ContextCheck",
    "ErrorKind",
    "FileIntegrityResult",
    "InstallLocation",
    "InvocationKind",
    "InvocationReadiness",
    "InvocationTest",
    "OverallSummary",
    "SchemaComplianceResult",
    "ValidationResults",
]
