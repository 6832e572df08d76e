"""Validation primitives: issue collection and the agent config schema."""

from installcheck.validator.errors import ErrorKind, Issue, IssueLog
from installcheck.validator.schema import (
    AGENT_CONFIG_FIELDS,
    FieldSpec,
    check_fields,
    missing_fields,
)

__all__ = [
    "AGENT_CONFIG_FIELDS",
    "ErrorKind",
    "FieldSpec",
    "Issue",
    "IssueLog",
    "check_fields",
    "missing_fields",
]
