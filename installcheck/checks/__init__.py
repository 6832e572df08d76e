"""Validation stages, one module per stage."""

from installcheck.checks.config_generation import check_config_generation, find_agent_source
from installcheck.checks.context_setup import check_context_setup
from installcheck.checks.file_integrity import check_file_integrity, resolve_location_path
from installcheck.checks.invocation import check_invocation_readiness
from installcheck.checks.schema_compliance import check_schema_compliance, validate_agent_schema

__all__ = [
    "check_config_generation",
    "check_context_setup",
    "check_file_integrity",
    "check_invocation_readiness",
    "check_schema_compliance",
    "find_agent_source",
    "resolve_location_path",
    "validate_agent_schema",
]
