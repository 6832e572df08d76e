"""
report.py - Aggregate stage results into one report.

``aggregate`` is a pure fold over the five stage outputs: it classifies every
finding as a hard error or an advisory warning and computes the pass/fail
decision. The render functions turn a finished ValidationResults into text,
markdown, or a compact JSON-ready dict.

Severity policy:
- errors: config generation failures, file integrity failures (per agent, or
  the whole location when its directory is missing), schema errors, invalid
  invocation commands
- warnings: failed context checks, schema warnings, runtime binary not found
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Sequence

from installcheck.types import (
    ConfigGenerationResult,
    ContextCheck,
    FileIntegrityResult,
    InvocationReadiness,
    OverallSummary,
    SchemaComplianceResult,
    ValidationResults,
)
from installcheck.validator.errors import ErrorKind, Issue, IssueLog

STAGE_TITLES = (
    ("config_generation", "Configuration Generation"),
    ("file_integrity", "File Integrity"),
    ("schema_compliance", "Schema Compliance"),
    ("context_setup", "Project Context Loading"),
    ("invocation_readiness", "Agent Invocation Readiness"),
)


def _pass_or_issues(ok: bool) -> str:
    return "PASS" if ok else "ISSUES"


def _collect(
    config_generation: Sequence[ConfigGenerationResult],
    file_integrity: Sequence[FileIntegrityResult],
    schema_compliance: Sequence[SchemaComplianceResult],
    context_setup: Sequence[ContextCheck],
    invocation_readiness: InvocationReadiness,
) -> IssueLog:
    log = IssueLog()

    for result in config_generation:
        if not result.success:
            log.add_error(
                result.error_kind or ErrorKind.SCHEMA_ERROR,
                result.agent_id,
                result.error or "Configuration generation failed",
            )

    for location in file_integrity:
        if location.error_kind is not None:
            log.add_error(
                location.error_kind,
                f"{location.location.value} ({location.path})",
                location.error or "Installation directory not found",
                "Re-run the installer for this location",
            )
        for agent in location.agents:
            if not agent.success:
                log.add_error(
                    agent.error_kind or ErrorKind.CORRUPTED,
                    f"{location.location.value}/{agent.file_name}",
                    agent.error or "File integrity issue",
                )

    for record in schema_compliance:
        log.errors.extend(record.errors)

    for test in invocation_readiness.hard_failures:
        log.add_error(
            ErrorKind.INVOCATION_SYNTAX,
            test.agent_id,
            f"{test.kind.value} command '{test.command}' {', '.join(test.problems)}",
        )

    for check in context_setup:
        if not check.success:
            log.add_warning("context", f"{check.check_name} - {check.error or 'Not configured'}")

    for record in schema_compliance:
        log.warnings.extend(record.warnings)

    binary = invocation_readiness.binary
    if binary is not None and not binary.success:
        log.add_warning(
            binary.check_name,
            binary.warning or binary.detail or "Runtime binary not found",
            kind=ErrorKind.BINARY_NOT_FOUND,
        )

    return log


def summarize_counts(
    config_generation: Sequence[ConfigGenerationResult],
    file_integrity: Sequence[FileIntegrityResult],
    schema_compliance: Sequence[SchemaComplianceResult],
    context_setup: Sequence[ContextCheck],
    invocation_readiness: InvocationReadiness,
) -> Dict[str, str]:
    """Condensed per-stage counts."""
    config_ok = sum(1 for r in config_generation if r.success)
    schema_ok = sum(1 for r in schema_compliance if r.success)
    return {
        "config_generation": f"{config_ok}/{len(config_generation)}",
        "file_integrity": _pass_or_issues(all(r.success for r in file_integrity)),
        "schema_compliance": f"{schema_ok}/{len(schema_compliance)}",
        "context_setup": _pass_or_issues(all(c.success for c in context_setup)),
        "invocation_readiness": _pass_or_issues(not invocation_readiness.hard_failures),
    }


def aggregate(
    config_generation: Sequence[ConfigGenerationResult],
    file_integrity: Sequence[FileIntegrityResult],
    schema_compliance: Sequence[SchemaComplianceResult],
    context_setup: Sequence[ContextCheck],
    invocation_readiness: InvocationReadiness,
    extra_errors: Sequence[Issue] = (),
) -> ValidationResults:
    """Fold stage outputs into an immutable ValidationResults."""
    stages = (
        tuple(config_generation),
        tuple(file_integrity),
        tuple(schema_compliance),
        tuple(context_setup),
        invocation_readiness,
    )
    log = _collect(*stages)
    log.errors.extend(extra_errors)
    errors, warnings = log.snapshot()

    overall = OverallSummary(
        success=not errors,
        error_issues=errors,
        warning_issues=warnings,
        summary=summarize_counts(*stages),
    )
    return ValidationResults(
        config_generation=stages[0],
        file_integrity=stages[1],
        schema_compliance=stages[2],
        context_setup=stages[3],
        invocation_readiness=stages[4],
        overall=overall,
    )


# ============================================================================
# Renderers
# ============================================================================


def render_text(results: ValidationResults) -> str:
    """Stage-ordered human-readable report."""
    lines: List[str] = ["", "Installation Validation Report", "=" * 37]
    summary = results.overall.summary

    # 1. Configuration generation
    failed_configs = [r for r in results.config_generation if not r.success]
    lines.append(f"\n1. Configuration Generation: {summary.get('config_generation', '0/0')}")
    if not failed_configs:
        lines.append("   [PASS] All agent configurations generated successfully")
    else:
        lines.append(f"   [FAIL] {len(failed_configs)} configuration(s) failed")
        for r in failed_configs:
            lines.append(f"     - {r.agent_id}: {r.error}")

    # 2. File integrity
    lines.append(f"\n2. File Integrity: {summary.get('file_integrity', 'PASS')}")
    for location in results.file_integrity:
        if location.success:
            lines.append(f"   [PASS] {location.location.value}: All files present and valid")
            continue
        lines.append(f"   [FAIL] {location.location.value}: Issues found")
        if location.error:
            lines.append(f"     - {location.path}: {location.error}")
        for agent in location.agents:
            if not agent.success:
                lines.append(f"     - {agent.agent_id}: {agent.error}")

    # 3. Schema compliance
    failed_schema = [r for r in results.schema_compliance if not r.success]
    lines.append(f"\n3. Schema Compliance: {summary.get('schema_compliance', '0/0')}")
    if not failed_schema:
        lines.append("   [PASS] All configurations comply with the agent schema")
    else:
        lines.append(f"   [FAIL] {len(failed_schema)} configuration(s) have schema issues")
        for r in failed_schema:
            problems = ", ".join(e.problem for e in r.errors)
            lines.append(f"     - {r.agent_id} ({r.location.value}): {problems}")

    # 4. Context setup
    lines.append(f"\n4. Project Context Loading: {summary.get('context_setup', 'PASS')}")
    for check in results.context_setup:
        if check.success:
            suffix = f" ({check.detail})" if check.detail else ""
            lines.append(f"   [PASS] {check.check_name}{suffix}")
        else:
            lines.append(f"   [WARN] {check.check_name}: {check.error or 'Not configured'}")

    # 5. Invocation readiness
    invocation = results.invocation_readiness
    lines.append(f"\n5. Agent Invocation Readiness: {summary.get('invocation_readiness', 'PASS')}")
    if not invocation.hard_failures:
        lines.append("   [PASS] All agent commands are well-formed")
    for test in invocation.hard_failures:
        lines.append(f"   [FAIL] {test.command}: {', '.join(test.problems)}")
    if invocation.binary is not None:
        if invocation.binary.success:
            lines.append(f"   [PASS] {invocation.binary.check_name}: {invocation.binary.detail}")
        else:
            lines.append(f"   [WARN] {invocation.binary.check_name}: {invocation.binary.warning}")

    # Final summary
    overall = results.overall
    lines.append("\nSummary")
    lines.append("=" * 10)
    if overall.success:
        lines.append("Installation validation PASSED.")
        lines.append("  All agents are ready for use.")
    else:
        lines.append("Installation validation FAILED.")
        lines.append(f"  {len(overall.error_issues)} error(s) found that must be addressed:")
        for issue in overall.error_issues:
            lines.append(f"  {issue.format()}")

    if overall.warning_issues:
        lines.append(f"\n{len(overall.warning_issues)} warning(s) noted:")
        for issue in overall.warning_issues:
            lines.append(f"  {issue.format(marker='WARN')}")

    return "\n".join(lines)


def build_report_json(results: ValidationResults) -> Dict[str, Any]:
    """Compact machine-readable report."""
    overall = results.overall
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds"),
        "status": "PASSED" if overall.success else "FAILED",
        "summary": dict(overall.summary),
        "error_count": len(overall.error_issues),
        "warning_count": len(overall.warning_issues),
        "errors": [e.to_dict() for e in overall.error_issues],
        "warnings": [w.to_dict() for w in overall.warning_issues],
    }


def build_report_markdown(results: ValidationResults) -> str:
    """Markdown report with a stage checklist and enumerated findings."""
    overall = results.overall
    lines: List[str] = []

    lines.append("# Installation Validation Report")
    lines.append("")
    lines.append(f"**Timestamp**: {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S UTC')}")
    lines.append(f"**Status**: {'PASSED' if overall.success else 'FAILED'}")
    lines.append("")

    lines.append("## Checks Performed")
    lines.append("")
    for key, title in STAGE_TITLES:
        value = overall.summary.get(key, "")
        if "/" in value:
            done, total = value.split("/", 1)
            ok = done == total
        else:
            ok = value != "ISSUES"
        marker = "[x]" if ok else "[ ]"
        lines.append(f"- {marker} {title} ({value})")
    lines.append("")

    lines.append(f"## Errors ({len(overall.error_issues)})")
    lines.append("")
    if not overall.error_issues:
        lines.append("_No errors found._")
    else:
        for error in overall.error_issues:
            lines.append(f"### {error.kind.value}")
            lines.append(f"**Location**: {error.location}")
            lines.append(f"**Error**: {error.problem}")
            if error.fix_action:
                lines.append(f"**Fix**: {error.fix_action}")
            lines.append("")
    lines.append("")

    lines.append(f"## Warnings ({len(overall.warning_issues)})")
    lines.append("")
    if not overall.warning_issues:
        lines.append("_No warnings._")
    else:
        for warning in overall.warning_issues:
            lines.append(f"### {warning.kind.value}")
            lines.append(f"**Location**: {warning.location}")
            lines.append(f"**Warning**: {warning.problem}")
            if warning.fix_action:
                lines.append(f"**Fix**: {warning.fix_action}")
            lines.append("")

    return "\n".join(lines)


__all__ = [
    "aggregate",
    "build_report_json",
    "build_report_markdown",
    "render_text",
    "summarize_counts",
]
