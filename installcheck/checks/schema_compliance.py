"""Stage 3: persisted artifacts satisfy the target platform schema.

Artifacts are read again from disk here, independently of the file
integrity stage. Hard errors and advisory warnings are kept apart:

Errors:
- a required field is missing or has the wrong type
- ``name`` differs from the canonical agent name
- ``name`` contains characters outside ``[A-Za-z0-9_-]``

Warnings:
- ``tools`` is empty
- no ``resources`` entry references the shared knowledge base
- ``prompt`` is shorter than the minimum length
- ``prompt`` never mentions the methodology keyword
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Optional, Sequence, Tuple

from installcheck.checks.file_integrity import read_artifact, resolve_location_path
from installcheck.config.validator_config import ValidatorSettings
from installcheck.naming import artifact_file_name, canonical_agent_name
from installcheck.runtime.parallel import map_in_order
from installcheck.types import InstallLocation, SchemaComplianceResult
from installcheck.validator.errors import ErrorKind, IssueLog
from installcheck.validator.schema import check_fields

logger = logging.getLogger(__name__)

NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


def validate_agent_schema(
    config: Any,
    agent_id: str,
    settings: ValidatorSettings,
    location: str = "",
) -> IssueLog:
    """Validate one parsed artifact; returns its errors and warnings."""
    log = IssueLog()
    where = location or agent_id

    for problem in check_fields(config):
        log.add_error(ErrorKind.SCHEMA_ERROR, where, problem, "Regenerate the agent configuration")

    if not isinstance(config, dict):
        return log

    name = config.get("name")
    expected_name = canonical_agent_name(agent_id, settings.prefix)
    if isinstance(name, str):
        if name != expected_name:
            log.add_error(
                ErrorKind.NAMING_VIOLATION,
                where,
                f"Agent name should be '{expected_name}', found '{name}'",
                f"Set `name` to '{expected_name}'",
            )
        if not NAME_PATTERN.match(name):
            log.add_error(
                ErrorKind.NAMING_VIOLATION,
                where,
                f"Agent name contains invalid characters: {name!r}",
                "Use only letters, digits, hyphen and underscore",
            )

    tools = config.get("tools")
    if isinstance(tools, list) and not tools:
        log.add_warning(where, "Agent has no tools assigned")

    resources = config.get("resources")
    if isinstance(resources, list) and not any(
        isinstance(resource, str) and settings.kb_fragment in resource for resource in resources
    ):
        log.add_warning(
            where,
            f"Resources do not include {settings.kb_fragment} files",
            f"Add a file://{settings.kb_fragment}/** resource",
        )

    prompt = config.get("prompt")
    if isinstance(prompt, str):
        if len(prompt) < settings.min_prompt_length:
            log.add_warning(where, f"Prompt seems too short ({len(prompt)} < {settings.min_prompt_length} chars)")
        if settings.methodology_keyword not in prompt:
            log.add_warning(where, f"Prompt does not reference {settings.methodology_keyword} methodology")

    return log


def _check_artifact(
    location: InstallLocation,
    location_path: Path,
    agent_id: str,
    settings: ValidatorSettings,
) -> Optional[SchemaComplianceResult]:
    file_name = artifact_file_name(agent_id, settings.prefix, settings.extension)
    file_path = location_path / file_name
    where = f"{location.value}/{file_name}"
    try:
        if not file_path.is_file():
            return None
        _, config = read_artifact(file_path)
    except OSError as e:
        log = IssueLog()
        log.add_error(ErrorKind.PARSE_ERROR, where, f"Failed to read artifact: {e}")
    except ValueError as e:
        log = IssueLog()
        log.add_error(ErrorKind.PARSE_ERROR, where, f"Failed to parse JSON: {e}")
    else:
        log = validate_agent_schema(config, agent_id, settings, location=where)

    errors, warnings = log.snapshot()
    return SchemaComplianceResult(
        location=location,
        agent_id=agent_id,
        file_name=file_name,
        errors=errors,
        warnings=warnings,
    )


def check_schema_compliance(
    install_dir: Path,
    locations: Sequence[InstallLocation],
    agent_ids: Sequence[str],
    settings: ValidatorSettings,
) -> Tuple[SchemaComplianceResult, ...]:
    """Validate every present artifact, ordered by (location, agent)."""
    logger.info("Validating schema compliance...")
    work = [
        (location, resolve_location_path(location, install_dir, settings), agent_id)
        for location in dict.fromkeys(locations)
        for agent_id in agent_ids
    ]
    checked = map_in_order(lambda item: _check_artifact(*item, settings), work, settings.max_workers)
    results = tuple(r for r in checked if r is not None)

    valid = sum(1 for r in results if r.success)
    logger.info("Schema compliance: %d/%d configs valid", valid, len(results))
    return results
