"""Stage 1: re-derive each agent's configuration and check it is schema-shaped."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import yaml

from installcheck.config.validator_config import ValidatorSettings
from installcheck.generator import ArtifactGenerator
from installcheck.types import ConfigGenerationResult, ErrorKind
from installcheck.validator.schema import missing_fields

logger = logging.getLogger(__name__)


def _source_stems(agent_id: str, prefix: str) -> List[str]:
    # Source definitions are named by the bare id; accept prefixed ids too.
    stems = [agent_id]
    if agent_id.startswith(prefix) and len(agent_id) > len(prefix):
        stems.append(agent_id[len(prefix):])
    return stems


def find_agent_source(install_dir: Path, agent_id: str, settings: ValidatorSettings) -> Optional[Path]:
    """Locate the agent's source definition under the install root."""
    for stem in _source_stems(agent_id, settings.prefix):
        for candidate in settings.source_candidates:
            path = Path(install_dir) / candidate / f"{stem}{settings.source_suffix}"
            try:
                if path.is_file():
                    return path
            except OSError as e:
                logger.debug("Cannot stat source candidate %s: %s", path, e)
    return None


def _check_agent(
    install_dir: Path,
    agent_id: str,
    generator: ArtifactGenerator,
    settings: ValidatorSettings,
) -> ConfigGenerationResult:
    agent_path = find_agent_source(install_dir, agent_id, settings)
    if agent_path is None:
        logger.debug("No source definition for %s under %s", agent_id, install_dir)
        candidates = ", ".join(settings.source_candidates)
        return ConfigGenerationResult(
            agent_id=agent_id,
            success=False,
            error_kind=ErrorKind.NOT_FOUND,
            error=f"Agent source definition not found (looked in {candidates})",
        )

    try:
        content = generator.create_agent_config(agent_id, agent_path, Path(install_dir))
    except Exception as e:
        logger.debug("Generator failed for %s: %s", agent_id, e)
        return ConfigGenerationResult(
            agent_id=agent_id,
            success=False,
            error_kind=ErrorKind.PARSE_ERROR,
            error=f"Configuration generation failed: {e}",
        )

    if not isinstance(content, (str, bytes)):
        return ConfigGenerationResult(
            agent_id=agent_id,
            success=False,
            error_kind=ErrorKind.PARSE_ERROR,
            error=f"Generator returned {type(content).__name__}, expected text",
        )

    try:
        parsed = yaml.safe_load(content)
    except yaml.YAMLError as e:
        return ConfigGenerationResult(
            agent_id=agent_id,
            success=False,
            error_kind=ErrorKind.PARSE_ERROR,
            error=f"Invalid YAML generated: {e}",
        )

    if not isinstance(parsed, dict):
        return ConfigGenerationResult(
            agent_id=agent_id,
            success=False,
            error_kind=ErrorKind.SCHEMA_ERROR,
            error=f"Generated configuration is not a mapping (got {type(parsed).__name__})",
        )

    missing = missing_fields(parsed)
    if missing:
        return ConfigGenerationResult(
            agent_id=agent_id,
            success=False,
            error_kind=ErrorKind.SCHEMA_ERROR,
            error=f"Missing required fields: {', '.join(missing)}",
        )

    return ConfigGenerationResult(
        agent_id=agent_id,
        success=True,
        parsed_config=parsed,
        content_size=len(content),
    )


def check_config_generation(
    install_dir: Path,
    agent_ids: Sequence[str],
    generator: ArtifactGenerator,
    settings: ValidatorSettings,
) -> Tuple[ConfigGenerationResult, ...]:
    """Generate and check configuration for every agent; one result per id."""
    logger.info("Validating configuration generation...")
    results = tuple(_check_agent(install_dir, agent_id, generator, settings) for agent_id in agent_ids)
    success_count = sum(1 for r in results if r.success)
    logger.info("%d/%d configurations generated successfully", success_count, len(results))
    return results
