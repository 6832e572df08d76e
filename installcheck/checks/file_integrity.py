"""Stage 2: every expected artifact exists, is readable, and parses."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

from installcheck.config.validator_config import ValidatorSettings
from installcheck.naming import artifact_file_name
from installcheck.runtime.parallel import map_in_order
from installcheck.types import AgentFileCheck, ErrorKind, FileIntegrityResult, InstallLocation

logger = logging.getLogger(__name__)


def resolve_location_path(
    location: InstallLocation,
    install_dir: Path,
    settings: ValidatorSettings,
) -> Path:
    """Absolute directory for ``location``.

    Home-relative paths expand against the current user; other relative paths
    resolve against the install root.
    """
    path = Path(settings.location_path(location)).expanduser()
    if not path.is_absolute():
        path = Path(install_dir) / path
    return path.resolve()


def read_artifact(path: Path) -> Tuple[str, Any]:
    """Read and parse one artifact file.

    Raises:
        OSError, UnicodeDecodeError: File unreadable.
        json.JSONDecodeError: Content is not valid JSON.
    """
    content = path.read_text(encoding="utf-8")
    return content, json.loads(content)


def _check_agent_file(location_path: Path, agent_id: str, settings: ValidatorSettings) -> AgentFileCheck:
    file_name = artifact_file_name(agent_id, settings.prefix, settings.extension)
    file_path = location_path / file_name

    try:
        present = file_path.is_file()
    except OSError as e:
        logger.debug("Cannot stat artifact %s: %s", file_path, e)
        return AgentFileCheck(
            agent_id=agent_id,
            file_name=file_name,
            success=False,
            error_kind=ErrorKind.NOT_FOUND_IN_LOCATION,
            error=f"Agent file not accessible in location: {e}",
        )

    if not present:
        return AgentFileCheck(
            agent_id=agent_id,
            file_name=file_name,
            success=False,
            error_kind=ErrorKind.NOT_FOUND_IN_LOCATION,
            error="Agent file not found in location",
        )

    try:
        content, _ = read_artifact(file_path)
    except (OSError, UnicodeDecodeError, ValueError) as e:
        logger.debug("Artifact %s is unreadable or corrupted: %s", file_path, e)
        return AgentFileCheck(
            agent_id=agent_id,
            file_name=file_name,
            success=False,
            error_kind=ErrorKind.CORRUPTED,
            error=f"File corrupted: {e}",
        )

    return AgentFileCheck(agent_id=agent_id, file_name=file_name, success=True, file_size=len(content))


def check_file_integrity(
    install_dir: Path,
    locations: Sequence[InstallLocation],
    agent_ids: Sequence[str],
    settings: ValidatorSettings,
) -> Tuple[FileIntegrityResult, ...]:
    """Check artifact files for every selected location, in location order."""
    logger.info("Validating file integrity...")
    results: List[FileIntegrityResult] = []
    resolved = {location: resolve_location_path(location, install_dir, settings) for location in locations}
    dir_errors: Dict[InstallLocation, str] = {}
    present: List[Tuple[InstallLocation, Path]] = []
    for location, path in resolved.items():
        try:
            if path.is_dir():
                present.append((location, path))
        except OSError as e:
            dir_errors[location] = f"Installation directory not accessible: {e}"

    work = [(location, path, agent_id) for location, path in present for agent_id in agent_ids]
    checks = map_in_order(
        lambda item: _check_agent_file(item[1], item[2], settings),
        work,
        settings.max_workers,
    )
    by_location: Dict[InstallLocation, List[AgentFileCheck]] = {}
    for (location, _, _), check in zip(work, checks):
        by_location.setdefault(location, []).append(check)

    present_paths = dict(present)
    for location, location_path in resolved.items():
        if location not in present_paths:
            logger.debug("Location %s directory missing: %s", location.value, location_path)
            results.append(
                FileIntegrityResult(
                    location=location,
                    path=str(location_path),
                    success=False,
                    error_kind=ErrorKind.DIRECTORY_NOT_FOUND,
                    error=dir_errors.get(location, "Installation directory not found"),
                )
            )
            continue

        agent_checks = tuple(by_location.get(location, ()))
        results.append(
            FileIntegrityResult(
                location=location,
                path=str(present_paths[location]),
                success=all(c.success for c in agent_checks),
                agents=agent_checks,
            )
        )

    all_valid = all(r.success for r in results)
    logger.info("File integrity: %s", "PASS" if all_valid else "ISSUES FOUND")
    return tuple(results)
