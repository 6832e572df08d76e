"""Stage 4: shared runtime context agents rely on. Findings are advisory."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Tuple

from installcheck.config.validator_config import ValidatorSettings
from installcheck.types import ContextCheck

logger = logging.getLogger(__name__)


def _count_sources(agents_dir: Path, suffix: str) -> int:
    try:
        return sum(1 for p in agents_dir.iterdir() if p.is_file() and p.name.endswith(suffix))
    except OSError as e:
        logger.debug("Cannot list %s: %s", agents_dir, e)
        return 0


def _exists(path: Path, is_dir: bool = False) -> bool:
    # Unstattable paths (permissions, overlong names) count as absent.
    try:
        return path.is_dir() if is_dir else path.is_file()
    except OSError as e:
        logger.debug("Cannot stat %s: %s", path, e)
        return False


def check_context_setup(install_dir: Path, settings: ValidatorSettings) -> Tuple[ContextCheck, ...]:
    """Run the independent context checks under ``install_dir``."""
    logger.info("Validating project context setup...")
    checks: List[ContextCheck] = []
    root = Path(install_dir) / settings.context_root
    root_check = f"{settings.context_root} directory exists"
    agents_check = "Agent files available for context"

    if _exists(root, is_dir=True):
        checks.append(ContextCheck(check_name=root_check, success=True))

        agents_dir = root / settings.context_agents_dir
        if _exists(agents_dir, is_dir=True):
            count = _count_sources(agents_dir, settings.source_suffix)
            checks.append(
                ContextCheck(
                    check_name=agents_check,
                    success=count > 0,
                    detail=f"{count} agent files found",
                    error=None if count > 0 else f"No {settings.source_suffix} files in {agents_dir}",
                )
            )
        else:
            checks.append(ContextCheck(check_name=agents_check, success=False, error="No agents directory found"))
    else:
        checks.append(
            ContextCheck(
                check_name=root_check,
                success=False,
                error=f"{settings.context_root} directory not found",
            )
        )

    for file_name in settings.project_files:
        present = _exists(Path(install_dir) / file_name)
        checks.append(
            ContextCheck(
                check_name=f"{file_name} available for context",
                success=present,
                error=None if present else f"{file_name} not found at install root",
            )
        )

    all_valid = all(c.success for c in checks)
    logger.info("Project context setup: %s", "PASS" if all_valid else "SOME ISSUES")
    return tuple(checks)
