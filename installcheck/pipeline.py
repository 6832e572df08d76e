"""
pipeline.py - Installation validation orchestrator.

Runs the five check stages in order over shared inputs and folds their
outputs into one ValidationResults. Each call builds its results from
scratch, so one validator can serve concurrent runs.

Usage:
    from installcheck.pipeline import InstallationValidator, run_validation

    # Functional form
    results = run_validation("/path/to/project", ["user", "project"], ["architect"])
    if not results.overall.success:
        print(results.overall.errors)

    # Installer-facing form: prints the report and returns a boolean
    validator = InstallationValidator()
    ok = validator.validate_installation("/path/to/project", ["project"], ["architect", "dev"])
    details = validator.get_validation_results()
"""

from __future__ import annotations

import logging
import sys
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, TextIO, Union

from installcheck.checks.config_generation import check_config_generation
from installcheck.checks.context_setup import check_context_setup
from installcheck.checks.file_integrity import check_file_integrity
from installcheck.checks.invocation import check_invocation_readiness
from installcheck.checks.schema_compliance import check_schema_compliance
from installcheck.config.validator_config import ValidatorSettings, load_settings
from installcheck.generator import AgentConfigGenerator, ArtifactGenerator
from installcheck.report import aggregate, render_text
from installcheck.runtime.probe import EnvironmentProbe, create_probe
from installcheck.types import InstallLocation, InvocationReadiness, OverallSummary, ValidationResults
from installcheck.validator.errors import ErrorKind, Issue

logger = logging.getLogger(__name__)

LocationLike = Union[InstallLocation, str]


def normalize_locations(selected_locations: Iterable[LocationLike]) -> List[InstallLocation]:
    """Convert to InstallLocation members, dropping duplicates, keeping order.

    Raises:
        ValueError: If a location is not a supported member.
    """
    locations = [InstallLocation(location) for location in selected_locations]
    return list(dict.fromkeys(locations))


def _failed_results(partial: Dict[str, Any], failure: Issue) -> ValidationResults:
    try:
        return aggregate(
            partial.get("config_generation", ()),
            partial.get("file_integrity", ()),
            partial.get("schema_compliance", ()),
            partial.get("context_setup", ()),
            partial.get("invocation_readiness", InvocationReadiness()),
            extra_errors=(failure,),
        )
    except Exception:
        logger.exception("Could not aggregate partial validation results")
        return ValidationResults(overall=OverallSummary(success=False, error_issues=(failure,)))


def run_validation(
    install_dir: Union[str, Path],
    selected_locations: Iterable[LocationLike],
    agent_ids: Iterable[str],
    settings: Optional[ValidatorSettings] = None,
    generator: Optional[ArtifactGenerator] = None,
    probe: Optional[EnvironmentProbe] = None,
) -> ValidationResults:
    """Run every stage and return the aggregated results.

    Per-record problems are reported inside the results. Anything else that
    goes wrong becomes a single ``validation_failure`` error.
    """
    partial: Dict[str, Any] = {}
    try:
        settings = settings or load_settings()
        generator = generator or AgentConfigGenerator(prefix=settings.prefix)
        probe = probe or create_probe(settings)
        root = Path(install_dir).expanduser().resolve()
        locations = normalize_locations(selected_locations)
        agents = list(dict.fromkeys(agent_ids))

        logger.info(
            "Validating installation at %s (%d agents, locations: %s)",
            root,
            len(agents),
            ", ".join(loc.value for loc in locations) or "none",
        )

        partial["config_generation"] = check_config_generation(root, agents, generator, settings)
        partial["file_integrity"] = check_file_integrity(root, locations, agents, settings)
        partial["schema_compliance"] = check_schema_compliance(root, locations, agents, settings)
        partial["context_setup"] = check_context_setup(root, settings)
        partial["invocation_readiness"] = check_invocation_readiness(agents, probe, settings)

        return aggregate(
            partial["config_generation"],
            partial["file_integrity"],
            partial["schema_compliance"],
            partial["context_setup"],
            partial["invocation_readiness"],
        )
    except Exception as e:
        logger.exception("Installation validation failed")
        failure = Issue(
            ErrorKind.VALIDATION_FAILURE,
            "pipeline",
            f"Validation process failed: {e}",
        )
        return _failed_results(partial, failure)


class InstallationValidator:
    """Installer-facing validator.

    Holds only collaborators and settings. ``validate_installation`` prints
    the report and returns the pass/fail decision; the full structured result
    of the most recently completed run is available from
    ``get_validation_results``. Concurrent callers that need their own
    results should use ``validate`` instead.
    """

    def __init__(
        self,
        settings: Optional[ValidatorSettings] = None,
        generator: Optional[ArtifactGenerator] = None,
        probe: Optional[EnvironmentProbe] = None,
        echo: bool = True,
        stream: Optional[TextIO] = None,
    ):
        self._settings = settings
        self._generator = generator
        self._probe = probe
        self._echo = echo
        self._stream = stream
        self._lock = threading.Lock()
        self._last_results: Optional[ValidationResults] = None

    def validate(
        self,
        install_dir: Union[str, Path],
        selected_locations: Iterable[LocationLike],
        agent_ids: Iterable[str],
    ) -> ValidationResults:
        """Run the pipeline and return this run's results."""
        results = run_validation(
            install_dir,
            selected_locations,
            agent_ids,
            settings=self._settings,
            generator=self._generator,
            probe=self._probe,
        )
        with self._lock:
            self._last_results = results
        return results

    def validate_installation(
        self,
        install_dir: Union[str, Path],
        selected_locations: Iterable[LocationLike],
        agent_ids: Iterable[str],
    ) -> bool:
        """Validate, print the report, and return ``overall.success``."""
        results = self.validate(install_dir, selected_locations, agent_ids)
        if self._echo:
            print(render_text(results), file=self._stream or sys.stdout)
        return results.overall.success

    def get_validation_results(self) -> Optional[ValidationResults]:
        """Results of the most recently completed run, or None."""
        with self._lock:
            return self._last_results


def validate_installation(
    install_dir: Union[str, Path],
    selected_locations: Iterable[LocationLike],
    agent_ids: Iterable[str],
    **kwargs: Any,
) -> bool:
    """One-shot convenience: print the report and return the pass/fail decision.

    Keyword arguments are passed to InstallationValidator.
    """
    return InstallationValidator(**kwargs).validate_installation(install_dir, selected_locations, agent_ids)


__all__ = ["InstallationValidator", "normalize_locations", "run_validation", "validate_installation"]
