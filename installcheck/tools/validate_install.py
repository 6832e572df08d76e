#!/usr/bin/env python3
"""
validate_install.py - Installation success verifier

Checks that generated agent configuration artifacts were installed correctly:

1. Configuration generation: every agent's config re-derives from its source
2. File integrity: every artifact exists and parses at each location
3. Schema compliance: artifacts satisfy the platform schema
4. Project context: shared knowledge files are present (advisory)
5. Invocation readiness: agent commands are well-formed; runtime CLI probed (advisory)

## CLI Usage

Validate both locations for every agent found under .bmad-core/agents:
  validate-install /path/to/project

Only the project-local location, two agents:
  validate-install . --location project --agent architect --agent dev

Machine-readable output:
  validate-install . --json
  validate-install . --report markdown

## Exit Codes

0   Validation passed (warnings allowed)
1   Validation failed
2   Fatal error (install dir missing, no agents to validate)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from installcheck import __version__
from installcheck.config.validator_config import ValidatorSettings, load_settings
from installcheck.pipeline import InstallationValidator
from installcheck.report import build_report_json, build_report_markdown, render_text
from installcheck.types import InstallLocation

logger = logging.getLogger(__name__)

# Exit codes per contract
EXIT_SUCCESS = 0
EXIT_VALIDATION_FAILED = 1
EXIT_FATAL_ERROR = 2


def discover_agent_ids(install_dir: Path, settings: ValidatorSettings) -> List[str]:
    """Agent ids from source definitions under the first existing candidate dir."""
    for candidate in settings.source_candidates:
        source_dir = install_dir / candidate
        if source_dir.is_dir():
            ids = sorted(
                p.name[: -len(settings.source_suffix)]
                for p in source_dir.iterdir()
                if p.is_file() and p.name.endswith(settings.source_suffix)
            )
            if ids:
                return ids
    return []


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="validate-install",
        description="Validate generated agent configuration artifacts after installation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit Codes:
  0 - Validation passed
  1 - Validation failed
  2 - Fatal error (install dir missing, no agents)

Examples:
  validate-install .
  validate-install . --location project --agent architect
  validate-install . --report markdown
        """,
    )
    parser.add_argument(
        "install_dir",
        nargs="?",
        default=".",
        help="Install root (default: current directory)",
    )
    parser.add_argument(
        "--location",
        action="append",
        choices=[loc.value for loc in InstallLocation],
        help="Location to validate (repeatable; default: all)",
    )
    parser.add_argument(
        "--agent",
        action="append",
        help="Agent id to validate (repeatable; default: discovered from source definitions)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full structured results as JSON",
    )
    parser.add_argument(
        "--report",
        choices=["json", "markdown"],
        help="Output format for a condensed report",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"validate-install {__version__}",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    install_dir = Path(args.install_dir).expanduser().resolve()
    if not install_dir.is_dir():
        print(f"ERROR: install directory {install_dir} not found", file=sys.stderr)
        sys.exit(EXIT_FATAL_ERROR)

    settings = load_settings()
    agent_ids = args.agent or discover_agent_ids(install_dir, settings)
    if not agent_ids:
        print(
            f"ERROR: no agents to validate (none given and no source definitions under {install_dir})",
            file=sys.stderr,
        )
        sys.exit(EXIT_FATAL_ERROR)

    locations = args.location or [loc.value for loc in InstallLocation]

    validator = InstallationValidator(settings=settings, echo=False)
    results = validator.validate(install_dir, locations, agent_ids)

    if args.report == "json":
        print(json.dumps(build_report_json(results), indent=2))
    elif args.report == "markdown":
        print(build_report_markdown(results))
    elif args.json:
        print(json.dumps(results.to_dict(), indent=2, default=str))
    else:
        print(render_text(results))

    sys.exit(EXIT_SUCCESS if results.overall.success else EXIT_VALIDATION_FAILED)


if __name__ == "__main__":
    main()
