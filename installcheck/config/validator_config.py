"""Configuration registry for the installation validator.

Provides one resolved settings value for a validation run. Environment
variables take precedence over YAML config, which takes precedence over the
built-in defaults.

Usage:
    from installcheck.config.validator_config import load_settings

    settings = load_settings()
    settings.location_path(InstallLocation.USER)  # "~/.aws/amazonq/cli-agents/"

Environment overrides:
    INSTALLCHECK_PREFIX              Methodology prefix ("bmad-")
    INSTALLCHECK_EXTENSION           Artifact extension (".json")
    INSTALLCHECK_USER_AGENTS_DIR     User-global artifact directory
    INSTALLCHECK_PROJECT_AGENTS_DIR  Project-local artifact directory
    INSTALLCHECK_RUNTIME_BINARY      Binary probed on the host ("q")
    INSTALLCHECK_PROBE_MODE          "cli" (run a process) or "stub"
    INSTALLCHECK_PROBE_STUB_AVAILABLE  "1" makes the stub probe report the binary present
    INSTALLCHECK_PROBE_TIMEOUT       Probe timeout in seconds
    INSTALLCHECK_MAX_WORKERS         Concurrency for file and schema checks
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from installcheck.types import InstallLocation

logger = logging.getLogger(__name__)

_CONFIG_PATH = Path(__file__).parent / "validator.yaml"
_cached_config: Optional[Dict[str, Any]] = None

ENV_PREFIX = "INSTALLCHECK_"

# Sanity bounds for numeric settings
MIN_WORKERS = 1
MAX_WORKERS = 32
MIN_PROBE_TIMEOUT = 0.1
MAX_PROBE_TIMEOUT = 60.0

VALID_PROBE_MODES = ("cli", "stub")


@dataclass(frozen=True)
class ValidatorSettings:
    """Resolved settings for one validation run."""

    prefix: str = "bmad-"
    extension: str = ".json"
    location_paths: Dict[InstallLocation, str] = field(
        default_factory=lambda: {
            InstallLocation.USER: "~/.aws/amazonq/cli-agents/",
            InstallLocation.PROJECT: "./.amazonq/cli-agents/",
        }
    )
    source_candidates: Tuple[str, ...] = (".bmad-core/agents", "agents")
    source_suffix: str = ".md"
    context_root: str = ".bmad-core"
    context_agents_dir: str = "agents"
    project_files: Tuple[str, ...] = ("README.md", "package.json")
    kb_fragment: str = ".bmad-core"
    methodology_keyword: str = "BMAD"
    min_prompt_length: int = 50
    chat_command: str = "q chat --agent"
    chat_prefix: str = "q "
    switch_command: str = "/agent"
    switch_marker: str = "/"
    max_command_length: int = 100
    runtime_binary: str = "q"
    probe_mode: str = "cli"
    probe_timeout: float = 5.0
    probe_stub_available: bool = False
    max_workers: int = 4

    def location_path(self, location: InstallLocation) -> str:
        return self.location_paths[InstallLocation(location)]


def _default_config() -> Dict[str, Any]:
    """Return default configuration if validator.yaml doesn't exist."""
    return {
        "version": "1.0",
        "naming": {"prefix": "bmad-", "extension": ".json"},
        "locations": {
            "user": "~/.aws/amazonq/cli-agents/",
            "project": "./.amazonq/cli-agents/",
        },
        "sources": {"candidates": [".bmad-core/agents", "agents"], "suffix": ".md"},
        "context": {
            "root": ".bmad-core",
            "agents_dir": "agents",
            "project_files": ["README.md", "package.json"],
        },
        "schema": {
            "kb_fragment": ".bmad-core",
            "methodology_keyword": "BMAD",
            "min_prompt_length": 50,
        },
        "invocation": {
            "chat_command": "q chat --agent",
            "chat_prefix": "q ",
            "switch_command": "/agent",
            "switch_marker": "/",
            "max_command_length": 100,
        },
        "probe": {"binary": "q", "mode": "cli", "timeout_seconds": 5, "stub_available": False},
        "defaults": {"max_workers": 4},
    }


def _load_config() -> Dict[str, Any]:
    """Load validator.yaml configuration, with caching."""
    global _cached_config
    if _cached_config is not None:
        return _cached_config

    if _CONFIG_PATH.exists():
        with open(_CONFIG_PATH, encoding="utf-8") as f:
            _cached_config = yaml.safe_load(f) or {}
    else:
        _cached_config = _default_config()

    return _cached_config


def reset_config() -> None:
    """Reset cached config (for testing)."""
    global _cached_config
    _cached_config = None


def _section(config: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = config.get(name)
    return value if isinstance(value, dict) else {}


def _env(name: str) -> Optional[str]:
    value = os.environ.get(f"{ENV_PREFIX}{name}")
    return value if value else None


def _resolve_number(
    name: str,
    env_value: Optional[str],
    config_value: Any,
    default: float,
    min_val: float,
    max_val: float,
) -> float:
    """Resolve a numeric setting: env > config > default, clamped to bounds."""
    value = default
    if config_value is not None:
        try:
            value = float(config_value)
        except (TypeError, ValueError):
            logger.warning("Config value for '%s' is not numeric: %r. Using %s.", name, config_value, default)
    if env_value is not None:
        try:
            value = float(env_value)
        except ValueError:
            logger.warning(
                "Environment override %s%s=%r is not numeric. Keeping %s.",
                ENV_PREFIX,
                name.upper(),
                env_value,
                value,
            )

    if value < min_val:
        logger.warning("Setting '%s' value %s is below minimum %s. Clamping.", name, value, min_val)
        value = min_val
    elif value > max_val:
        logger.warning("Setting '%s' value %s exceeds maximum %s. Clamping.", name, value, max_val)
        value = max_val
    return value


def get_probe_mode(config: Optional[Dict[str, Any]] = None) -> str:
    """Get probe mode, respecting environment variable overrides.

    Precedence (highest to lowest):
    1. INSTALLCHECK_PROBE_MODE
    2. Config file value
    3. Default: "cli"
    """
    mode = _env("PROBE_MODE")
    if mode is None:
        mode = str(_section(config or _load_config(), "probe").get("mode") or "cli")
    mode = mode.lower()
    if mode not in VALID_PROBE_MODES:
        logger.warning("Unknown probe mode '%s' (expected one of %s). Using 'cli'.", mode, VALID_PROBE_MODES)
        return "cli"
    return mode


def load_settings(**overrides: Any) -> ValidatorSettings:
    """Resolve settings from config file and environment.

    Keyword overrides (field names of ValidatorSettings) win over everything,
    which keeps tests from touching the process environment.
    """
    config = _load_config()
    naming = _section(config, "naming")
    locations = _section(config, "locations")
    sources = _section(config, "sources")
    context = _section(config, "context")
    schema = _section(config, "schema")
    invocation = _section(config, "invocation")
    probe = _section(config, "probe")
    defaults = _section(config, "defaults")

    base = ValidatorSettings()

    location_paths = {
        InstallLocation.USER: _env("USER_AGENTS_DIR")
        or locations.get("user")
        or base.location_paths[InstallLocation.USER],
        InstallLocation.PROJECT: _env("PROJECT_AGENTS_DIR")
        or locations.get("project")
        or base.location_paths[InstallLocation.PROJECT],
    }

    stub_available_env = _env("PROBE_STUB_AVAILABLE")
    if stub_available_env is not None:
        stub_available = stub_available_env == "1"
    else:
        stub_available = bool(probe.get("stub_available", base.probe_stub_available))

    values: Dict[str, Any] = {
        "prefix": _env("PREFIX") or naming.get("prefix") or base.prefix,
        "extension": _env("EXTENSION") or naming.get("extension") or base.extension,
        "location_paths": location_paths,
        "source_candidates": tuple(sources.get("candidates") or base.source_candidates),
        "source_suffix": sources.get("suffix") or base.source_suffix,
        "context_root": context.get("root") or base.context_root,
        "context_agents_dir": context.get("agents_dir") or base.context_agents_dir,
        "project_files": tuple(context.get("project_files") or base.project_files),
        "kb_fragment": schema.get("kb_fragment") or base.kb_fragment,
        "methodology_keyword": schema.get("methodology_keyword") or base.methodology_keyword,
        "min_prompt_length": int(schema.get("min_prompt_length", base.min_prompt_length)),
        "chat_command": invocation.get("chat_command") or base.chat_command,
        "chat_prefix": invocation.get("chat_prefix") or base.chat_prefix,
        "switch_command": invocation.get("switch_command") or base.switch_command,
        "switch_marker": invocation.get("switch_marker") or base.switch_marker,
        "max_command_length": int(invocation.get("max_command_length", base.max_command_length)),
        "runtime_binary": _env("RUNTIME_BINARY") or probe.get("binary") or base.runtime_binary,
        "probe_mode": get_probe_mode(config),
        "probe_timeout": _resolve_number(
            "probe_timeout",
            _env("PROBE_TIMEOUT"),
            probe.get("timeout_seconds"),
            base.probe_timeout,
            MIN_PROBE_TIMEOUT,
            MAX_PROBE_TIMEOUT,
        ),
        "probe_stub_available": stub_available,
        "max_workers": int(
            _resolve_number(
                "max_workers",
                _env("MAX_WORKERS"),
                defaults.get("max_workers"),
                base.max_workers,
                MIN_WORKERS,
                MAX_WORKERS,
            )
        ),
    }
    values.update(overrides)

    logger.debug(
        "Resolved validator settings: prefix=%s, probe_mode=%s, max_workers=%s",
        values["prefix"],
        values["probe_mode"],
        values["max_workers"],
    )
    return ValidatorSettings(**values)


__all__ = [
    "ValidatorSettings",
    "get_probe_mode",
    "load_settings",
    "reset_config",
]
