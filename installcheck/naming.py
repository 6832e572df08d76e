"""Canonical agent names and artifact filenames."""

from __future__ import annotations

DEFAULT_PREFIX = "bmad-"
DEFAULT_EXTENSION = ".json"


def canonical_agent_name(agent_id: str, prefix: str = DEFAULT_PREFIX) -> str:
    """Ensure ``agent_id`` carries the methodology prefix exactly once.

    >>> canonical_agent_name("architect")
    'bmad-architect'
    >>> canonical_agent_name("bmad-architect")
    'bmad-architect'
    """
    if agent_id.startswith(prefix):
        return agent_id
    return f"{prefix}{agent_id}"


def artifact_file_name(
    agent_id: str,
    prefix: str = DEFAULT_PREFIX,
    extension: str = DEFAULT_EXTENSION,
) -> str:
    """Filename of the persisted artifact for ``agent_id``."""
    return f"{canonical_agent_name(agent_id, prefix)}{extension}"
