"""
Test fixtures and utilities for installation validator tests.

This module provides reusable fixtures for testing the validator, including
temporary install roots, agent source definitions, persisted artifacts, and
helper functions.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import pytest

from installcheck.config.validator_config import ENV_PREFIX, load_settings, reset_config
from installcheck.runtime.probe import StubProbe

AGENT_SOURCE_TEMPLATE = """# {agent_id}

ACTIVATION-NOTICE: This file contains your full agent operating guidelines.

```yaml
agent:
  name: Winston
  id: {agent_id}
  title: {title}
  whenToUse: Use for {agent_id} work
persona:
  role: Holistic {title}
```
"""

VALID_PROMPT = (
    "You are the BMAD Architect agent. Follow the BMAD methodology and "
    "consult the shared knowledge base before answering."
)


# ============================================================================
# Environment Isolation
# ============================================================================


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Isolate every test from INSTALLCHECK_* variables and the real HOME."""
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key, raising=False)
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    reset_config()
    yield
    reset_config()


@pytest.fixture
def home(tmp_path) -> Path:
    """The isolated HOME directory."""
    return tmp_path / "home"


@pytest.fixture
def settings():
    """Settings with a stub probe and a small worker pool."""
    return load_settings(probe_mode="stub", max_workers=2)


@pytest.fixture
def absent_probe():
    """Probe reporting the runtime binary missing."""
    return StubProbe(available=False)


# ============================================================================
# Install Root Fixtures
# ============================================================================


def create_agent_source(install_root: Path, agent_id: str, subdir: str = ".bmad-core/agents") -> Path:
    """Create an agent markdown source definition."""
    agents_dir = install_root / subdir
    agents_dir.mkdir(parents=True, exist_ok=True)
    path = agents_dir / f"{agent_id}.md"
    path.write_text(AGENT_SOURCE_TEMPLATE.format(agent_id=agent_id, title=agent_id.title()))
    return path


def valid_artifact(agent_id: str, **overrides: Any) -> Dict[str, Any]:
    """A schema-valid artifact with no warnings."""
    name = agent_id if agent_id.startswith("bmad-") else f"bmad-{agent_id}"
    data: Dict[str, Any] = {
        "name": name,
        "description": f"BMAD {agent_id} agent",
        "prompt": VALID_PROMPT,
        "tools": ["fs_read", "fs_write"],
        "resources": ["file://.bmad-core/**/*.md", "file://README.md"],
    }
    data.update(overrides)
    return data


def write_artifact(location_dir: Path, agent_id: str, data: Optional[Dict[str, Any]] = None, raw: Optional[str] = None) -> Path:
    """Persist an artifact file as the installer would."""
    location_dir.mkdir(parents=True, exist_ok=True)
    name = agent_id if agent_id.startswith("bmad-") else f"bmad-{agent_id}"
    path = location_dir / f"{name}.json"
    if raw is not None:
        path.write_text(raw)
    else:
        path.write_text(json.dumps(data if data is not None else valid_artifact(agent_id), indent=2))
    return path


@pytest.fixture
def install_root(tmp_path) -> Path:
    """
    Create an install root with shared context for one agent.

    Returns a Path with:
    - .bmad-core/agents/architect.md (source definition)
    - README.md
    - package.json
    """
    root = tmp_path / "project"
    root.mkdir()
    create_agent_source(root, "architect")
    (root / "README.md").write_text("# Project\n")
    (root / "package.json").write_text('{"name": "project"}\n')
    return root


@pytest.fixture
def user_dir(home) -> Path:
    """User-global artifact location under the isolated HOME."""
    return home / ".aws" / "amazonq" / "cli-agents"


@pytest.fixture
def project_dir(install_root) -> Path:
    """Project-local artifact location under the install root."""
    return install_root / ".amazonq" / "cli-agents"


@pytest.fixture
def installed(install_root, user_dir, project_dir) -> Path:
    """Install root with a valid 'architect' artifact at both locations."""
    write_artifact(user_dir, "architect")
    write_artifact(project_dir, "architect")
    return install_root
