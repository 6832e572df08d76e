"""
generator.py - Artifact generator interface and default implementation.

The validator treats generation as a black box: it hands over an agent id and
the path of its source definition and gets configuration text back. The
default generator builds that text from a BMAD agent markdown file:

    ```yaml
    agent:
      name: Winston
      title: Architect
      whenToUse: Use for system design
    persona:
      role: Holistic System Architect
    ```

Any other generator can be injected into the pipeline instead.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from installcheck.naming import DEFAULT_PREFIX, canonical_agent_name

logger = logging.getLogger(__name__)

_YAML_BLOCK_RE = re.compile(r"```ya?ml\s*\n(.*?)\n```", re.DOTALL)

DEFAULT_TOOLS: List[str] = ["fs_read", "fs_write", "execute_bash", "use_aws", "report_issue"]
DEFAULT_RESOURCES: List[str] = ["file://.bmad-core/**/*.md", "file://README.md"]


class ArtifactGenerator(ABC):
    """Produces configuration content for one agent."""

    @abstractmethod
    def create_agent_config(self, agent_id: str, agent_path: Path, install_dir: Path) -> str:
        """Return configuration text for ``agent_id``.

        Raises:
            Exception: Any failure; the caller records it against the agent.
        """
        ...


class AgentConfigGenerator(ArtifactGenerator):
    """Builds an agent configuration YAML document from a markdown definition."""

    def __init__(
        self,
        prefix: str = DEFAULT_PREFIX,
        tools: Optional[List[str]] = None,
        resources: Optional[List[str]] = None,
    ):
        self._prefix = prefix
        self._tools = list(tools) if tools is not None else list(DEFAULT_TOOLS)
        self._resources = list(resources) if resources is not None else list(DEFAULT_RESOURCES)

    def _embedded_definition(self, content: str, agent_path: Path) -> Dict[str, Any]:
        match = _YAML_BLOCK_RE.search(content)
        if not match:
            return {}
        try:
            data = yaml.safe_load(match.group(1))
        except yaml.YAMLError as e:
            raise ValueError(f"Malformed YAML block in {agent_path.name}: {e}") from e
        return data if isinstance(data, dict) else {}

    def create_agent_config(self, agent_id: str, agent_path: Path, install_dir: Path) -> str:
        content = Path(agent_path).read_text(encoding="utf-8")
        definition = self._embedded_definition(content, Path(agent_path))

        agent = definition.get("agent") or {}
        persona = definition.get("persona") or {}
        name = canonical_agent_name(agent_id, self._prefix)
        title = agent.get("title") or agent_id.replace("-", " ").title()
        description = agent.get("whenToUse") or f"BMAD {title} agent"
        role = persona.get("role") or title

        prompt = (
            f"You are the BMAD {title} agent ({role}). "
            f"Follow the BMAD methodology and the agent definition below.\n\n"
            f"{content.strip()}\n"
        )

        config = {
            "name": name,
            "description": description,
            "prompt": prompt,
            "tools": list(self._tools),
            "resources": list(self._resources),
        }
        logger.debug("Generated config for %s from %s", name, agent_path)
        return yaml.safe_dump(config, sort_keys=False, allow_unicode=True)


__all__ = ["AgentConfigGenerator", "ArtifactGenerator", "DEFAULT_RESOURCES", "DEFAULT_TOOLS"]
