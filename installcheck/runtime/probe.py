"""
probe.py - Environment capability probes.

The validator never executes agents; the only host interaction is asking
whether the runtime binary is installed. That question goes through an
EnvironmentProbe so tests (and hosts that differ from the eventual runtime
host) can substitute a stub.

Usage:
    from installcheck.runtime.probe import create_probe

    probe = create_probe(settings)
    outcome = probe.find_binary("q", timeout=5)
    if not outcome.available:
        print(outcome.detail)
"""

from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from installcheck.config.validator_config import ValidatorSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbeOutcome:
    """Result of one capability probe."""

    available: bool
    detail: str
    path: Optional[str] = None


class EnvironmentProbe(ABC):
    """Answers questions about the executing host."""

    @property
    @abstractmethod
    def probe_id(self) -> str:
        """Identifier for logs and reports."""
        ...

    @abstractmethod
    def find_binary(self, name: str, timeout: float) -> ProbeOutcome:
        """Report whether ``name`` is on PATH. Must not raise."""
        ...


class SubprocessProbe(EnvironmentProbe):
    """Looks up binaries with ``which`` in a child process."""

    def __init__(self, lookup_command: str = "which"):
        self._lookup_command = lookup_command

    @property
    def probe_id(self) -> str:
        return "subprocess"

    def find_binary(self, name: str, timeout: float) -> ProbeOutcome:
        try:
            result = subprocess.run(
                [self._lookup_command, name],
                capture_output=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            logger.debug("Binary probe for '%s' timed out after %ss", name, timeout)
            return ProbeOutcome(
                available=False,
                detail=f"lookup of '{name}' timed out after {timeout}s",
            )
        except OSError as e:
            logger.debug("Binary probe for '%s' could not run: %s", name, e)
            return ProbeOutcome(available=False, detail=f"lookup of '{name}' failed: {e}")

        if result.returncode != 0:
            return ProbeOutcome(available=False, detail=f"'{name}' not found in PATH")

        path = result.stdout.decode(errors="replace").strip()
        return ProbeOutcome(available=True, detail=f"'{name}' found in PATH", path=path or None)


class StubProbe(EnvironmentProbe):
    """Probe with a fixed answer; no process execution."""

    def __init__(self, available: bool = False, path: Optional[str] = None):
        self._available = available
        self._path = path

    @property
    def probe_id(self) -> str:
        return "stub"

    def find_binary(self, name: str, timeout: float) -> ProbeOutcome:
        if self._available:
            return ProbeOutcome(
                available=True,
                detail=f"'{name}' reported present (stub probe)",
                path=self._path,
            )
        return ProbeOutcome(available=False, detail=f"'{name}' not found in PATH (stub probe)")


def create_probe(settings: "ValidatorSettings") -> EnvironmentProbe:
    """Build the probe selected by ``settings.probe_mode``."""
    if settings.probe_mode == "stub":
        return StubProbe(available=settings.probe_stub_available)
    return SubprocessProbe()


__all__ = [
    "EnvironmentProbe",
    "ProbeOutcome",
    "StubProbe",
    "SubprocessProbe",
    "create_probe",
]
