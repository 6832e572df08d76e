"""Host environment access for the validator."""

from installcheck.runtime.probe import (
    EnvironmentProbe,
    ProbeOutcome,
    StubProbe,
    SubprocessProbe,
    create_probe,
)

__all__ = ["EnvironmentProbe", "ProbeOutcome", "StubProbe", "SubprocessProbe", "create_probe"]
