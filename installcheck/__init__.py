"""Post-install validation for generated agent configuration artifacts."""

from installcheck.pipeline import InstallationValidator, run_validation
from installcheck.types import InstallLocation, ValidationResults

__version__ = "1.0.0"

__all__ = ["InstallLocation", "InstallationValidator", "ValidationResults", "run_validation", "__version__"]
