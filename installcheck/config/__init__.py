"""Validator configuration."""

from installcheck.config.validator_config import (
    ValidatorSettings,
    get_probe_mode,
    load_settings,
    reset_config,
)

__all__ = ["ValidatorSettings", "get_probe_mode", "load_settings", "reset_config"]
