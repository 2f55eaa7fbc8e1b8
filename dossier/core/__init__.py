"""Dossier core - configuration loading and validation."""

from .config import DEFAULT_CONFIG, HeuristicsConfig, load_config, load_raw_config
from .config_validator import ConfigError, Severity, has_errors, validate_config

__all__ = [
    "DEFAULT_CONFIG",
    "HeuristicsConfig",
    "load_config",
    "load_raw_config",
    "ConfigError",
    "Severity",
    "has_errors",
    "validate_config",
]
