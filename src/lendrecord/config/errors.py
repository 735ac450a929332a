"""Configuration error definitions."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when configuration values are invalid."""


class AliasTableError(ConfigurationError):
    """Raised when an alias table document cannot be loaded or parsed."""
