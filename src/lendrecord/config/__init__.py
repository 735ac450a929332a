"""Application configuration helpers."""

from __future__ import annotations

from .aliases import (
    ALIAS_TABLE_ENV_VAR,
    AliasConfig,
    get_alias_config,
    get_alias_table,
    load_alias_config,
)
from .env import optional_env_var
from .errors import AliasTableError, ConfigurationError

__all__ = [
    "ALIAS_TABLE_ENV_VAR",
    "AliasConfig",
    "AliasTableError",
    "ConfigurationError",
    "get_alias_config",
    "get_alias_table",
    "load_alias_config",
    "optional_env_var",
]
