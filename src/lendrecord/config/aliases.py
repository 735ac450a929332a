"""Alias table configuration.

The alias table is static configuration: it is read from a TOML document once
per process and never mutated afterwards. A default table ships with the
package; ``LENDRECORD_ALIAS_TABLE`` points at an alternative file.

Document layout::

    [aliases]
    legal_name = ["legalName", "Legal Name"]
    applicant_name = ["applicantFirstName + applicantLastName"]

    [conflicts]
    critical = ["legal_name"]
    high = ["business_street"]
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass
from functools import cache
from importlib import resources
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from lendrecord.domain.aliases import AliasDeclarationError, AliasTable

from .env import optional_env_var
from .errors import AliasTableError

ALIAS_TABLE_ENV_VAR: Final[str] = "LENDRECORD_ALIAS_TABLE"
DEFAULT_ALIAS_RESOURCE: Final[str] = "aliases.toml"

log = logging.getLogger(__name__)


class ConflictColumnsDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    critical: list[str] = Field(default_factory=list)
    high: list[str] = Field(default_factory=list)


class AliasTableDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    aliases: dict[str, list[str]]
    conflicts: ConflictColumnsDocument = Field(default_factory=ConflictColumnsDocument)


@dataclass(frozen=True, slots=True)
class AliasConfig:
    """Where the alias table is read from and how conflicts are ranked."""

    path: Path | None
    table: AliasTable
    critical_columns: frozenset[str] = frozenset()
    high_priority_columns: frozenset[str] = frozenset()


def parse_alias_document(text: str, *, origin: str = "<string>") -> AliasTableDocument:
    try:
        raw = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise AliasTableError(f"Alias table {origin} is not valid TOML: {exc}") from exc
    try:
        return AliasTableDocument.model_validate(raw)
    except ValidationError as exc:
        raise AliasTableError(f"Alias table {origin} has an invalid layout: {exc}") from exc


def load_alias_config(path: Path | None = None) -> AliasConfig:
    """Read and parse an alias table document.

    ``path=None`` reads the table bundled with the package.
    """

    if path is None:
        origin = f"package:{DEFAULT_ALIAS_RESOURCE}"
        text = resources.files(__package__).joinpath(DEFAULT_ALIAS_RESOURCE).read_text("utf-8")
    else:
        origin = str(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise AliasTableError(f"Cannot read alias table {origin}: {exc}") from exc

    document = parse_alias_document(text, origin=origin)
    try:
        table = AliasTable.from_mapping(document.aliases)
    except AliasDeclarationError as exc:
        raise AliasTableError(f"Alias table {origin}: {exc}") from exc

    log.info("Loaded alias table %s with %d canonical fields", origin, len(table))
    return AliasConfig(
        path=path,
        table=table,
        critical_columns=frozenset(document.conflicts.critical),
        high_priority_columns=frozenset(document.conflicts.high),
    )


@cache
def get_alias_config() -> AliasConfig:
    env_path = optional_env_var(ALIAS_TABLE_ENV_VAR)
    return load_alias_config(Path(env_path).expanduser() if env_path else None)


def get_alias_table() -> AliasTable:
    return get_alias_config().table
