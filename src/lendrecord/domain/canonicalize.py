"""Reduce ordered source documents to one canonical application record.

The canonical record is a flat ``field -> value`` mapping containing only the
fields whose resolved value is present. Values are taken from the source that
produced them without copying or wrapping.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from lendrecord.config.aliases import get_alias_table

from .presence import is_present
from .resolve import resolve_canonical_field

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .aliases import AliasTable
    from .resolve import SourceDocument

type CanonicalRecord = dict[str, object]

log = logging.getLogger(__name__)


def to_canonical_record(
    sources: Sequence[SourceDocument],
    *,
    aliases: AliasTable | None = None,
) -> CanonicalRecord:
    table = aliases if aliases is not None else get_alias_table()
    record: CanonicalRecord = {}
    for field_key in table:
        value = resolve_canonical_field(field_key, sources, aliases=table)
        if is_present(value):
            record[field_key] = value
    log.debug(
        "Resolved %d of %d canonical fields from %d sources",
        len(record),
        len(table),
        len(sources),
    )
    return record


def presence_set(record: Mapping[str, object]) -> frozenset[str]:
    return frozenset(key for key, value in record.items() if is_present(value))


def missing_fields(required_keys: Iterable[str], record: Mapping[str, object]) -> list[str]:
    """Return the required keys that the record does not provide, in request order."""

    return [key for key in required_keys if not is_present(record.get(key))]


def flatten_keys(obj: Mapping[str, object], prefix: str = "") -> list[str]:
    """Return every dotted leaf path of a nested mapping.

    Non-empty mappings are descended into; everything else (scalars, lists and
    empty mappings) is a leaf.
    """

    keys: list[str] = []
    for key, value in obj.items():
        path = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping) and value:
            keys.extend(flatten_keys(value, path))
        else:
            keys.append(path)
    return keys


@dataclass(frozen=True, slots=True)
class MappingCoverage:
    """How many top-level keys of a source the alias table knows about."""

    recognized: tuple[str, ...]
    unmapped: tuple[str, ...]
    coverage: float


def mapping_coverage(
    source: SourceDocument,
    *,
    aliases: AliasTable | None = None,
) -> MappingCoverage:
    table = aliases if aliases is not None else get_alias_table()
    roots = table.referenced_roots()
    recognized = tuple(key for key in source if key in roots)
    unmapped = tuple(key for key in source if key not in roots)
    coverage = round(len(recognized) / len(source) * 100, 2) if source else 0.0
    return MappingCoverage(recognized=recognized, unmapped=unmapped, coverage=coverage)


@dataclass(frozen=True, slots=True)
class FidelityReport:
    """Diff between the fields a record schema accepts and what is reachable."""

    accepted: tuple[str, ...]
    reachable: tuple[str, ...]
    unreachable: tuple[str, ...]
    unexpected: tuple[str, ...]

    @property
    def complete(self) -> bool:
        return not self.unreachable


def audit_field_fidelity(
    accepted_fields: Iterable[str],
    record: Mapping[str, object],
) -> FidelityReport:
    accepted = tuple(dict.fromkeys(accepted_fields))
    reachable = tuple(flatten_keys(record))
    reachable_set = set(reachable)
    accepted_set = set(accepted)
    return FidelityReport(
        accepted=accepted,
        reachable=reachable,
        unreachable=tuple(key for key in accepted if key not in reachable_set),
        unexpected=tuple(key for key in reachable if key not in accepted_set),
    )
