"""Path resolution across ordered source documents.

Two levels of precedence apply when resolving a canonical field:

1) expression order, as declared in the alias table
2) source order within each expression (highest precedence first)

Traversal never raises: a missing key, an out-of-range index or descending
into a scalar all resolve to ``None`` (absent).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING

from lendrecord.config.aliases import get_alias_table

from .aliases import AliasDeclarationError, CompositePath, SimplePath, parse_expression
from .presence import is_present

if TYPE_CHECKING:
    from .aliases import AliasExpression, AliasTable

type SourceDocument = Mapping[str, object]

log = logging.getLogger(__name__)


def resolve_path(document: object, path: SimplePath | str) -> object | None:
    """Walk a dotted path through nested mappings and sequences."""

    segments = path.segments if isinstance(path, SimplePath) else tuple(path.split("."))
    current: object = document
    for segment in segments:
        if isinstance(current, Mapping):
            if segment not in current:
                return None
            current = current[segment]
        elif isinstance(current, list | tuple) and segment.isdecimal():
            index = int(segment)
            if index >= len(current):
                return None
            current = current[index]
        else:
            return None
    return current


def resolve_expression(
    expression: AliasExpression | str,
    sources: Sequence[SourceDocument],
) -> object | None:
    """Return the first present value for ``expression`` across ``sources``.

    Composite expressions resolve atomically: every part must be present
    (each part searched across all sources independently), otherwise the whole
    expression is absent.
    """

    if isinstance(expression, str):
        try:
            parsed = parse_expression(expression)
        except AliasDeclarationError as exc:
            log.debug("Treating malformed expression as absent: %s", exc)
            return None
    else:
        parsed = expression
    if isinstance(parsed, CompositePath):
        return _resolve_composite(parsed, sources)
    return _first_present(parsed, sources)


def resolve_canonical_field(
    field_key: str,
    sources: Sequence[SourceDocument],
    *,
    aliases: AliasTable | None = None,
) -> object | None:
    """Resolve one canonical field by trying its aliases in declared order."""

    table = aliases if aliases is not None else get_alias_table()
    expressions = table.get(field_key)
    if expressions is None:
        log.debug("No alias entry for canonical field %s", field_key)
        return None
    for expression in expressions:
        value = resolve_expression(expression, sources)
        if value is not None:
            return value
    return None


def _first_present(path: SimplePath, sources: Sequence[SourceDocument]) -> object | None:
    for source in sources:
        value = resolve_path(source, path)
        if is_present(value):
            return value
    return None


def _resolve_composite(
    expression: CompositePath,
    sources: Sequence[SourceDocument],
) -> str | None:
    pieces: list[str] = []
    for part in expression.parts:
        value = _first_present(part, sources)
        if value is None:
            return None
        pieces.append(_as_text(value))
    joined = " ".join(pieces).strip()
    return joined or None


def _as_text(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
