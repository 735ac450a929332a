"""Alias table primitives.

An alias table maps each canonical field to an ordered tuple of lookup
expressions. Expressions are parsed once, when the table is built, into one of
two shapes:

- ``SimplePath``: a dotted path such as ``business.legal_name``
- ``CompositePath``: two or more dotted paths joined by ``" + "`` whose
  resolved values are concatenated (``applicant.first + applicant.last``)

Declaration order is precedence: earlier expressions are tried across every
source before later ones.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

COMPOSITE_SEPARATOR = " + "
PATH_SEPARATOR = "."


class AliasDeclarationError(ValueError):
    """Raised when an alias declaration is malformed."""


@dataclass(frozen=True, slots=True)
class SimplePath:
    segments: tuple[str, ...]

    def __str__(self) -> str:
        return PATH_SEPARATOR.join(self.segments)

    @property
    def root(self) -> str:
        return self.segments[0]


@dataclass(frozen=True, slots=True)
class CompositePath:
    parts: tuple[SimplePath, ...]

    def __str__(self) -> str:
        return COMPOSITE_SEPARATOR.join(str(part) for part in self.parts)


type AliasExpression = SimplePath | CompositePath


def parse_path(text: str) -> SimplePath:
    """Parse one dotted path, rejecting empty segments."""

    segments = tuple(segment.strip() for segment in text.split(PATH_SEPARATOR))
    if not segments or any(not segment for segment in segments):
        raise AliasDeclarationError(f"Invalid alias path: {text!r}")
    return SimplePath(segments=segments)


def parse_expression(text: str) -> AliasExpression:
    """Parse an alias expression string into its structured form."""

    if COMPOSITE_SEPARATOR not in text:
        return parse_path(text)
    parts = tuple(parse_path(part) for part in text.split(COMPOSITE_SEPARATOR))
    return CompositePath(parts=parts)


def expression_paths(expression: AliasExpression) -> tuple[SimplePath, ...]:
    if isinstance(expression, CompositePath):
        return expression.parts
    return (expression,)


@dataclass(frozen=True, slots=True)
class AliasTable(Mapping[str, tuple[AliasExpression, ...]]):
    """Read-only mapping from canonical field name to its lookup expressions."""

    entries: Mapping[str, tuple[AliasExpression, ...]]

    @classmethod
    def from_mapping(cls, declarations: Mapping[str, Iterable[str]]) -> AliasTable:
        """Build a table from raw ``field -> [expression, ...]`` declarations."""

        entries: dict[str, tuple[AliasExpression, ...]] = {}
        for name, expressions in declarations.items():
            field_name = name.strip()
            if not field_name:
                raise AliasDeclarationError("Alias table contains a blank canonical field name")
            if field_name in entries:
                raise AliasDeclarationError(f"Duplicate canonical field: {field_name}")
            if isinstance(expressions, str):
                raise AliasDeclarationError(
                    f"Aliases for {field_name} must be a list of expressions, not a string"
                )
            # An empty alias list declares a field that never resolves.
            entries[field_name] = tuple(parse_expression(text) for text in expressions)
        return cls(entries=MappingProxyType(entries))

    def __getitem__(self, key: str) -> tuple[AliasExpression, ...]:
        return self.entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def referenced_roots(self) -> frozenset[str]:
        """Return every first path segment referenced by any expression."""

        return frozenset(
            path.root
            for expressions in self.entries.values()
            for expression in expressions
            for path in expression_paths(expression)
        )
