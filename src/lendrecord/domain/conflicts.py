"""Group per-source field observations and flag disagreements.

Observed values are normalized only to *decide* whether a column conflicts.
Each group keeps the raw observations (value and provenance) for review UIs
and carries the derived comparison keys alongside them.
"""

from __future__ import annotations

import logging
import math
import re
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime  # noqa: TC003
from decimal import Decimal
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable, Mapping

log = logging.getLogger(__name__)

# Only decimal amounts; bare digit strings (account numbers, postal codes) stay text.
_DECIMAL_AMOUNT = re.compile(r"[+-]?(?:0|[1-9]\d*)\.\d*")
LOW_CONFIDENCE_THRESHOLD = 0.5


@dataclass(frozen=True, slots=True, kw_only=True)
class FieldObservation:
    """One source's raw contribution to one canonical column."""

    column: str | None
    value: object
    source_type: str
    source_id: str | None = None
    label: str | None = None
    observed_at: datetime | None = None
    confidence: float | None = None

    def to_json(self) -> dict[str, object]:
        return {
            "column": self.column,
            "value": self.value,
            "sourceType": self.source_type,
            "sourceId": self.source_id,
            "label": self.label,
            "observedAt": self.observed_at.isoformat() if self.observed_at else None,
            "confidence": self.confidence,
        }


def comparison_key(value: object) -> str:
    """Normalize a value for equality comparison (never for display)."""

    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return f"{Decimal(value):.2f}"
    if isinstance(value, float):
        return "nan" if math.isnan(value) else f"{value:.2f}"
    text = " ".join(str(value).split())
    if _DECIMAL_AMOUNT.fullmatch(text):
        return f"{Decimal(text):.2f}"
    return text.lower()


@dataclass(frozen=True, slots=True)
class ConflictGroup:
    column: str
    values: tuple[FieldObservation, ...]
    comparison_keys: tuple[str, ...] = field(repr=False)

    @property
    def conflict(self) -> bool:
        return len(self.values) > 1 and len(set(self.comparison_keys)) > 1

    def to_json(self) -> dict[str, object]:
        return {
            "column": self.column,
            "values": [observation.to_json() for observation in self.values],
            "conflict": self.conflict,
        }


def group_conflicts(observations: Iterable[FieldObservation]) -> dict[str, ConflictGroup]:
    """Group observations by column in first-seen order."""

    grouped: dict[str, list[FieldObservation]] = {}
    for observation in observations:
        column = observation.column.strip() if observation.column else ""
        if not column:
            log.debug(
                "Skipping observation without column from source_type=%s source_id=%s",
                observation.source_type,
                observation.source_id,
            )
            continue
        grouped.setdefault(column, []).append(observation)

    groups = {
        column: ConflictGroup(
            column=column,
            values=tuple(entries),
            comparison_keys=tuple(comparison_key(entry.value) for entry in entries),
        )
        for column, entries in grouped.items()
    }
    conflicting = sum(1 for group in groups.values() if group.conflict)
    if conflicting:
        log.info("Detected %d conflicting columns out of %d", conflicting, len(groups))
    return groups


class ConflictSeverity(StrEnum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def conflict_severity(
    group: ConflictGroup,
    *,
    critical_columns: Collection[str] = frozenset(),
    high_priority_columns: Collection[str] = frozenset(),
) -> ConflictSeverity:
    """Rank a conflicting column: configured columns first, then by mean confidence."""

    if group.column in critical_columns:
        return ConflictSeverity.CRITICAL
    if group.column in high_priority_columns:
        return ConflictSeverity.HIGH
    confidences = [entry.confidence for entry in group.values if entry.confidence is not None]
    if confidences and sum(confidences) / len(confidences) < LOW_CONFIDENCE_THRESHOLD:
        return ConflictSeverity.MEDIUM
    return ConflictSeverity.LOW


def consensus_value(group: ConflictGroup) -> object | None:
    """Pick the value to show when one has to be chosen.

    Agreeing groups yield their first observation; conflicting groups yield the
    highest-confidence observation, earlier observations winning ties.
    """

    if not group.values:
        return None
    if not group.conflict:
        return group.values[0].value
    best = group.values[0]
    for entry in group.values[1:]:
        if (entry.confidence or 0.0) > (best.confidence or 0.0):
            best = entry
    return best.value


@dataclass(frozen=True, slots=True)
class ConflictSummary:
    columns: int
    conflicts: int
    by_severity: dict[ConflictSeverity, int]

    def to_json(self) -> dict[str, object]:
        return {
            "columns": self.columns,
            "conflicts": self.conflicts,
            "bySeverity": {str(severity): count for severity, count in self.by_severity.items()},
        }


def summarize_conflicts(
    groups: Mapping[str, ConflictGroup],
    *,
    critical_columns: Collection[str] = frozenset(),
    high_priority_columns: Collection[str] = frozenset(),
) -> ConflictSummary:
    severities = Counter(
        conflict_severity(
            group,
            critical_columns=critical_columns,
            high_priority_columns=high_priority_columns,
        )
        for group in groups.values()
        if group.conflict
    )
    return ConflictSummary(
        columns=len(groups),
        conflicts=sum(severities.values()),
        by_severity={severity: severities.get(severity, 0) for severity in ConflictSeverity},
    )
