"""Application orchestration entry points."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from lendrecord.adapters.files import load_observations, load_sources
from lendrecord.config import get_alias_config
from lendrecord.domain.canonicalize import (
    audit_field_fidelity,
    mapping_coverage,
    missing_fields,
    presence_set,
    to_canonical_record,
)
from lendrecord.domain.conflicts import (
    conflict_severity,
    consensus_value,
    group_conflicts,
    summarize_conflicts,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from lendrecord.config import AliasConfig
    from lendrecord.domain.canonicalize import (
        CanonicalRecord,
        FidelityReport,
        MappingCoverage,
    )
    from lendrecord.domain.conflicts import ConflictGroup, ConflictSummary


log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    record: CanonicalRecord
    missing: list[str]
    coverage: MappingCoverage | None

    def to_json(self) -> dict[str, object]:
        return {
            "record": self.record,
            "presence": sorted(presence_set(self.record)),
            "missing": self.missing,
            "coverage": None
            if self.coverage is None
            else {
                "recognized": list(self.coverage.recognized),
                "unmapped": list(self.coverage.unmapped),
                "coverage": self.coverage.coverage,
            },
        }


@dataclass(frozen=True, slots=True)
class ConflictReport:
    groups: dict[str, ConflictGroup]
    summary: ConflictSummary
    config: AliasConfig

    def to_json(self, *, only_conflicts: bool = False) -> dict[str, object]:
        groups: dict[str, object] = {}
        for column, group in self.groups.items():
            if only_conflicts and not group.conflict:
                continue
            payload = group.to_json()
            if group.conflict:
                payload["severity"] = str(
                    conflict_severity(
                        group,
                        critical_columns=self.config.critical_columns,
                        high_priority_columns=self.config.high_priority_columns,
                    )
                )
            payload["consensus"] = consensus_value(group)
            groups[column] = payload
        return {"groups": groups, "summary": self.summary.to_json()}


def resolve_sources(
    paths: Sequence[Path],
    *,
    required: Sequence[str] = (),
    config: AliasConfig | None = None,
) -> ResolutionResult:
    """Build the canonical record for source files given in precedence order."""

    effective_config = config or get_alias_config()
    log.info("Resolving canonical record from %d sources", len(paths))
    sources = load_sources(paths)
    record = to_canonical_record(sources, aliases=effective_config.table)
    coverage = mapping_coverage(sources[0], aliases=effective_config.table) if sources else None
    result = ResolutionResult(
        record=record,
        missing=missing_fields(required, record),
        coverage=coverage,
    )
    log.info(
        "Finished resolution: fields=%d, missing=%d",
        len(result.record),
        len(result.missing),
    )
    return result


def detect_conflicts(path: Path, *, config: AliasConfig | None = None) -> ConflictReport:
    """Group the observations stored in ``path`` and flag conflicting columns."""

    effective_config = config or get_alias_config()
    observations = load_observations(path)
    groups = group_conflicts(observations)
    summary = summarize_conflicts(
        groups,
        critical_columns=effective_config.critical_columns,
        high_priority_columns=effective_config.high_priority_columns,
    )
    log.info(
        "Finished conflict detection: observations=%d, columns=%d, conflicts=%d",
        len(observations),
        summary.columns,
        summary.conflicts,
    )
    return ConflictReport(groups=groups, summary=summary, config=effective_config)


def audit_fidelity(
    paths: Sequence[Path],
    *,
    accepted: Sequence[str],
    config: AliasConfig | None = None,
) -> FidelityReport:
    """Compare accepted schema fields against what the canonical record reaches."""

    effective_config = config or get_alias_config()
    record = to_canonical_record(load_sources(paths), aliases=effective_config.table)
    report = audit_field_fidelity(accepted, record)
    if report.unreachable:
        log.warning("Accepted fields never reached: %s", ", ".join(report.unreachable))
    return report
