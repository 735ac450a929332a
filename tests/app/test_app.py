from __future__ import annotations

import json
from typing import TYPE_CHECKING

from lendrecord.app import detect_conflicts, resolve_sources
from lendrecord.config import AliasConfig
from lendrecord.domain.aliases import AliasTable

if TYPE_CHECKING:
    from pathlib import Path


def _config() -> AliasConfig:
    return AliasConfig(
        path=None,
        table=AliasTable.from_mapping(
            {
                "businessName": ["business.name", "legal.name"],
                "fullName": ["applicant.first + applicant.last"],
            }
        ),
        critical_columns=frozenset({"businessName"}),
    )


def test_resolve_sources_uses_given_config(tmp_path: Path) -> None:
    first = tmp_path / "first.json"
    first.write_text(json.dumps({"business": {"name": "Acme"}}), encoding="utf-8")
    second = tmp_path / "second.json"
    second.write_text(
        json.dumps({"legal": {"name": "Acme Corp"}, "applicant": {"first": "Jane"}}),
        encoding="utf-8",
    )

    result = resolve_sources([first, second], required=["fullName"], config=_config())

    assert result.record == {"businessName": "Acme"}
    assert result.missing == ["fullName"]
    assert result.coverage is not None
    assert result.coverage.coverage == 100.0
    assert result.to_json()["presence"] == ["businessName"]


def test_detect_conflicts_reports_severity_and_consensus(tmp_path: Path) -> None:
    path = tmp_path / "observations.json"
    path.write_text(
        json.dumps(
            [
                {"column": "businessName", "value": "Acme", "sourceType": "form"},
                {
                    "column": "businessName",
                    "value": "Acme Corp",
                    "sourceType": "ocr",
                    "confidence": 0.9,
                },
            ]
        ),
        encoding="utf-8",
    )

    report = detect_conflicts(path, config=_config())
    payload = report.to_json()

    group = payload["groups"]["businessName"]  # type: ignore[index]
    assert group["conflict"] is True
    assert group["severity"] == "critical"
    assert group["consensus"] == "Acme Corp"
    assert report.summary.conflicts == 1
