"""Pydantic models for field observation payloads."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lendrecord.domain.conflicts import FieldObservation


class ObservationPayload(BaseModel):
    """One observation as produced by audit tooling (camelCase JSON)."""

    model_config = ConfigDict(extra="ignore")

    column: str | None = None
    value: Any = None
    source_type: str = Field(alias="sourceType")
    source_id: str | None = Field(default=None, alias="sourceId")
    label: str | None = None
    observed_at: datetime | None = Field(default=None, alias="observedAt")
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)

    @field_validator("source_id", mode="before")
    @classmethod
    def _coerce_source_id(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    def to_domain(self) -> FieldObservation:
        return FieldObservation(
            column=self.column,
            value=self.value,
            source_type=self.source_type,
            source_id=self.source_id,
            label=self.label,
            observed_at=self.observed_at,
            confidence=self.confidence,
        )
