"""Read source documents and observations from JSON files."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from pydantic import TypeAdapter, ValidationError

from .schema import ObservationPayload

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from lendrecord.domain.conflicts import FieldObservation
    from lendrecord.domain.resolve import SourceDocument

_OBSERVATIONS = TypeAdapter(list[ObservationPayload])

log = logging.getLogger(__name__)


class InputError(ValueError):
    """Raised when an input file is missing or does not have the expected shape."""


def _read_json(path: Path) -> object:
    try:
        with path.open(encoding="utf-8") as handle:
            return json.load(handle)
    except OSError as exc:
        raise InputError(f"Cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise InputError(f"{path} is not valid JSON: {exc}") from exc


def load_sources(paths: Sequence[Path]) -> list[SourceDocument]:
    """Load one source document per file, keeping the given precedence order."""

    sources: list[SourceDocument] = []
    for path in paths:
        document = _read_json(path)
        if not isinstance(document, Mapping):
            raise InputError(f"{path} must contain a JSON object, got {type(document).__name__}")
        sources.append(document)
    log.debug("Loaded %d source documents", len(sources))
    return sources


def load_observations(path: Path) -> list[FieldObservation]:
    raw = _read_json(path)
    try:
        payloads = _OBSERVATIONS.validate_python(raw)
    except ValidationError as exc:
        raise InputError(f"{path} does not contain valid observations: {exc}") from exc
    return [payload.to_domain() for payload in payloads]
