"""Attach canonical presence annotations to outgoing response bodies.

Augmentation is best-effort and purely additive: a recognised application
body gets a side-channel ``__canonical`` property listing which canonical
fields are present. Anything unrecognised is returned untouched, and any
failure while augmenting yields the original body.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final, TypeGuard, cast

from lendrecord.config.aliases import get_alias_table

from .canonicalize import presence_set, to_canonical_record
from .presence import is_present

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .aliases import AliasTable
    from .resolve import SourceDocument

CANONICAL_PROPERTY: Final[str] = "__canonical"
ENVELOPE_PROPERTIES: Final[tuple[str, ...]] = ("application", "data")
APPLICATION_MARKERS: Final[tuple[str, ...]] = (
    "status",
    "stage",
    "form_data",
    "businessName",
    "legalBusinessName",
    "requestedAmount",
)

type SourcesFor = Callable[[Mapping[str, object]], Sequence[SourceDocument]]

log = logging.getLogger(__name__)


def is_application_record(value: object) -> TypeGuard[Mapping[str, object]]:
    if not isinstance(value, Mapping):
        return False
    if not is_present(value.get("id")):
        return False
    return any(is_present(value.get(marker)) for marker in APPLICATION_MARKERS)


def find_application(body: object) -> tuple[str | None, Mapping[str, object]] | None:
    """Locate the application record in a body.

    Returns ``(envelope_property, application)`` where the property is ``None``
    when the body itself is the application.
    """

    if is_application_record(body):
        return None, body
    if isinstance(body, Mapping):
        for name in ENVELOPE_PROPERTIES:
            candidate = body.get(name)
            if is_application_record(candidate):
                return name, candidate
    return None


def augment(body: object, record: Mapping[str, object]) -> object:
    """Return ``body`` with a presence annotation on its application record."""

    try:
        located = find_application(body)
        if located is None:
            return body
        envelope, application = located
        annotated = {
            **application,
            CANONICAL_PROPERTY: {"presence": dict.fromkeys(sorted(presence_set(record)), True)},
        }
        if envelope is None:
            return annotated
        return {**cast("Mapping[str, object]", body), envelope: annotated}
    except Exception:  # noqa: BLE001
        log.warning("Presence augmentation failed; returning body unchanged", exc_info=True)
        return body


def default_sources(application: Mapping[str, object]) -> list[SourceDocument]:
    """Use the submitted form first, then the application row itself."""

    sources: list[SourceDocument] = []
    form_data = application.get("form_data")
    if isinstance(form_data, Mapping):
        sources.append(form_data)
    sources.append(application)
    return sources


@dataclass(frozen=True, slots=True, kw_only=True)
class PresenceAugmenter:
    """Explicit response post-processing step computing presence on demand."""

    sources_for: SourcesFor = default_sources
    aliases: AliasTable | None = None

    def __call__(self, body: object) -> object:
        try:
            located = find_application(body)
            if located is None:
                return body
            _, application = located
            table = self.aliases if self.aliases is not None else get_alias_table()
            record = to_canonical_record(self.sources_for(application), aliases=table)
        except Exception:  # noqa: BLE001
            log.warning("Canonical record computation failed; skipping augmentation", exc_info=True)
            return body
        return augment(body, record)

    def wrap[**P](self, handler: Callable[P, object]) -> Callable[P, object]:
        """Compose the augmenter after ``handler``."""

        @functools.wraps(handler)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> object:
            return self(handler(*args, **kwargs))

        return wrapper
