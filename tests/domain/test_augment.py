from __future__ import annotations

import copy
from collections.abc import Iterator, Mapping

from lendrecord.domain.aliases import AliasTable
from lendrecord.domain.augment import (
    CANONICAL_PROPERTY,
    PresenceAugmenter,
    augment,
    is_application_record,
)

_APPLICATION = {
    "id": "app-1",
    "status": "submitted",
    "form_data": {"businessName": "Acme", "requestedAmount": 0},
}


def test_augment_adds_presence_without_touching_existing_properties() -> None:
    body = copy.deepcopy(_APPLICATION)
    snapshot = copy.deepcopy(body)

    augmented = augment(body, {"business_name": "Acme", "requested_amount": 0, "blank": ""})

    assert body == snapshot
    assert isinstance(augmented, dict)
    assert augmented[CANONICAL_PROPERTY] == {
        "presence": {"business_name": True, "requested_amount": True}
    }
    assert {key: augmented[key] for key in snapshot} == snapshot


def test_augment_handles_enveloped_application() -> None:
    body = {"success": True, "application": copy.deepcopy(_APPLICATION)}

    augmented = augment(body, {"business_name": "Acme"})

    assert isinstance(augmented, dict)
    assert augmented["success"] is True
    assert augmented["application"][CANONICAL_PROPERTY] == {"presence": {"business_name": True}}
    assert CANONICAL_PROPERTY not in body["application"]
    assert CANONICAL_PROPERTY not in augmented


def test_augment_leaves_unrecognised_bodies_untouched() -> None:
    bodies: list[object] = [
        None,
        "ok",
        [_APPLICATION],
        {"id": "app-1"},
        {"id": "", "status": "submitted"},
        {"success": True, "data": {"items": []}},
    ]

    for body in bodies:
        assert augment(body, {"business_name": "Acme"}) is body


class _ExplodingMapping(Mapping[str, object]):
    def __getitem__(self, key: str) -> object:
        if key == "id":
            return "app-1"
        if key == "status":
            return "submitted"
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        raise RuntimeError("cannot iterate")

    def __len__(self) -> int:
        return 2


def test_augment_swallows_failures() -> None:
    body = _ExplodingMapping()

    assert is_application_record(body)
    assert augment(body, {"business_name": "Acme"}) is body


def test_presence_augmenter_computes_record_from_application_sources() -> None:
    aliases = AliasTable.from_mapping(
        {
            "business_name": ["businessName"],
            "requested_amount": ["requestedAmount"],
            "status": ["status"],
            "province": ["businessState"],
        }
    )
    augmenter = PresenceAugmenter(aliases=aliases)

    augmented = augmenter(copy.deepcopy(_APPLICATION))

    assert isinstance(augmented, dict)
    assert augmented[CANONICAL_PROPERTY] == {
        "presence": {"business_name": True, "requested_amount": True, "status": True}
    }


def test_presence_augmenter_wraps_handlers() -> None:
    aliases = AliasTable.from_mapping({"business_name": ["businessName"]})
    augmenter = PresenceAugmenter(aliases=aliases)

    @augmenter.wrap
    def get_application(application_id: str) -> dict[str, object]:
        return {"application": {**copy.deepcopy(_APPLICATION), "id": application_id}}

    body = get_application("app-9")

    assert isinstance(body, dict)
    assert body["application"]["id"] == "app-9"
    assert body["application"][CANONICAL_PROPERTY] == {"presence": {"business_name": True}}
    assert get_application.__name__ == "get_application"


def test_presence_augmenter_survives_failing_source_lookup() -> None:
    def broken_sources(_application: Mapping[str, object]) -> list[Mapping[str, object]]:
        raise RuntimeError("database unavailable")

    augmenter = PresenceAugmenter(sources_for=broken_sources, aliases=AliasTable.from_mapping({}))
    body = copy.deepcopy(_APPLICATION)

    assert augmenter(body) is body
