from __future__ import annotations

from typing import TYPE_CHECKING

from lendrecord.domain.resolve import (
    resolve_canonical_field,
    resolve_expression,
    resolve_path,
)

if TYPE_CHECKING:
    from lendrecord.domain.aliases import AliasTable


def test_resolve_path_walks_nested_mappings() -> None:
    document = {"business": {"address": {"city": "Calgary"}}}

    assert resolve_path(document, "business.address.city") == "Calgary"


def test_resolve_path_indexes_lists() -> None:
    document = {"owners": [{"name": "Jane"}, {"name": "Raj"}]}

    assert resolve_path(document, "owners.1.name") == "Raj"
    assert resolve_path(document, "owners.5.name") is None


def test_resolve_path_ignores_non_ascii_digit_segments() -> None:
    assert resolve_path({"owners": ["a"]}, "owners.²") is None


def test_resolve_path_never_raises_on_malformed_documents() -> None:
    document = {"business": "Acme", "count": 3, "owners": ["a"]}

    assert resolve_path(document, "business.name") is None
    assert resolve_path(document, "count.value") is None
    assert resolve_path(document, "owners.first") is None
    assert resolve_path(None, "anything") is None
    assert resolve_path(document, "missing.deeper.path") is None


def test_first_source_wins() -> None:
    sources = [{"x": {"y": "first"}}, {"x": {"y": "second"}}]

    assert resolve_expression("x.y", sources) == "first"


def test_absent_values_fall_through_to_later_sources() -> None:
    sources = [{"x": {"y": "   "}}, {"x": {"y": []}}, {"x": {"y": "third"}}]

    assert resolve_expression("x.y", sources) == "third"


def test_zero_is_a_resolved_value() -> None:
    sources = [{"amount": 0}, {"amount": 5000}]

    assert resolve_expression("amount", sources) == 0


def test_composite_joins_parts_resolved_from_different_sources() -> None:
    sources = [{"applicant": {"first": "  Jane"}}, {"applicant": {"last": "Doe"}}]

    assert resolve_expression("applicant.first + applicant.last", sources) == "Jane Doe"


def test_composite_is_atomic() -> None:
    sources = [{"applicant": {"first": "Jane"}}, {"applicant": {"last": ""}}]

    assert resolve_expression("applicant.first + applicant.last", sources) is None


def test_composite_formats_non_string_parts() -> None:
    sources = [{"unit": 12.0, "street": "Main St", "flag": True}]

    assert resolve_expression("unit + street + flag", sources) == "12 Main St true"


def test_canonical_field_uses_expression_order_before_source_order(
    alias_table: AliasTable,
) -> None:
    sources = [{"legal": {"name": "Acme Corp"}}, {"business": {"name": "Acme"}}]

    assert resolve_canonical_field("business_name", sources, aliases=alias_table) == "Acme"


def test_canonical_field_falls_back_to_later_expressions(alias_table: AliasTable) -> None:
    sources = [{"business": {}}, {"legal": {"name": "Acme Corp"}}]

    assert resolve_canonical_field("business_name", sources, aliases=alias_table) == "Acme Corp"


def test_malformed_expression_strings_are_absent() -> None:
    sources = [{"a": {"b": "value"}}]

    assert resolve_expression("a..b", sources) is None
    assert resolve_expression("", sources) is None
    assert resolve_expression("a + ", sources) is None


def test_unknown_canonical_field_is_absent(alias_table: AliasTable) -> None:
    sources = [{"anything": "value"}]

    assert resolve_canonical_field("not_declared", sources, aliases=alias_table) is None


def test_canonical_field_uses_default_table_when_none_given() -> None:
    sources = [{"legalName": "Acme Holdings Ltd."}]

    assert resolve_canonical_field("legal_name", sources) == "Acme Holdings Ltd."
