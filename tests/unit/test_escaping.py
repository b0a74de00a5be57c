from __future__ import annotations

import pytest

from dynaquery import (
    AmbiguousAttributeOverlapError,
    BeginsWith,
    EmptyAttributeNameError,
    EscapeRule,
    ValidationError,
    check_separator,
    name_ref,
    to_attribute_names,
    to_attribute_values,
    to_placeholder,
    value_ref,
)


def test_to_placeholder_replaces_every_pound() -> None:
    assert to_placeholder("tenantId#region#zone") == "tenantId_region_zone"
    assert to_placeholder("plain") == "plain"
    assert to_placeholder("") == ""


def test_refs_use_placeholder_sigils() -> None:
    assert name_ref("a#b") == "#a_b"
    assert value_ref("a#b") == ":a_b"


@pytest.mark.parametrize("bad", ["", None, 3])
def test_refs_reject_empty_or_non_string_names(bad: object) -> None:
    with pytest.raises(EmptyAttributeNameError):
        name_ref(bad)  # type: ignore[arg-type]
    with pytest.raises(EmptyAttributeNameError):
        value_ref(bad)  # type: ignore[arg-type]


def test_to_attribute_names_maps_each_placeholder_back_to_its_name() -> None:
    predicates = {"pk": "X", "tenantId#region": "t1#us", "status": "open"}
    names = to_attribute_names(predicates)

    assert names == {"#pk": "pk", "#tenantId_region": "tenantId#region", "#status": "status"}
    for name in predicates:
        assert names[name_ref(name)] == name


def test_to_attribute_names_includes_begins_with_attribute() -> None:
    names = to_attribute_names({"pk": "X"}, BeginsWith("sk", "Y"))
    assert names == {"#pk": "pk", "#sk": "sk"}


def test_to_attribute_names_rejects_names_that_escape_to_the_same_placeholder() -> None:
    with pytest.raises(AmbiguousAttributeOverlapError, match="a#b, a_b"):
        to_attribute_names({"a#b": 1, "a_b": 2})


def test_to_attribute_values_includes_begins_with_value() -> None:
    values = to_attribute_values({"pk": "X", "a#b": 2}, BeginsWith("sk", "Y"))
    assert values == {":pk": "X", ":a_b": 2, ":sk": "Y"}


def test_to_attribute_values_accepts_none() -> None:
    assert to_attribute_values(None) == {}
    assert to_attribute_names(None) == {}


def test_custom_escape_rule() -> None:
    rule = EscapeRule(reserved="#", replacement="__")
    assert to_placeholder("a#b", rule) == "a__b"
    assert to_attribute_names({"a#b": 1}, rule=rule) == {"#a__b": "a#b"}


def test_escape_rule_rejects_replacement_containing_reserved() -> None:
    with pytest.raises(ValueError, match="must not contain"):
        EscapeRule(reserved="#", replacement="x#")
    with pytest.raises(ValueError, match="non-empty"):
        EscapeRule(reserved="")


@pytest.mark.parametrize("replacement", ["-", ".", " ", "a|b"])
def test_escape_rule_rejects_replacement_outside_token_chars(replacement: str) -> None:
    with pytest.raises(ValueError, match="may only contain"):
        EscapeRule(replacement=replacement)


def test_check_separator() -> None:
    check_separator("#")
    check_separator("|", EscapeRule(reserved="|"))
    with pytest.raises(ValidationError, match="must match the escaped character"):
        check_separator("|")
