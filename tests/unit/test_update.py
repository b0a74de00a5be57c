from __future__ import annotations

import pytest

from dynaquery import (
    AmbiguousAttributeOverlapError,
    EmptyAttributeNameError,
    UnsupportedUpdateTypeError,
    UpdateClause,
    UpdateClauseKind,
    UpdateRequest,
    ValidationError,
    compile_update,
    compile_update_clause,
    compile_update_expression,
)


def test_compile_update_set_and_add() -> None:
    compiled = compile_update(UpdateRequest(key={"id": "1"}, set_values={"a": 1}, add_values={"b": 2}))
    assert compiled.expression == "SET #a = :a ADD #b :b"
    assert compiled.attribute_names == {"#a": "a", "#b": "b"}
    assert compiled.attribute_values == {":a": 1, ":b": 2}


def test_compile_update_set_only_has_no_trailing_add() -> None:
    compiled = compile_update(UpdateRequest(key={"id": "1"}, set_values={"a": 1}))
    assert compiled.expression == "SET #a = :a"


def test_compile_update_add_only_omits_set_keyword() -> None:
    compiled = compile_update(UpdateRequest(key={"id": "1"}, add_values={"count": 1, "total": 5}))
    assert compiled.expression == "ADD #count :count, #total :total"
    assert compiled.attribute_values == {":count": 1, ":total": 5}


def test_compile_update_comma_joins_and_escapes() -> None:
    compiled = compile_update(
        UpdateRequest(key={"id": "1"}, set_values={"name": "x", "meta#v": 2}, add_values={"n#c": 1})
    )
    assert compiled.expression == "SET #name = :name, #meta_v = :meta_v ADD #n_c :n_c"
    assert compiled.attribute_names == {"#name": "name", "#meta_v": "meta#v", "#n_c": "n#c"}


def test_compile_update_rejects_overlap_between_set_and_add() -> None:
    with pytest.raises(AmbiguousAttributeOverlapError, match="count") as exc:
        compile_update(UpdateRequest(key={"id": "1"}, set_values={"count": 1}, add_values={"count": 2}))
    assert exc.value.names == ("count",)


def test_compile_update_rejects_overlap_after_escaping() -> None:
    with pytest.raises(AmbiguousAttributeOverlapError, match="a#b, a_b"):
        compile_update(UpdateRequest(key={"id": "1"}, set_values={"a#b": 1}, add_values={"a_b": 2}))
    with pytest.raises(AmbiguousAttributeOverlapError):
        compile_update(UpdateRequest(key={"id": "1"}, set_values={"a#b": 1, "a_b": 2}))


def test_compile_update_requires_values() -> None:
    with pytest.raises(ValidationError, match="no updates provided"):
        compile_update(UpdateRequest(key={"id": "1"}))


def test_update_request_requires_key() -> None:
    with pytest.raises(ValidationError, match="key is required"):
        UpdateRequest(key={}, set_values={"a": 1})


def test_compile_update_rejects_empty_attribute_name() -> None:
    with pytest.raises(EmptyAttributeNameError):
        compile_update(UpdateRequest(key={"id": "1"}, set_values={"": 1}))


@pytest.mark.parametrize("kind", [UpdateClauseKind.REMOVE, UpdateClauseKind.DELETE])
def test_unimplemented_clause_kinds_fail(kind: UpdateClauseKind) -> None:
    with pytest.raises(UnsupportedUpdateTypeError, match=f"update type is not supported yet: {kind.value}"):
        compile_update_clause(UpdateClause(kind, {"tags": {"a"}}))
    with pytest.raises(UnsupportedUpdateTypeError):
        compile_update_expression([UpdateClause(UpdateClauseKind.SET, {"a": 1}), UpdateClause(kind, {})])


def test_update_clause_kind_from_string() -> None:
    assert UpdateClause("ADD", {"a": 1}).kind is UpdateClauseKind.ADD  # type: ignore[arg-type]
    with pytest.raises(UnsupportedUpdateTypeError, match="APPEND"):
        UpdateClause("APPEND", {"a": 1})  # type: ignore[arg-type]


def test_compile_update_clause_empty_values_is_empty_string() -> None:
    assert compile_update_clause(UpdateClause(UpdateClauseKind.SET, {})) == ""


def test_compile_update_is_deterministic() -> None:
    request = UpdateRequest(key={"id": "1"}, set_values={"a": 1, "b": "x"}, add_values={"c": 3})
    assert compile_update(request) == compile_update(request)
