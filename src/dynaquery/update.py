from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from .errors import AmbiguousAttributeOverlapError, UnsupportedUpdateTypeError, ValidationError
from .escaping import DEFAULT_ESCAPE, EscapeRule, name_ref, value_ref
from .expression import CompiledExpression


class UpdateClauseKind(StrEnum):
    SET = "SET"
    ADD = "ADD"
    REMOVE = "REMOVE"
    DELETE = "DELETE"


type ClauseRule = Callable[[str, str], str]

# One rule per clause kind. REMOVE and DELETE have no rule yet and raise
# UnsupportedUpdateTypeError when compiled.
_CLAUSE_RULES: dict[UpdateClauseKind, ClauseRule] = {
    UpdateClauseKind.SET: lambda name, value: f"{name} = {value}",
    UpdateClauseKind.ADD: lambda name, value: f"{name} {value}",
}


def _clause_kind(kind: UpdateClauseKind | str) -> UpdateClauseKind:
    try:
        return UpdateClauseKind(kind)
    except ValueError as err:
        raise UnsupportedUpdateTypeError(str(kind)) from err


@dataclass(frozen=True)
class UpdateClause:
    kind: UpdateClauseKind
    values: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", _clause_kind(self.kind))
        object.__setattr__(self, "values", MappingProxyType(dict(self.values or {})))


@dataclass(frozen=True)
class UpdateRequest:
    key: Mapping[str, Any]
    set_values: Mapping[str, Any] = field(default_factory=dict)
    add_values: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.key:
            raise ValidationError("key is required")
        object.__setattr__(self, "key", MappingProxyType(dict(self.key)))
        object.__setattr__(self, "set_values", MappingProxyType(dict(self.set_values or {})))
        object.__setattr__(self, "add_values", MappingProxyType(dict(self.add_values or {})))

    def clauses(self) -> tuple[UpdateClause, ...]:
        return (
            UpdateClause(UpdateClauseKind.SET, self.set_values),
            UpdateClause(UpdateClauseKind.ADD, self.add_values),
        )


def compile_update_clause(clause: UpdateClause, *, rule: EscapeRule = DEFAULT_ESCAPE) -> str:
    build = _CLAUSE_RULES.get(clause.kind)
    if build is None:
        raise UnsupportedUpdateTypeError(clause.kind.value)
    if not clause.values:
        return ""
    parts = [build(name_ref(name, rule), value_ref(name, rule)) for name in clause.values]
    return f"{clause.kind.value} " + ", ".join(parts)


def compile_update_expression(
    clauses: Sequence[UpdateClause],
    *,
    rule: EscapeRule = DEFAULT_ESCAPE,
) -> CompiledExpression:
    """Compile update clauses into one ``UpdateExpression``.

    Every attribute may appear once across all clauses. The same name in two
    clauses (or two names escaping to one placeholder) would make the value
    placeholders collide, so it is rejected rather than merged.
    """
    names: dict[str, str] = {}
    values: dict[str, Any] = {}
    parts: list[str] = []

    for clause in clauses:
        compiled = compile_update_clause(clause, rule=rule)
        for name, value in clause.values.items():
            ref = name_ref(name, rule)
            if ref in names:
                raise AmbiguousAttributeOverlapError([names[ref], name])
            names[ref] = name
            values[value_ref(name, rule)] = value
        if compiled:
            parts.append(compiled)

    if not parts:
        raise ValidationError("no updates provided")

    return CompiledExpression(
        expression=" ".join(parts),
        attribute_names=names,
        attribute_values=values,
    )


def compile_update(request: UpdateRequest, *, rule: EscapeRule = DEFAULT_ESCAPE) -> CompiledExpression:
    return compile_update_expression(request.clauses(), rule=rule)
