from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from .errors import AmbiguousAttributeOverlapError, ValidationError
from .escaping import (
    DEFAULT_ESCAPE,
    EscapeRule,
    check_separator,
    name_ref,
    to_attribute_names,
    to_attribute_values,
    value_ref,
)
from .expression import CompiledExpression
from .keys import (
    DEFAULT_KEY_SEPARATOR,
    EMPTY_CATALOG,
    IndexCatalog,
    KeyValue,
    compose_key,
    partition_key_attribute,
)


@dataclass(frozen=True)
class BeginsWith:
    attribute: str
    value: KeyValue


@dataclass(frozen=True)
class FindRequest:
    predicates: Mapping[str, KeyValue] = field(default_factory=dict)
    index_name: str | None = None
    begins_with: BeginsWith | None = None
    limit: int | None = None
    sort_descending: bool = False
    exclusive_start_key: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        if self.limit is not None and (isinstance(self.limit, bool) or self.limit <= 0):
            raise ValidationError("limit must be > 0")
        object.__setattr__(self, "predicates", MappingProxyType(dict(self.predicates)))

    @property
    def scan_forward(self) -> bool:
        return not self.sort_descending

    @property
    def sort(self) -> str:
        return "DESC" if self.sort_descending else "ASC"


def indexed_predicates(
    request: FindRequest,
    indexes: IndexCatalog = EMPTY_CATALOG,
    *,
    separator: str = DEFAULT_KEY_SEPARATOR,
) -> Mapping[str, Any]:
    """Rewrite the predicates against the requested index, if it is known.

    A resolvable index replaces all predicates with a single equality on the
    composite partition key. Without one the predicates are returned as is.
    """
    index = indexes.resolve(request.index_name)
    if index is None:
        return request.predicates

    attribute = partition_key_attribute(index.columns, separator=separator)
    key = compose_key(index.columns, request.predicates, separator=separator, index_name=index.name)
    return {attribute: key}


def compile_key_condition(
    predicates: Mapping[str, Any],
    begins_with: BeginsWith | None = None,
    *,
    rule: EscapeRule = DEFAULT_ESCAPE,
) -> CompiledExpression:
    clauses = [f"{name_ref(name, rule)} = {value_ref(name, rule)}" for name in predicates]
    if begins_with is not None:
        if begins_with.attribute in predicates:
            raise AmbiguousAttributeOverlapError([begins_with.attribute])
        attr = begins_with.attribute
        clauses.append(f"begins_with({name_ref(attr, rule)}, {value_ref(attr, rule)})")

    if not clauses:
        return CompiledExpression(expression=None)

    return CompiledExpression(
        expression=" and ".join(clauses),
        attribute_names=to_attribute_names(predicates, begins_with, rule),
        attribute_values=to_attribute_values(predicates, begins_with, rule),
    )


def compile_find(
    request: FindRequest,
    indexes: IndexCatalog = EMPTY_CATALOG,
    *,
    separator: str = DEFAULT_KEY_SEPARATOR,
    rule: EscapeRule = DEFAULT_ESCAPE,
) -> CompiledExpression:
    check_separator(separator, rule)
    predicates = indexed_predicates(request, indexes, separator=separator)
    return compile_key_condition(predicates, request.begins_with, rule=rule)
