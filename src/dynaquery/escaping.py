"""Placeholder escaping for DynamoDB expression attribute names and values.

DynamoDB expressions refer to attributes through ``#name`` and ``:value``
placeholders whose tokens may only hold ``[A-Za-z0-9_]``. ``#`` is the
placeholder sigil and the composite key separator, so the escaping rule
replaces it before the token is minted. Other characters outside that set
(spaces, ``-``, ``.``) are passed through unchanged; attributes named with
them must be avoided by the caller.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .errors import AmbiguousAttributeOverlapError, ValidationError
from .validation import validate_attribute_name

if TYPE_CHECKING:
    from .find import BeginsWith

_TOKEN_CHARS = re.compile(r"^[A-Za-z0-9_]*$")


@dataclass(frozen=True)
class EscapeRule:
    reserved: str = "#"
    replacement: str = "_"

    def __post_init__(self) -> None:
        if not self.reserved:
            raise ValueError("reserved character must be non-empty")
        if self.reserved in self.replacement:
            raise ValueError("replacement must not contain the reserved character")
        if _TOKEN_CHARS.match(self.replacement) is None:
            raise ValueError(f"replacement may only contain [A-Za-z0-9_]: {self.replacement!r}")

    def apply(self, name: str) -> str:
        return name.replace(self.reserved, self.replacement)


DEFAULT_ESCAPE = EscapeRule()


def check_separator(separator: str, rule: EscapeRule = DEFAULT_ESCAPE) -> None:
    """Reject a key separator the escaping rule would leave in placeholders."""
    if separator != rule.reserved:
        raise ValidationError(
            f"key separator {separator!r} must match the escaped character {rule.reserved!r}"
        )


def to_placeholder(name: str, rule: EscapeRule = DEFAULT_ESCAPE) -> str:
    return rule.apply(name)


def name_ref(name: str, rule: EscapeRule = DEFAULT_ESCAPE) -> str:
    return "#" + to_placeholder(validate_attribute_name(name), rule)


def value_ref(name: str, rule: EscapeRule = DEFAULT_ESCAPE) -> str:
    return ":" + to_placeholder(validate_attribute_name(name), rule)


def to_attribute_names(
    values: Mapping[str, Any] | None,
    begins_with: BeginsWith | None = None,
    rule: EscapeRule = DEFAULT_ESCAPE,
) -> dict[str, str]:
    """Build ``ExpressionAttributeNames`` for every key of ``values``.

    The ``begins_with`` attribute, when given, is included as well. Two
    different names that escape to the same placeholder cannot share one
    entry and are rejected.
    """
    names: dict[str, str] = {}
    for name in _names(values, begins_with):
        ref = name_ref(name, rule)
        existing = names.get(ref)
        if existing is not None and existing != name:
            raise AmbiguousAttributeOverlapError([existing, name])
        names[ref] = name
    return names


def to_attribute_values(
    values: Mapping[str, Any] | None,
    begins_with: BeginsWith | None = None,
    rule: EscapeRule = DEFAULT_ESCAPE,
) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for name, value in (values or {}).items():
        out[value_ref(name, rule)] = value
    if begins_with is not None:
        out[value_ref(begins_with.attribute, rule)] = begins_with.value
    return out


def _names(values: Mapping[str, Any] | None, begins_with: BeginsWith | None) -> list[str]:
    out = list((values or {}).keys())
    if begins_with is not None:
        out.append(begins_with.attribute)
    return out
