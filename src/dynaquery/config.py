from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, cast

import yaml

from .escaping import DEFAULT_ESCAPE, EscapeRule
from .keys import (
    DEFAULT_KEY_SEPARATOR,
    EMPTY_CATALOG,
    IndexCatalog,
    IndexColumn,
    IndexDefinition,
    IndexDefinitionError,
)

_KNOWN_FIELDS = frozenset({"table_prefix", "indexes", "key_separator", "escape"})
_KNOWN_ESCAPE_FIELDS = frozenset({"reserved", "replacement"})


class OptionsError(ValueError):
    pass


@dataclass(frozen=True)
class DriverOptions:
    table_prefix: str = ""
    indexes: Mapping[str, IndexCatalog] = field(default_factory=dict)
    key_separator: str = DEFAULT_KEY_SEPARATOR
    escape: EscapeRule = DEFAULT_ESCAPE
    client: Any | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.table_prefix, str):
            raise OptionsError("table_prefix must be a string")
        if not isinstance(self.key_separator, str) or not self.key_separator:
            raise OptionsError("key_separator must be a non-empty string")
        if self.key_separator != self.escape.reserved:
            raise OptionsError(
                f"key_separator {self.key_separator!r} must match escape.reserved {self.escape.reserved!r}"
            )
        for table, catalog in self.indexes.items():
            if not isinstance(catalog, IndexCatalog):
                raise OptionsError(f"indexes[{table}] must be an IndexCatalog")
        object.__setattr__(self, "indexes", MappingProxyType(dict(self.indexes)))

    def catalog(self, table: str) -> IndexCatalog:
        return self.indexes.get(table, EMPTY_CATALOG)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], *, client: Any | None = None) -> DriverOptions:
        if not isinstance(raw, Mapping):
            raise OptionsError("driver options must be a map/object")

        unknown = sorted(set(raw) - _KNOWN_FIELDS)
        if unknown:
            raise OptionsError(f"unknown driver options: {', '.join(map(str, unknown))}")

        table_prefix = raw.get("table_prefix") or ""
        key_separator = raw.get("key_separator", DEFAULT_KEY_SEPARATOR)

        try:
            return cls(
                table_prefix=table_prefix,
                indexes=_parse_indexes(raw.get("indexes") or {}),
                key_separator=key_separator,
                escape=_parse_escape(raw.get("escape")),
                client=client,
            )
        except (IndexDefinitionError, TypeError) as err:
            raise OptionsError(str(err)) from err


def load_driver_options(raw: str, *, client: Any | None = None) -> DriverOptions:
    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as err:
        raise OptionsError("invalid driver options YAML/JSON") from err

    if parsed is None:
        parsed = {}
    if not isinstance(parsed, dict):
        raise OptionsError("driver options must be a map/object")
    return DriverOptions.from_mapping(parsed, client=client)


def _parse_escape(raw: Any) -> EscapeRule:
    if raw is None:
        return DEFAULT_ESCAPE
    if not isinstance(raw, Mapping):
        raise OptionsError("escape must be a map")
    unknown = sorted(set(raw) - _KNOWN_ESCAPE_FIELDS)
    if unknown:
        raise OptionsError(f"unknown escape options: {', '.join(map(str, unknown))}")
    try:
        return EscapeRule(
            reserved=str(raw.get("reserved", DEFAULT_ESCAPE.reserved)),
            replacement=str(raw.get("replacement", DEFAULT_ESCAPE.replacement)),
        )
    except ValueError as err:
        raise OptionsError(str(err)) from err


def _parse_indexes(raw: Any) -> dict[str, IndexCatalog]:
    if not isinstance(raw, Mapping):
        raise OptionsError("indexes must be a map of table name to index list")

    out: dict[str, IndexCatalog] = {}
    for table, entries in raw.items():
        if isinstance(entries, IndexCatalog):
            out[str(table)] = entries
            continue
        if not isinstance(entries, list):
            raise OptionsError(f"indexes[{table}] must be a list")
        out[str(table)] = IndexCatalog.of(_parse_index(str(table), entry) for entry in entries)
    return out


def _parse_index(table: str, raw: Any) -> IndexDefinition:
    if isinstance(raw, IndexDefinition):
        return raw
    if not isinstance(raw, Mapping):
        raise OptionsError(f"indexes[{table}]: index must be a map")

    name = raw.get("name")
    if not isinstance(name, str) or not name:
        raise OptionsError(f"indexes[{table}]: index missing name")

    columns_raw = raw.get("columns")
    if not isinstance(columns_raw, list) or not columns_raw:
        raise OptionsError(f"indexes[{table}].{name}: columns must be a non-empty list")

    columns: list[IndexColumn] = []
    for col in columns_raw:
        if isinstance(col, str):
            columns.append(IndexColumn(property_name=col))
        elif isinstance(col, Mapping) and isinstance(col.get("property_name"), str):
            columns.append(IndexColumn(property_name=cast(str, col["property_name"])))
        else:
            raise OptionsError(f"indexes[{table}].{name}: invalid column: {col!r}")

    return IndexDefinition(name=name, columns=tuple(columns))
