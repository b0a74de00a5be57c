from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from .errors import MissingKeyComponentError, ValidationError

DEFAULT_KEY_SEPARATOR = "#"

type KeyValue = str | bytes | bytearray | int | float | Decimal


class IndexDefinitionError(ValueError):
    pass


@dataclass(frozen=True)
class IndexColumn:
    property_name: str

    def __post_init__(self) -> None:
        if not self.property_name:
            raise IndexDefinitionError("index column property_name must be non-empty")


@dataclass(frozen=True)
class IndexDefinition:
    name: str
    columns: tuple[IndexColumn, ...]

    def __post_init__(self) -> None:
        if not self.name:
            raise IndexDefinitionError("index name must be non-empty")
        if not self.columns:
            raise IndexDefinitionError(f"index {self.name}: at least one column is required")
        seen: set[str] = set()
        for column in self.columns:
            if column.property_name in seen:
                raise IndexDefinitionError(f"index {self.name}: duplicate column: {column.property_name}")
            seen.add(column.property_name)

    @property
    def property_names(self) -> tuple[str, ...]:
        return tuple(c.property_name for c in self.columns)


def gsi(name: str, *columns: str | IndexColumn) -> IndexDefinition:
    return IndexDefinition(
        name=name,
        columns=tuple(c if isinstance(c, IndexColumn) else IndexColumn(property_name=c) for c in columns),
    )


@dataclass(frozen=True)
class IndexCatalog:
    indexes: tuple[IndexDefinition, ...] = ()
    _by_name: Mapping[str, IndexDefinition] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        by_name: dict[str, IndexDefinition] = {}
        for index in self.indexes:
            if index.name in by_name:
                raise IndexDefinitionError(f"duplicate index name: {index.name}")
            by_name[index.name] = index
        object.__setattr__(self, "_by_name", by_name)

    @classmethod
    def of(cls, indexes: Iterable[IndexDefinition]) -> IndexCatalog:
        return cls(indexes=tuple(indexes))

    def resolve(self, name: str | None) -> IndexDefinition | None:
        if name is None:
            return None
        return self._by_name.get(name)

    def __iter__(self) -> Iterator[IndexDefinition]:
        return iter(self.indexes)

    def __len__(self) -> int:
        return len(self.indexes)


EMPTY_CATALOG = IndexCatalog()


def partition_key_attribute(
    columns: Sequence[IndexColumn], *, separator: str = DEFAULT_KEY_SEPARATOR
) -> str:
    return separator.join(c.property_name for c in columns)


def compose_key(
    columns: Sequence[IndexColumn],
    row: Mapping[str, Any],
    *,
    separator: str = DEFAULT_KEY_SEPARATOR,
    index_name: str | None = None,
) -> str:
    """Join the row's values for ``columns`` into one composite key.

    Segments follow the declared column order exactly. A column that is
    absent from ``row`` (or ``None``) raises ``MissingKeyComponentError``.
    """
    parts: list[str] = []
    for column in columns:
        value = row.get(column.property_name)
        if value is None:
            raise MissingKeyComponentError(column=column.property_name, index_name=index_name)
        parts.append(_key_segment(column.property_name, value))
    return separator.join(parts)


def _key_segment(column: str, value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        raise ValidationError(f"unsupported key component type for {column}: bool")
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        try:
            return bytes(value).decode("utf-8")
        except UnicodeDecodeError as err:
            raise ValidationError(f"binary key component is not valid UTF-8: {column}") from err
    raise ValidationError(f"unsupported key component type for {column}: {type(value).__name__}")
