from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True)
class CompiledExpression:
    expression: str | None
    attribute_names: Mapping[str, str] = field(default_factory=dict)
    attribute_values: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Read-only views over private copies; callers cannot mutate a compiled result.
        object.__setattr__(self, "attribute_names", MappingProxyType(dict(self.attribute_names)))
        object.__setattr__(self, "attribute_values", MappingProxyType(dict(self.attribute_values)))

    @property
    def is_empty(self) -> bool:
        return self.expression is None
