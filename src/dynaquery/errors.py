from __future__ import annotations

from collections.abc import Iterable


class DynaqueryError(Exception):
    pass


class ValidationError(DynaqueryError):
    pass


class ConditionFailedError(DynaqueryError):
    pass


class NotFoundError(DynaqueryError):
    pass


class UnsupportedUpdateTypeError(DynaqueryError):
    def __init__(self, kind: str) -> None:
        super().__init__(f"update type is not supported yet: {kind}")
        self.kind = kind


class MissingKeyComponentError(DynaqueryError):
    def __init__(self, *, column: str, index_name: str | None = None) -> None:
        if index_name:
            message = f"index {index_name}: missing key component: {column}"
        else:
            message = f"missing key component: {column}"
        super().__init__(message)
        self.column = column
        self.index_name = index_name


class EmptyAttributeNameError(DynaqueryError):
    def __init__(self, name: object = "") -> None:
        super().__init__(f"attribute name must be a non-empty string (got {name!r})")
        self.name = name


class AmbiguousAttributeOverlapError(DynaqueryError):
    def __init__(self, names: Iterable[str]) -> None:
        self.names = tuple(sorted(set(names)))
        super().__init__("attribute used more than once in one expression: " + ", ".join(self.names))


class AwsError(DynaqueryError):
    def __init__(self, *, code: str, message: str) -> None:
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message
