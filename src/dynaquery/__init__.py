from __future__ import annotations

import json
from importlib.resources import files
from typing import TYPE_CHECKING, Any

from .config import DriverOptions, OptionsError, load_driver_options
from .cursor import Cursor, Page, decode_cursor, encode_cursor
from .errors import (
    AmbiguousAttributeOverlapError,
    AwsError,
    ConditionFailedError,
    DynaqueryError,
    EmptyAttributeNameError,
    MissingKeyComponentError,
    NotFoundError,
    UnsupportedUpdateTypeError,
    ValidationError,
)
from .escaping import (
    EscapeRule,
    check_separator,
    name_ref,
    to_attribute_names,
    to_attribute_values,
    to_placeholder,
    value_ref,
)
from .expression import CompiledExpression
from .find import BeginsWith, FindRequest, compile_find, compile_key_condition, indexed_predicates
from .keys import (
    IndexCatalog,
    IndexColumn,
    IndexDefinition,
    IndexDefinitionError,
    compose_key,
    gsi,
    partition_key_attribute,
)
from .request import build_query_request, build_update_request, find_params, update_params
from .update import (
    UpdateClause,
    UpdateClauseKind,
    UpdateRequest,
    compile_update,
    compile_update_clause,
    compile_update_expression,
)

if TYPE_CHECKING:
    from .driver import DynamoDriver


def _read_version() -> str:
    try:
        data = json.loads(files(__package__).joinpath("version.json").read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return "0.0.0"

    version = data.get("version")
    return version if isinstance(version, str) and version else "0.0.0"


__version__ = _read_version()


def __getattr__(name: str) -> Any:
    # The driver pulls in boto3; the pure compilers do not need it.
    if name == "DynamoDriver":
        from .driver import DynamoDriver

        return DynamoDriver
    raise AttributeError(name)


__all__ = [
    "AmbiguousAttributeOverlapError",
    "AwsError",
    "BeginsWith",
    "CompiledExpression",
    "ConditionFailedError",
    "Cursor",
    "DriverOptions",
    "DynamoDriver",
    "DynaqueryError",
    "EmptyAttributeNameError",
    "EscapeRule",
    "FindRequest",
    "IndexCatalog",
    "IndexColumn",
    "IndexDefinition",
    "IndexDefinitionError",
    "MissingKeyComponentError",
    "NotFoundError",
    "OptionsError",
    "Page",
    "UnsupportedUpdateTypeError",
    "UpdateClause",
    "UpdateClauseKind",
    "UpdateRequest",
    "ValidationError",
    "__version__",
    "build_query_request",
    "build_update_request",
    "check_separator",
    "compile_find",
    "compile_key_condition",
    "compile_update",
    "compile_update_clause",
    "compile_update_expression",
    "compose_key",
    "decode_cursor",
    "encode_cursor",
    "find_params",
    "gsi",
    "indexed_predicates",
    "load_driver_options",
    "name_ref",
    "partition_key_attribute",
    "to_attribute_names",
    "to_attribute_values",
    "to_placeholder",
    "update_params",
    "value_ref",
]
