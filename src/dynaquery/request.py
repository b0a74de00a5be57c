from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .errors import ValidationError
from .escaping import DEFAULT_ESCAPE, EscapeRule
from .expression import CompiledExpression
from .find import FindRequest, compile_find
from .keys import DEFAULT_KEY_SEPARATOR, EMPTY_CATALOG, IndexCatalog
from .update import UpdateRequest, compile_update


def build_query_request(
    table_name: str,
    compiled: CompiledExpression,
    *,
    index_name: str | None = None,
    limit: int | None = None,
    scan_forward: bool = True,
    exclusive_start_key: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    if not table_name:
        raise ValidationError("table_name is required")

    req: dict[str, Any] = {"TableName": table_name}
    if compiled.expression is not None:
        req["KeyConditionExpression"] = compiled.expression
    if compiled.attribute_names:
        req["ExpressionAttributeNames"] = dict(compiled.attribute_names)
    if compiled.attribute_values:
        req["ExpressionAttributeValues"] = dict(compiled.attribute_values)
    req["ScanIndexForward"] = scan_forward
    if index_name is not None:
        req["IndexName"] = index_name
    if limit is not None:
        req["Limit"] = limit
    if exclusive_start_key:
        req["ExclusiveStartKey"] = dict(exclusive_start_key)
    return req


def build_update_request(
    table_name: str,
    key: Mapping[str, Any],
    compiled: CompiledExpression,
) -> dict[str, Any]:
    if not table_name:
        raise ValidationError("table_name is required")
    if compiled.expression is None:
        raise ValidationError("no updates provided")

    return {
        "TableName": table_name,
        "Key": dict(key),
        "UpdateExpression": compiled.expression,
        "ExpressionAttributeNames": dict(compiled.attribute_names),
        "ExpressionAttributeValues": dict(compiled.attribute_values),
    }


def find_params(
    table_name: str,
    request: FindRequest,
    indexes: IndexCatalog = EMPTY_CATALOG,
    *,
    separator: str = DEFAULT_KEY_SEPARATOR,
    rule: EscapeRule = DEFAULT_ESCAPE,
) -> dict[str, Any]:
    compiled = compile_find(request, indexes, separator=separator, rule=rule)
    return build_query_request(
        table_name,
        compiled,
        index_name=request.index_name,
        limit=request.limit,
        scan_forward=request.scan_forward,
        exclusive_start_key=request.exclusive_start_key,
    )


def update_params(
    table_name: str,
    request: UpdateRequest,
    *,
    rule: EscapeRule = DEFAULT_ESCAPE,
) -> dict[str, Any]:
    return build_update_request(table_name, request.key, compile_update(request, rule=rule))
