from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import boto3
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.exceptions import ClientError

from .aws_errors import map_client_error as _map_client_error
from .config import DriverOptions
from .cursor import Page, decode_cursor, encode_cursor
from .errors import ValidationError
from .find import FindRequest
from .request import find_params, update_params
from .update import UpdateRequest
from .validation import validate_index_name, validate_table_name

_logger: logging.Logger = logging.getLogger(__name__)


class DynamoDriver:
    """Compiles find/update requests and runs them against a DynamoDB client.

    Compilation is pure and happens before any network call; only ``find``,
    ``find_all`` and ``update`` touch the client. The client is a low-level
    boto3 DynamoDB client, so values are marshalled with ``TypeSerializer`` on
    the way out and items are unmarshalled with ``TypeDeserializer`` on the
    way back.
    """

    def __init__(self, options: DriverOptions | None = None, *, client: Any | None = None) -> None:
        self._options = options or DriverOptions()
        self._client: Any = client or self._options.client or boto3.client("dynamodb")
        self._serializer = TypeSerializer()
        self._deserializer = TypeDeserializer()

    @property
    def options(self) -> DriverOptions:
        return self._options

    def build_table_name(
        self, table_name: str, schema: str | None = None, database: str | None = None
    ) -> str:
        parts = [p for p in (database, schema, table_name) if p]
        name = self._options.table_prefix + ".".join(parts)
        validate_table_name(name)
        return name

    def find_params(self, table: str, request: FindRequest) -> dict[str, Any]:
        if request.index_name is not None:
            validate_index_name(request.index_name)
        return find_params(
            self.build_table_name(table),
            request,
            self._options.catalog(table),
            separator=self._options.key_separator,
            rule=self._options.escape,
        )

    def update_params(self, table: str, request: UpdateRequest) -> dict[str, Any]:
        return update_params(self.build_table_name(table), request, rule=self._options.escape)

    def find(self, table: str, request: FindRequest, *, cursor: str | None = None) -> Page[dict[str, Any]]:
        params = self.find_params(table, request)
        req = self._marshal_query(params)

        if cursor is not None:
            if request.exclusive_start_key is not None:
                raise ValidationError("cursor and exclusive_start_key are mutually exclusive")
            req["ExclusiveStartKey"] = self._decode_cursor(cursor, request)

        _logger.debug("Querying DynamoDB table %s (index=%s)", req["TableName"], req.get("IndexName"))
        try:
            resp = self._client.query(**req)
        except ClientError as err:
            raise _map_client_error(err, operation="query") from err

        items = [self._unmarshal(item) for item in resp.get("Items", [])]
        last = resp.get("LastEvaluatedKey")
        return Page(
            items=items,
            next_cursor=encode_cursor(last, index=request.index_name, sort=request.sort) if last else None,
        )

    def find_all(self, table: str, request: FindRequest) -> list[dict[str, Any]]:
        out: list[dict[str, Any]] = []
        cursor: str | None = None

        while True:
            page = self.find(table, request, cursor=cursor)
            out.extend(page.items)
            if page.next_cursor is None:
                break
            cursor = page.next_cursor

        return out

    def update(
        self,
        table: str,
        request: UpdateRequest,
        *,
        return_values: str = "NONE",
    ) -> dict[str, Any] | None:
        params = self.update_params(table, request)
        req = dict(params)
        req["Key"] = self._marshal_values(params["Key"])
        req["ExpressionAttributeValues"] = self._marshal_values(params["ExpressionAttributeValues"])
        if return_values != "NONE":
            req["ReturnValues"] = return_values

        _logger.debug("Updating item in DynamoDB table %s", req["TableName"])
        try:
            resp = self._client.update_item(**req)
        except ClientError as err:
            raise _map_client_error(err, operation="update_item") from err

        attrs = resp.get("Attributes")
        if not attrs:
            return None
        return self._unmarshal(attrs)

    def _marshal_query(self, params: Mapping[str, Any]) -> dict[str, Any]:
        req = dict(params)
        if "ExpressionAttributeValues" in req:
            req["ExpressionAttributeValues"] = self._marshal_values(req["ExpressionAttributeValues"])
        if "ExclusiveStartKey" in req:
            req["ExclusiveStartKey"] = self._marshal_values(req["ExclusiveStartKey"])
        return req

    def _marshal_values(self, values: Mapping[str, Any]) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for k, v in values.items():
            try:
                out[k] = self._serializer.serialize(v)
            except TypeError as err:
                raise ValidationError(f"unsupported value for {k}: {type(v).__name__}") from err
        return out

    def _unmarshal(self, item: Mapping[str, Any]) -> dict[str, Any]:
        return {k: self._deserializer.deserialize(v) for k, v in item.items()}

    def _decode_cursor(self, cursor: str, request: FindRequest) -> dict[str, Any]:
        try:
            decoded = decode_cursor(cursor)
        except ValueError as err:
            raise ValidationError("invalid cursor") from err
        if decoded.index is not None and decoded.index != request.index_name:
            raise ValidationError("cursor index does not match query")
        if decoded.sort is not None and decoded.sort != request.sort:
            raise ValidationError("cursor sort does not match query")
        return decoded.last_key
