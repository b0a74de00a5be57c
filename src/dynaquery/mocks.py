"""A scripted DynamoDB client for driver tests.

Scripts and assertions are written in document shape (plain Python values),
the same shape ``find_params`` and ``update_params`` produce. The fake
unmarshals incoming requests before matching them and marshals scripted
items, keys and attributes into attribute-value maps on the way back, so a
test never spells ``{"S": ...}`` by hand.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from boto3.dynamodb.types import TypeDeserializer, TypeSerializer

# Request fields whose values travel as attribute-value maps.
_WIRE_FIELDS = ("Key", "ExpressionAttributeValues", "ExclusiveStartKey")

type RequestCheck = Mapping[str, Any] | Callable[[dict[str, Any]], None]


@dataclass(frozen=True)
class ScriptedCall:
    operation: str
    match: RequestCheck | None = None
    response: Mapping[str, Any] | None = None
    error: Exception | None = None


def _match_subset(expected: Any, actual: Any, *, path: str) -> None:
    if isinstance(expected, Mapping):
        if not isinstance(actual, Mapping):
            raise AssertionError(f"{path}: expected a map, got {type(actual).__name__}")
        for key, value in expected.items():
            if key not in actual:
                raise AssertionError(f"{path}: missing {key!r} in {sorted(actual)}")
            _match_subset(value, actual[key], path=f"{path}.{key}")
    elif expected != actual:
        raise AssertionError(f"{path}: expected {expected!r}, got {actual!r}")


class FakeDynamoDBClient:
    """Stand-in for the low-level boto3 client used by ``DynamoDriver``.

    Calls must arrive in the order they were scripted. ``calls`` keeps the
    raw wire requests; ``documents`` keeps the same requests unmarshalled.
    """

    def __init__(self) -> None:
        self._script: list[ScriptedCall] = []
        self._serializer = TypeSerializer()
        self._deserializer = TypeDeserializer()
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.documents: list[tuple[str, dict[str, Any]]] = []

    def expect_query(
        self,
        match: RequestCheck | None = None,
        *,
        items: list[Mapping[str, Any]] | None = None,
        last_key: Mapping[str, Any] | None = None,
        error: Exception | None = None,
    ) -> None:
        rows = [self._marshal(item) for item in items or []]
        response: dict[str, Any] = {"Items": rows, "Count": len(rows)}
        if last_key is not None:
            response["LastEvaluatedKey"] = self._marshal(last_key)
        self._script.append(ScriptedCall("query", match, response, error))

    def expect_update(
        self,
        match: RequestCheck | None = None,
        *,
        attributes: Mapping[str, Any] | None = None,
        error: Exception | None = None,
    ) -> None:
        response = {"Attributes": self._marshal(attributes)} if attributes else {}
        self._script.append(ScriptedCall("update_item", match, response, error))

    def assert_no_pending(self) -> None:
        if self._script:
            pending = ", ".join(call.operation for call in self._script)
            raise AssertionError(f"scripted calls never made: {pending}")

    def query(self, **kwargs: Any) -> dict[str, Any]:
        return self._dispatch("query", kwargs)

    def update_item(self, **kwargs: Any) -> dict[str, Any]:
        return self._dispatch("update_item", kwargs)

    def _dispatch(self, operation: str, req: dict[str, Any]) -> dict[str, Any]:
        doc = self._unmarshal_request(req)
        self.calls.append((operation, dict(req)))
        self.documents.append((operation, doc))

        if not self._script:
            raise AssertionError(f"unscripted call: {operation}")
        call = self._script.pop(0)
        if call.operation != operation:
            raise AssertionError(f"expected {call.operation}, got {operation}")

        if callable(call.match):
            call.match(doc)
        elif call.match is not None:
            _match_subset(call.match, doc, path=operation)

        if call.error is not None:
            raise call.error
        return dict(call.response or {})

    def _unmarshal_request(self, req: Mapping[str, Any]) -> dict[str, Any]:
        doc = dict(req)
        for name in _WIRE_FIELDS:
            if name in doc:
                doc[name] = {k: self._deserializer.deserialize(v) for k, v in doc[name].items()}
        return doc

    def _marshal(self, values: Mapping[str, Any]) -> dict[str, Any]:
        return {k: self._serializer.serialize(v) for k, v in values.items()}
