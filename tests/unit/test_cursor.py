from __future__ import annotations

import base64
import json

import pytest

from dynaquery import decode_cursor, encode_cursor


def test_cursor_round_trip_scalar_keys() -> None:
    key = {"tenantId#region": {"S": "t1#us"}, "seq": {"N": "12"}, "blob": {"B": b"\x00\x01"}}
    cursor = encode_cursor(key, index="byTenantRegion", sort="DESC")
    decoded = decode_cursor(cursor)
    assert decoded.last_key == key
    assert decoded.index == "byTenantRegion"
    assert decoded.sort == "DESC"


def test_cursor_is_url_safe_and_stable() -> None:
    key = {"b": {"S": "2"}, "a": {"S": "1"}}
    cursor = encode_cursor(key)
    assert cursor == encode_cursor(dict(reversed(list(key.items()))))
    assert "+" not in cursor and "/" not in cursor


def test_encode_cursor_empty_returns_empty_string() -> None:
    assert encode_cursor({}) == ""
    assert encode_cursor(None) == ""


def test_encode_cursor_rejects_non_map() -> None:
    with pytest.raises(ValueError, match="last_key must be a map"):
        encode_cursor(["not-a-map"])


@pytest.mark.parametrize(
    ("av", "match"),
    [
        ({"S": 1}, "S value must be a string"),
        ({"N": 1}, "N value must be a string"),
        ({"B": "not-bytes"}, "B value must be bytes"),
        ({"M": {}}, "unsupported key attribute type: M"),
        ({"S": "a", "N": "1"}, "single-key map"),
        ("raw", "single-key map"),
    ],
)
def test_encode_cursor_rejects_non_scalar_values(av: object, match: str) -> None:
    with pytest.raises(ValueError, match=match):
        encode_cursor({"pk": av})


def test_decode_cursor_empty_raises() -> None:
    with pytest.raises(ValueError, match="cursor is empty"):
        decode_cursor("   ")


def test_decode_cursor_invalid_payloads_raise() -> None:
    with pytest.raises(ValueError):
        decode_cursor("bm90LWpzb24")  # base64url("not-json")

    def enc(payload: object) -> str:
        return base64.urlsafe_b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")

    with pytest.raises(ValueError, match="decode to an object"):
        decode_cursor(enc([1, 2]))
    with pytest.raises(ValueError, match="lastKey is invalid"):
        decode_cursor(enc({"lastKey": {}}))
    with pytest.raises(ValueError, match="B value must be a string"):
        decode_cursor(enc({"lastKey": {"pk": {"B": 1}}}))


def test_decode_cursor_ignores_unknown_sort_values() -> None:
    cursor = encode_cursor({"pk": {"S": "A"}}, sort="sideways")
    assert decode_cursor(cursor).sort is None
