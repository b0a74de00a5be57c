from __future__ import annotations

import base64
import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

# Key attributes are always scalars, so a LastEvaluatedKey only ever holds S, N or B values.
_SCALAR_KINDS = frozenset({"S", "N", "B"})


@dataclass(frozen=True)
class Page[T]:
    items: list[T]
    next_cursor: str | None


@dataclass(frozen=True)
class Cursor:
    last_key: dict[str, Any]
    index: str | None = None
    sort: str | None = None


def _single_scalar(av: Any) -> tuple[str, Any]:
    if not isinstance(av, Mapping) or len(av) != 1:
        raise ValueError("key attribute value must be a single-key map")
    (kind, value), *_ = av.items()
    if kind not in _SCALAR_KINDS:
        raise ValueError(f"unsupported key attribute type: {kind}")
    return str(kind), value


def _scalar_to_json(av: Any) -> dict[str, str]:
    kind, value = _single_scalar(av)
    if kind == "B":
        if not isinstance(value, (bytes, bytearray)):
            raise ValueError("B value must be bytes")
        return {"B": base64.b64encode(bytes(value)).decode("ascii")}
    if not isinstance(value, str):
        raise ValueError(f"{kind} value must be a string")
    return {kind: value}


def _scalar_from_json(enc: Any) -> dict[str, Any]:
    kind, value = _single_scalar(enc)
    if not isinstance(value, str):
        raise ValueError(f"{kind} value must be a string")
    if kind == "B":
        return {"B": base64.b64decode(value)}
    return {kind: value}


def encode_cursor(last_key: Any, *, index: str | None = None, sort: str | None = None) -> str:
    if not last_key:
        return ""
    if not isinstance(last_key, Mapping):
        raise ValueError("last_key must be a map")

    payload: dict[str, Any] = {
        "lastKey": {str(k): _scalar_to_json(last_key[k]) for k in sorted(last_key)},
    }
    if index is not None:
        payload["index"] = index
    if sort is not None:
        payload["sort"] = sort

    raw = json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii")


def decode_cursor(cursor: str) -> Cursor:
    raw = str(cursor or "").strip()
    if not raw:
        raise ValueError("cursor is empty")

    padding = "=" * (-len(raw) % 4)
    data = base64.urlsafe_b64decode(raw + padding).decode("utf-8")
    parsed = json.loads(data)
    if not isinstance(parsed, dict):
        raise ValueError("cursor must decode to an object")

    last_key_raw = parsed.get("lastKey")
    if not isinstance(last_key_raw, dict) or not last_key_raw:
        raise ValueError("cursor lastKey is invalid")

    index = parsed.get("index")
    sort = parsed.get("sort")
    return Cursor(
        last_key={str(k): _scalar_from_json(last_key_raw[k]) for k in sorted(last_key_raw)},
        index=index if isinstance(index, str) else None,
        sort=sort if sort in {"ASC", "DESC"} else None,
    )
