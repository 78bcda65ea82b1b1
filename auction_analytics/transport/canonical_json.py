"""Helpers for canonical JSON serialization of collector payloads."""

from __future__ import annotations

from typing import Any, Union

import orjson

_ORJSON_OPTIONS = orjson.OPT_SORT_KEYS | orjson.OPT_NON_STR_KEYS


JsonType = Union[str, int, float, bool, None, list["JsonType"], dict[str, "JsonType"]]


def canonical_dumps(payload: Any) -> bytes:
    """Return canonical JSON bytes with sorted keys and stable formatting."""
    return orjson.dumps(payload, option=_ORJSON_OPTIONS)


def canonical_loads(body: Union[bytes, str]) -> JsonType:
    return orjson.loads(body)
