"""Compact, order-preserving JSON for token headers and claims."""

import json
import math
from collections.abc import Mapping
from typing import Any

from jwtsign.core.errors import MalformedJSON, UnsupportedValueType

_SEPARATORS = (",", ":")


def _plain(value: Any, path: str) -> Any:
    """Check ``value`` and rebuild containers as plain dicts and lists."""
    # bool is a subclass of int, so the scalar check covers it
    if value is None or isinstance(value, (str, bool, int)):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise UnsupportedValueType(f"{path}: non-finite number {value!r}")
        return value
    if isinstance(value, Mapping):
        obj: dict[str, Any] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise UnsupportedValueType(
                    f"{path}: object key {key!r} is not a string"
                )
            obj[key] = _plain(item, f"{path}.{key}")
        return obj
    if isinstance(value, (list, tuple)):
        return [_plain(item, f"{path}[{index}]") for index, item in enumerate(value)]
    raise UnsupportedValueType(f"{path}: {type(value).__name__} is not JSON")


def dumps(value: Any) -> bytes:
    """Serialize ``value`` as compact UTF-8 JSON, keeping key order."""
    try:
        text = json.dumps(
            _plain(value, "$"),
            separators=_SEPARATORS,
            ensure_ascii=False,
            allow_nan=False,
        )
    except RecursionError as exc:
        raise UnsupportedValueType("value nesting too deep") from exc
    return text.encode("utf-8")


def _reject_constant(name: str) -> Any:
    raise MalformedJSON(f"non-standard JSON constant {name}")


def _unique_object(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    obj: dict[str, Any] = {}
    for key, item in pairs:
        if key in obj:
            raise MalformedJSON(f"duplicate member name {key!r}")
        obj[key] = item
    return obj


def loads(data: bytes) -> Any:
    """Strictly parse UTF-8 JSON bytes."""
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedJSON("segment is not valid UTF-8") from exc
    try:
        return json.loads(
            text,
            object_pairs_hook=_unique_object,
            parse_constant=_reject_constant,
        )
    except json.JSONDecodeError as exc:
        raise MalformedJSON(str(exc)) from exc
    except RecursionError as exc:
        raise MalformedJSON("JSON nesting too deep") from exc
