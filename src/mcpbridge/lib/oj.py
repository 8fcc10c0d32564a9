"""orjson helpers used for every wire encode/decode."""

from __future__ import annotations

from typing import Any

import orjson

JSONDecodeError = orjson.JSONDecodeError


def loads(data: bytes | bytearray | memoryview | str) -> Any:
    """Parse JSON from bytes or str."""
    return orjson.loads(data)


def dumps(obj: Any) -> bytes:
    """Serialize to compact JSON bytes."""
    return orjson.dumps(obj)


def dumps_line(obj: Any) -> bytes:
    """Serialize to a single newline-terminated JSON line."""
    return orjson.dumps(obj, option=orjson.OPT_APPEND_NEWLINE)


def dumps_pretty(obj: Any) -> str:
    """Serialize to a two-space indented JSON string."""
    return orjson.dumps(obj, option=orjson.OPT_INDENT_2).decode("utf-8")
