"""Decoding of single-shot SSE-framed response bodies."""

from __future__ import annotations

from typing import Any

from mcpbridge.lib import oj
from mcpbridge.transport.base import DecodeError

DATA_PREFIX = "data: "


def decode_sse_body(text: str) -> Any:
    """
    Parse the JSON payload of the first ``data: `` line in a body.

    Servers frame even non-streaming replies as Server-Sent Events::

        event: message
        data: {"jsonrpc": "2.0", "id": 1, "result": {...}}

    Only the first matching line is consulted; each response carries a
    single JSON-RPC message.

    Raises:
        DecodeError: If no ``data: `` line exists or its payload is not JSON.
    """
    for line in text.splitlines():
        if line.startswith(DATA_PREFIX):
            payload = line[len(DATA_PREFIX):]
            try:
                return oj.loads(payload)
            except oj.JSONDecodeError as e:
                raise DecodeError(f"Invalid JSON in SSE data line: {e}", cause=e)
    raise DecodeError("No data found in SSE response")


def decode_body(text: str, content_type: str = "") -> Any:
    """
    Decode a response body by content type.

    Plain ``application/json`` bodies are parsed directly; everything else
    goes through :func:`decode_sse_body`.
    """
    if "application/json" in content_type.lower():
        try:
            return oj.loads(text)
        except oj.JSONDecodeError as e:
            raise DecodeError(f"Invalid JSON response body: {e}", cause=e)
    return decode_sse_body(text)
