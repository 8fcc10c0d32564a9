"""Tests for SSE body decoding."""

import pytest

from mcpbridge.transport import DecodeError, decode_body, decode_sse_body


class TestDecodeSSEBody:
    def test_single_data_line(self):
        body = 'event: message\ndata: {"jsonrpc": "2.0", "id": 1, "result": {"tools": []}}\n\n'
        assert decode_sse_body(body) == {"jsonrpc": "2.0", "id": 1, "result": {"tools": []}}

    def test_first_data_line_wins(self):
        body = 'data: {"id": 1}\ndata: {"id": 2}\n'
        assert decode_sse_body(body) == {"id": 1}

    def test_ignores_other_fields(self):
        body = ': comment\nid: 7\nevent: message\ndata: {"ok": true}\n'
        assert decode_sse_body(body) == {"ok": True}

    def test_crlf_line_endings(self):
        assert decode_sse_body('event: message\r\ndata: {"a": 1}\r\n\r\n') == {"a": 1}

    def test_no_data_line(self):
        with pytest.raises(DecodeError, match="No data found in SSE response"):
            decode_sse_body("event: message\n\n")

    def test_empty_body(self):
        with pytest.raises(DecodeError, match="No data found"):
            decode_sse_body("")

    def test_prefix_requires_space(self):
        with pytest.raises(DecodeError, match="No data found"):
            decode_sse_body('data:{"a": 1}\n')

    def test_invalid_json_payload(self):
        with pytest.raises(DecodeError, match="Invalid JSON"):
            decode_sse_body("data: {not json\n")


class TestDecodeBody:
    def test_plain_json(self):
        assert decode_body('{"id": 3}', "application/json; charset=utf-8") == {"id": 3}

    def test_plain_json_invalid(self):
        with pytest.raises(DecodeError, match="Invalid JSON response body"):
            decode_body("<html>", "application/json")

    def test_event_stream(self):
        assert decode_body('data: {"id": 4}\n', "text/event-stream") == {"id": 4}

    def test_missing_content_type_uses_sse(self):
        with pytest.raises(DecodeError):
            decode_body('{"id": 5}', "")
