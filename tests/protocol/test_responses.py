"""Tests for response classification."""

from mcpbridge.protocol import (
    BareResult,
    CapabilitiesDeclared,
    ContentResult,
    RpcError,
    ToolsListed,
    classify_response,
)


def envelope(**fields):
    return {"jsonrpc": "2.0", "id": 1, **fields}


class TestClassifyResponse:
    def test_error(self):
        response = classify_response(envelope(error={"code": -32002, "message": "Server not initialized"}))
        assert isinstance(response, RpcError)
        assert response.is_not_initialized

    def test_tools_listed(self):
        assert classify_response(envelope(result={"tools": [{"name": "a"}]})) == ToolsListed([{"name": "a"}])

    def test_empty_tools_list_still_listed(self):
        assert classify_response(envelope(result={"tools": []})) == ToolsListed([])

    def test_capabilities_declared(self):
        response = classify_response(
            envelope(result={"protocolVersion": "2024-11-05", "capabilities": {"tools": {"a": {}}}})
        )
        assert response == CapabilitiesDeclared({"a": {}}, "2024-11-05")

    def test_empty_capabilities_are_bare(self):
        response = classify_response(envelope(result={"capabilities": {"tools": {}}}))
        assert isinstance(response, BareResult)

    def test_content(self):
        response = classify_response(envelope(result={"content": [{"type": "text", "text": "x"}]}))
        assert response == ContentResult([{"type": "text", "text": "x"}])

    def test_bare_values(self):
        assert classify_response(envelope(result="done")) == BareResult("done")
        assert classify_response(envelope(result=None)) == BareResult(None)
        assert classify_response(envelope(result={"sum": 3})) == BareResult({"sum": 3})

    def test_content_error_flag(self):
        response = classify_response(envelope(result={"content": [], "isError": True}))
        assert response == ContentResult([], is_error=True)
