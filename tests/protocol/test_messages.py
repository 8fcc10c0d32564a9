"""Tests for JSON-RPC message types and request builders."""

from mcpbridge.protocol import (
    ClientInfo,
    JSONRPCRequest,
    JSONRPCResponse,
    ProtocolError,
    RequestIdGenerator,
    SERVER_NOT_INITIALIZED,
    call_tool_request,
    initialize_request,
    list_tools_request,
)
from mcpbridge.protocol.errors import INTERNAL_ERROR
from mcpbridge.protocol.messages import is_notification, is_request, is_response


class TestRequestIdGenerator:
    def test_ids_follow_clock(self):
        ids = RequestIdGenerator(clock=lambda: 1700000000.5)
        assert ids.next() == 1700000000500

    def test_ids_strictly_increase_within_same_millisecond(self):
        ids = RequestIdGenerator(clock=lambda: 1.0)
        assert [ids.next(), ids(), ids.next()] == [1000, 1001, 1002]


class TestBuilders:
    def test_list_tools(self):
        request = list_tools_request(RequestIdGenerator(clock=lambda: 2.0)).to_dict()
        assert request == {"jsonrpc": "2.0", "method": "tools/list", "params": {}, "id": 2000}

    def test_call_tool(self):
        request = call_tool_request(RequestIdGenerator(), "echo", {"text": "hi"})
        assert request.params == {"name": "echo", "arguments": {"text": "hi"}}

    def test_call_tool_defaults_arguments(self):
        assert call_tool_request(RequestIdGenerator(), "ping").params["arguments"] == {}

    def test_initialize_uses_client_info(self):
        request = initialize_request(RequestIdGenerator(), ClientInfo(name="chat", version="2.1"))
        assert request.params["clientInfo"] == {"name": "chat", "version": "2.1"}

    def test_request_round_trip(self):
        request = JSONRPCRequest(method="tools/call", id=7, params={"name": "x"})
        assert JSONRPCRequest.from_dict(request.to_dict()) == request


class TestResponses:
    def test_error_response(self):
        response = JSONRPCResponse.from_dict(
            {"jsonrpc": "2.0", "id": 1, "error": {"code": SERVER_NOT_INITIALIZED, "message": "Server not initialized"}}
        )
        assert response.is_error
        exc = response.error.to_exception()
        assert isinstance(exc, ProtocolError)
        assert exc.is_not_initialized

    def test_error_with_odd_code(self):
        error = ProtocolError.from_dict({"code": "bad", "message": ""})
        assert error.code == INTERNAL_ERROR
        assert error.message == "Internal error"

    def test_message_kinds(self):
        assert is_request({"id": 1, "method": "ping"})
        assert is_notification({"method": "notifications/message"})
        assert is_response({"id": 1, "result": None})
        assert not is_response({"id": 1})
