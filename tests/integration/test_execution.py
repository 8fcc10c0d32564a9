"""Tests for tool execution over direct and relay transports."""

import httpx
import pytest

from fixtures.remote import ScriptedServer, error, result
from mcpbridge.integration import call_direct, call_stateful
from mcpbridge.protocol import ProtocolError, RequestIdGenerator
from mcpbridge.tools import ToolCall, ToolResult
from mcpbridge.transport import DecodeError, TransportError


@pytest.fixture
def ids():
    return RequestIdGenerator()


class TestCallDirect:
    @pytest.mark.asyncio
    async def test_sends_call_without_handshake(self, make_direct, ids):
        server = ScriptedServer(
            lambda msg: result(msg["id"], {"content": [{"type": "text", "text": msg["params"]["arguments"]["text"]}]})
        )

        outcome = await call_direct(make_direct(server), ids, ToolCall("echo", {"text": "hi"}))

        assert outcome == ToolResult.from_text("hi")
        assert server.methods == ["tools/call"]
        assert server.requests[0]["params"] == {"name": "echo", "arguments": {"text": "hi"}}

    @pytest.mark.asyncio
    async def test_remote_error_becomes_error_result(self, make_direct, ids):
        server = ScriptedServer(lambda msg: error(msg["id"], "Unknown tool: nope", code=-32601))

        outcome = await call_direct(make_direct(server), ids, ToolCall("nope"))

        assert outcome.is_error
        assert outcome.text == "Tool execution error: Unknown tool: nope"

    @pytest.mark.asyncio
    async def test_not_initialized_raises(self, make_direct, ids):
        server = ScriptedServer(lambda msg: error(msg["id"], "Server not initialized", code=-32002))

        with pytest.raises(ProtocolError):
            await call_direct(make_direct(server), ids, ToolCall("echo"))

    @pytest.mark.asyncio
    async def test_decode_failure_raises(self, make_direct, ids):
        server = ScriptedServer(lambda msg: httpx.Response(200, text="nothing here"))

        with pytest.raises(DecodeError):
            await call_direct(make_direct(server), ids, ToolCall("echo"))

    @pytest.mark.asyncio
    async def test_notification_instead_of_response_raises(self, make_direct, ids):
        server = ScriptedServer(lambda msg: {"jsonrpc": "2.0", "method": "notifications/progress"})

        with pytest.raises(DecodeError, match="Expected a tools/call response"):
            await call_direct(make_direct(server), ids, ToolCall("echo"))

    @pytest.mark.asyncio
    async def test_http_failure_raises(self, make_direct, ids):
        server = ScriptedServer(lambda msg: httpx.Response(502))

        with pytest.raises(TransportError, match="HTTP 502"):
            await call_direct(make_direct(server), ids, ToolCall("echo"))


class TestCallStateful:
    @pytest.mark.asyncio
    async def test_echo_through_relay(self, make_relay, ids):
        outcome = await call_stateful(make_relay("tools"), ids, ToolCall("echo", {"text": "round trip"}), timeout=10)

        assert outcome == ToolResult.from_text("round trip")

    @pytest.mark.asyncio
    async def test_timeout_becomes_error_result(self, make_relay, ids):
        transport = make_relay("silent")

        outcome = await call_stateful(transport, ids, ToolCall("echo"), timeout=0.5)

        assert outcome == ToolResult.from_text("Tool execution timed out after 0.5s", is_error=True)
        assert transport.live_processes == 0

    @pytest.mark.asyncio
    async def test_crash_becomes_error_result(self, make_relay, ids):
        outcome = await call_stateful(make_relay("crash"), ids, ToolCall("echo"), timeout=10)

        assert outcome.is_error
        assert outcome.text.startswith("Error calling MCP tool: Relay exited with code 3")

    @pytest.mark.asyncio
    async def test_rejected_handshake_becomes_error_result(self, make_relay, ids):
        outcome = await call_stateful(make_relay("init-error"), ids, ToolCall("echo"), timeout=10)

        assert outcome == ToolResult.from_text("Tool execution error: Unauthorized", is_error=True)
