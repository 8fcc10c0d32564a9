"""Tests for tool data types."""

import pytest

from mcpbridge.tools import (
    DEFAULT_DESCRIPTION,
    ImageContent,
    ResourceContent,
    TextContent,
    Tool,
    ToolCall,
    ToolResult,
    default_input_schema,
    tools_from_capabilities,
    tools_from_descriptors,
)
from mcpbridge.tools.types import content_block_from_dict


class TestTool:
    def test_defaults_when_fields_absent(self):
        tool = Tool.from_descriptor({"name": "ping"})
        assert tool.description == DEFAULT_DESCRIPTION
        assert tool.input_schema == {"type": "object", "properties": {}, "required": []}

    def test_keeps_declared_fields(self):
        schema = {"type": "object", "properties": {"q": {"type": "string"}}}
        tool = Tool.from_descriptor({"name": "search", "description": "Find", "inputSchema": schema})
        assert tool == Tool("search", "Find", schema)

    def test_empty_description_defaulted(self):
        assert Tool.from_descriptor({"name": "x", "description": ""}).description == DEFAULT_DESCRIPTION

    def test_default_schema_not_shared(self):
        assert default_input_schema() is not default_input_schema()

    def test_to_openai_function(self):
        tool = Tool("search", "Find things")
        assert tool.to_openai_function() == {
            "type": "function",
            "function": {
                "name": "mcp_search",
                "description": "[MCP Tool] Find things",
                "parameters": default_input_schema(),
            },
        }

    def test_descriptors_without_name_skipped(self):
        tools = tools_from_descriptors([{"name": "a"}, {"description": "nameless"}, "junk", {"name": "b"}])
        assert [tool.name for tool in tools] == ["a", "b"]

    def test_capabilities_keyed_by_name(self):
        tools = tools_from_capabilities({"a": {"description": "first"}, "b": None})
        assert tools == [Tool("a", "first"), Tool("b")]


class TestToolCall:
    def test_from_function_call_strips_prefix(self):
        call = ToolCall.from_function_call("mcp_search", '{"q": "cats"}')
        assert call == ToolCall("search", {"q": "cats"})

    def test_unprefixed_name_and_dict_arguments(self):
        assert ToolCall.from_function_call("search", {"q": 1}) == ToolCall("search", {"q": 1})

    def test_empty_argument_string(self):
        assert ToolCall.from_function_call("mcp_ping", "").arguments == {}

    def test_non_object_arguments_rejected(self):
        with pytest.raises(ValueError, match="JSON object"):
            ToolCall.from_function_call("mcp_x", "[1, 2]")

    def test_to_params(self):
        assert ToolCall("x", {"a": 1}).to_params() == {"name": "x", "arguments": {"a": 1}}


class TestContentBlocks:
    def test_text(self):
        assert content_block_from_dict({"type": "text", "text": "hi"}) == TextContent("hi")

    def test_image(self):
        block = content_block_from_dict({"type": "image", "data": "aGk=", "mimeType": "image/png"})
        assert block == ImageContent("aGk=", "image/png")
        assert block.to_dict() == {"type": "image", "data": "aGk=", "mimeType": "image/png"}

    def test_embedded_resource(self):
        block = content_block_from_dict(
            {"type": "resource", "resource": {"uri": "file:///a.txt", "text": "body", "mimeType": "text/plain"}}
        )
        assert block == ResourceContent("body", "text/plain", uri="file:///a.txt")

    def test_unknown_block_kept_as_text(self):
        block = content_block_from_dict({"type": "audio", "data": "x"})
        assert isinstance(block, TextContent)
        assert '"audio"' in block.text


class TestToolResult:
    def test_from_text(self):
        result = ToolResult.from_text("hello")
        assert result.text == "hello"
        assert result.to_dict() == {"content": [{"type": "text", "text": "hello"}], "isError": False}

    def test_immutable(self):
        result = ToolResult.from_text("x")
        with pytest.raises(AttributeError):
            result.is_error = True
