"""
Client for remote tool servers speaking JSON-RPC over HTTP or a relay process.

Usage:
    from mcpbridge import MCPServerConfig, ToolCall, ToolOrchestrator

    orchestrator = ToolOrchestrator(MCPServerConfig(url="https://tools.example.com/sse"))
    tools = await orchestrator.discover_tools()
    result = await orchestrator.call_tool(ToolCall("echo", {"text": "hi"}))
"""

from mcpbridge.config import MCPServerConfig, TransportPolicy, load_mcp_config
from mcpbridge.integration import ToolOrchestrator, create_orchestrator
from mcpbridge.protocol import ProtocolError
from mcpbridge.tools import (
    ImageContent,
    ResourceContent,
    TextContent,
    Tool,
    ToolCache,
    ToolCall,
    ToolResult,
)
from mcpbridge.transport import (
    DecodeError,
    ProcessError,
    TimeoutError,
    TransportError,
)

__all__ = [
    "MCPServerConfig",
    "TransportPolicy",
    "load_mcp_config",
    "ToolOrchestrator",
    "create_orchestrator",
    "Tool",
    "ToolCall",
    "ToolResult",
    "ToolCache",
    "TextContent",
    "ImageContent",
    "ResourceContent",
    "TransportError",
    "DecodeError",
    "TimeoutError",
    "ProcessError",
    "ProtocolError",
]
