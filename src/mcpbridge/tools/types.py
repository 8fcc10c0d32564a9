"""Tool, tool call, and tool result types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from mcpbridge.lib import oj

DEFAULT_DESCRIPTION = "No description available"
DEFAULT_FUNCTION_PREFIX = "mcp_"


def default_input_schema() -> dict[str, Any]:
    """Schema used when a tool declares none: an object with no parameters."""
    return {"type": "object", "properties": {}, "required": []}


@dataclass(frozen=True)
class Tool:
    """
    A named remote capability with a declared input schema.

    Produced by discovery and never modified afterwards.
    """

    name: str
    description: str = DEFAULT_DESCRIPTION
    input_schema: dict[str, Any] = field(default_factory=default_input_schema)

    @classmethod
    def from_descriptor(cls, descriptor: dict[str, Any], name: str | None = None) -> "Tool":
        """
        Create from a remote tool descriptor.

        Missing ``description`` and ``inputSchema`` fall back to defaults.

        Args:
            descriptor: ``{"name", "description", "inputSchema"}`` as sent by the server.
            name: Overrides ``descriptor["name"]`` (capability-declared tools are keyed by name).
        """
        schema = descriptor.get("inputSchema")
        return cls(
            name=name if name is not None else str(descriptor["name"]),
            description=descriptor.get("description") or DEFAULT_DESCRIPTION,
            input_schema=schema if isinstance(schema, dict) else default_input_schema(),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to wire format."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }

    def to_openai_function(self, prefix: str = DEFAULT_FUNCTION_PREFIX) -> dict[str, Any]:
        """
        Convert to OpenAI/Anthropic function calling format.

        The name is prefixed so remote tools can be told apart from local
        functions offered to the same model.
        """
        return {
            "type": "function",
            "function": {
                "name": f"{prefix}{self.name}",
                "description": f"[MCP Tool] {self.description}",
                "parameters": self.input_schema,
            },
        }


def tools_from_descriptors(descriptors: list[Any]) -> list[Tool]:
    """Map a ``result.tools`` list, skipping entries without a name."""
    return [
        Tool.from_descriptor(descriptor)
        for descriptor in descriptors
        if isinstance(descriptor, dict) and descriptor.get("name")
    ]


def tools_from_capabilities(declared: dict[str, Any]) -> list[Tool]:
    """Synthesize tools from ``result.capabilities.tools`` (tool name -> descriptor)."""
    return [
        Tool.from_descriptor(descriptor if isinstance(descriptor, dict) else {}, name=name)
        for name, descriptor in declared.items()
    ]


@dataclass(frozen=True)
class ToolCall:
    """A single invocation request."""

    name: str
    arguments: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_function_call(
        cls,
        name: str,
        arguments: str | dict[str, Any] | None = None,
        prefix: str = DEFAULT_FUNCTION_PREFIX,
    ) -> "ToolCall":
        """
        Build from an LLM function call produced for :meth:`Tool.to_openai_function`.

        Args:
            name: Function name, with or without the prefix.
            arguments: JSON string or already-parsed mapping.
            prefix: Prefix to strip from the name.
        """
        if prefix and name.startswith(prefix):
            name = name[len(prefix):]
        if isinstance(arguments, str):
            arguments = oj.loads(arguments) if arguments.strip() else {}
        if not isinstance(arguments, dict):
            raise ValueError(f"Tool arguments must be a JSON object, got {type(arguments).__name__}")
        return cls(name=name, arguments=arguments)

    def to_params(self) -> dict[str, Any]:
        """``tools/call`` params."""
        return {"name": self.name, "arguments": self.arguments}


@dataclass(frozen=True)
class TextContent:
    text: str
    type: Literal["text"] = field(default="text", init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "text": self.text}


@dataclass(frozen=True)
class ImageContent:
    data: str
    mime_type: str
    type: Literal["image"] = field(default="image", init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "data": self.data, "mimeType": self.mime_type}


@dataclass(frozen=True)
class ResourceContent:
    data: str
    mime_type: str
    uri: str | None = None
    type: Literal["resource"] = field(default="resource", init=False)

    def to_dict(self) -> dict[str, Any]:
        block: dict[str, Any] = {"type": self.type, "data": self.data, "mimeType": self.mime_type}
        if self.uri is not None:
            block["uri"] = self.uri
        return block


ContentBlock = TextContent | ImageContent | ResourceContent


def content_block_from_dict(block: Any) -> ContentBlock:
    """
    Parse one remote content block.

    Unknown or malformed blocks are kept as text so no output is lost.
    """
    if isinstance(block, str):
        return TextContent(block)
    if not isinstance(block, dict):
        return TextContent(oj.dumps_pretty(block))

    kind = block.get("type")
    if kind == "text" and isinstance(block.get("text"), str):
        return TextContent(block["text"])
    if kind == "image":
        return ImageContent(
            data=str(block.get("data", "")),
            mime_type=str(block.get("mimeType", "application/octet-stream")),
        )
    if kind == "resource":
        # Embedded resources nest their payload under "resource"
        inner = block.get("resource") if isinstance(block.get("resource"), dict) else block
        data = inner.get("data", inner.get("text", inner.get("blob", "")))
        return ResourceContent(
            data=data if isinstance(data, str) else oj.dumps_pretty(data),
            mime_type=str(inner.get("mimeType", "text/plain")),
            uri=inner.get("uri"),
        )
    return TextContent(oj.dumps_pretty(block))


@dataclass(frozen=True)
class ToolResult:
    """Outcome of a tool call; built fresh per call and never mutated."""

    content: tuple[ContentBlock, ...]
    is_error: bool = False

    @classmethod
    def from_text(cls, text: str, is_error: bool = False) -> "ToolResult":
        return cls(content=(TextContent(text),), is_error=is_error)

    @property
    def text(self) -> str:
        """All text blocks joined by newlines."""
        return "\n".join(block.text for block in self.content if isinstance(block, TextContent))

    def to_dict(self) -> dict[str, Any]:
        """Convert to wire format."""
        return {
            "content": [block.to_dict() for block in self.content],
            "isError": self.is_error,
        }
