"""Tool data model, result normalization, and discovery cache."""

from mcpbridge.tools.types import (
    DEFAULT_DESCRIPTION,
    ContentBlock,
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
from mcpbridge.tools.normalizer import (
    extract_error_message,
    normalize,
    normalize_failure,
    normalize_response,
)
from mcpbridge.tools.cache import DEFAULT_TTL, ToolCache

__all__ = [
    "DEFAULT_DESCRIPTION",
    "ContentBlock",
    "ImageContent",
    "ResourceContent",
    "TextContent",
    "Tool",
    "ToolCall",
    "ToolResult",
    "default_input_schema",
    "tools_from_capabilities",
    "tools_from_descriptors",
    "extract_error_message",
    "normalize",
    "normalize_failure",
    "normalize_response",
    "DEFAULT_TTL",
    "ToolCache",
]
