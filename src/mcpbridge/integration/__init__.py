"""
Orchestration layer.

Discovery and execution protocols per transport, and the orchestrator that
selects between them and owns the tool cache.
"""

from mcpbridge.integration.discovery import discover_direct, discover_stateful
from mcpbridge.integration.execution import call_direct, call_stateful
from mcpbridge.integration.orchestrator import ToolOrchestrator, create_orchestrator

__all__ = [
    "discover_direct",
    "discover_stateful",
    "call_direct",
    "call_stateful",
    "ToolOrchestrator",
    "create_orchestrator",
]
