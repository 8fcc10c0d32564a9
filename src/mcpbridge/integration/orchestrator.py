"""Tool discovery and execution across direct and relay transports."""

from __future__ import annotations

import asyncio
import logging

from mcpbridge.config import MCPServerConfig, TransportPolicy
from mcpbridge.integration.discovery import discover_direct, discover_stateful
from mcpbridge.integration.execution import call_direct, call_stateful
from mcpbridge.protocol.errors import ProtocolError
from mcpbridge.protocol.messages import RequestIdGenerator
from mcpbridge.tools.cache import ToolCache
from mcpbridge.tools.normalizer import normalize_failure
from mcpbridge.tools.types import Tool, ToolCall, ToolResult
from mcpbridge.transport.base import Transport, TransportError
from mcpbridge.transport.http import DirectTransport
from mcpbridge.transport.subprocess import SubprocessTransport

logger = logging.getLogger(__name__)


class ToolOrchestrator:
    """
    Discovers and calls the tools of one remote server.

    The server is reached either with stateless HTTP POSTs or through a relay
    subprocess that holds a stateful session for one request at a time. The
    configured ``TransportPolicy`` picks the discovery path; tool calls try
    the direct path first and fall back to the relay on failure.

    Public operations never raise: discovery resolves to a (possibly empty)
    tool list and calls resolve to a ``ToolResult``.

    Example:
        config = MCPServerConfig(url="https://tools.example.com/mcp/sse")
        orchestrator = ToolOrchestrator(config)

        tools = await orchestrator.discover_tools()
        result = await orchestrator.call_tool(ToolCall("search", {"q": "cats"}))
        await orchestrator.disconnect()
    """

    def __init__(
        self,
        config: MCPServerConfig,
        direct: Transport | None = None,
        relay: Transport | None = None,
        cache: ToolCache | None = None,
        ids: RequestIdGenerator | None = None,
    ):
        """
        Args:
            config: Server configuration.
            direct: Stateless transport; built from ``config`` when omitted.
            relay: Stateful transport; built from ``config`` when omitted.
            cache: Discovery cache owned by this orchestrator.
            ids: Request id source shared by both transports.
        """
        self.config = config
        self.ids = ids or RequestIdGenerator()
        self.direct = direct or DirectTransport(config.transport_config())
        self.relay = relay or SubprocessTransport(
            config.relay_config(),
            ids=self.ids,
            client_info=config.client_info,
        )
        self._cache = cache or ToolCache(ttl=config.cache_ttl)
        self._tools: list[Tool] = []
        self._connected = False
        self._relay_session = False

    @property
    def cache(self) -> ToolCache:
        return self._cache

    def is_connected(self) -> bool:
        """True once a discovery has produced tools and until ``disconnect``."""
        return self._connected

    def get_tools(self) -> list[Tool]:
        """Tools from the last successful discovery, regardless of cache age."""
        return list(self._tools)

    def clear_cache(self) -> None:
        self._cache.clear()

    async def discover_tools(self, force_refresh: bool = False) -> list[Tool]:
        """
        Return the server's tools, from cache when fresh.

        Args:
            force_refresh: Drop the session and cache before discovering.
        """
        try:
            if force_refresh:
                logger.info("Forced tool refresh")
                await self.disconnect()
                self._cache.clear()
            else:
                cached = self._cache.get()
                if cached is not None:
                    logger.debug(f"Serving {len(cached)} cached tools")
                    return cached

            tools = await self._discover_with_retry()
        except Exception:
            logger.exception("Tool discovery failed")
            return []

        if not tools:
            logger.warning(f"No tools discovered from {self.config.base_url}")
            return []

        self._cache.store(tools)
        self._tools = list(tools)
        self._connected = True
        self._relay_session = self.config.transport_policy is TransportPolicy.SUBPROCESS
        return tools

    async def _discover_with_retry(self) -> list[Tool]:
        attempts = self.config.discovery_attempts
        for attempt in range(1, attempts + 1):
            tools = await self._discover_once()
            if tools:
                return tools
            if attempt < attempts:
                logger.info(
                    f"Discovery attempt {attempt}/{attempts} found no tools, "
                    f"retrying in {self.config.retry_delay:g}s"
                )
                await asyncio.sleep(self.config.retry_delay)
        return []

    async def _discover_once(self) -> list[Tool]:
        if self.config.transport_policy is TransportPolicy.SUBPROCESS:
            logger.info(f"Discovering tools through relay for {self.config.base_url}")
            return await discover_stateful(
                self.relay,
                self.ids,
                timeout=self.config.discovery_timeout,
            )

        logger.info(f"Discovering tools directly from {self.config.base_url}")
        return await discover_direct(self.direct, self.ids, self.config.client_info)

    async def call_tool(self, call: ToolCall) -> ToolResult:
        """Invoke a tool. Failures come back as ``ToolResult(is_error=True)``."""
        try:
            if self._relay_session:
                return await call_stateful(
                    self.relay,
                    self.ids,
                    call,
                    timeout=self.config.call_timeout,
                )

            try:
                return await call_direct(self.direct, self.ids, call)
            except (TransportError, ProtocolError) as e:
                logger.info(f"Direct call to {call.name!r} failed, falling back to relay: {e}")

            return await call_stateful(
                self.relay,
                self.ids,
                call,
                timeout=self.config.proxy_timeout,
            )
        except Exception as e:
            logger.exception(f"Unexpected failure calling tool {call.name!r}")
            return normalize_failure(e)

    async def disconnect(self) -> None:
        """Kill live relays, close HTTP connections, and forget discovered tools."""
        try:
            await self.relay.close()
            await self.direct.close()
        except Exception:
            logger.exception("Error while disconnecting")
        finally:
            self._tools = []
            self._connected = False
            self._relay_session = False

    async def __aenter__(self) -> "ToolOrchestrator":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()


def create_orchestrator(config: MCPServerConfig | None = None) -> ToolOrchestrator:
    """
    Build an orchestrator from ``config`` or, when omitted, the environment.

    Raises:
        ValueError: If no config is given and ``MCP_SERVER_URL`` is unset.
    """
    return ToolOrchestrator(config or MCPServerConfig.from_env())
