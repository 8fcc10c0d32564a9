"""Tool server configuration loading."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

from mcpbridge.lib import oj
from mcpbridge.protocol.messages import ClientInfo
from mcpbridge.transport.types import RelayConfig, TransportConfig

logger = logging.getLogger(__name__)

# Config file locations
MCP_CONFIG_FILENAME = "mcp.json"
GLOBAL_MCP_CONFIG = Path.home() / ".mcpbridge" / MCP_CONFIG_FILENAME
LOCAL_MCP_CONFIG_DIR = ".mcpbridge"

# Environment variables read by MCPServerConfig.from_env
ENV_SERVER_URL = "MCP_SERVER_URL"
ENV_AUTH_TOKEN = "MCP_AUTH_TOKEN"
ENV_TRANSPORT_POLICY = "MCP_TRANSPORT_POLICY"

SSE_SUFFIX = "/sse"


class TransportPolicy(Enum):
    """How the orchestrator reaches the server."""

    DIRECT_FIRST = "direct"
    """Stateless HTTP first; relay only as fallback for tool calls."""

    SUBPROCESS = "subprocess"
    """Server needs a stateful session: always go through the relay."""

    @classmethod
    def from_string(cls, value: str) -> "TransportPolicy":
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(
                f"Invalid transport policy: {value!r} "
                f"(expected one of {[p.value for p in cls]})"
            )


@dataclass
class MCPServerConfig:
    """Configuration for a single tool server."""

    url: str
    name: str = "default"
    headers: dict[str, str] = field(default_factory=dict)
    auth_token: str | None = None
    transport_policy: TransportPolicy = TransportPolicy.DIRECT_FIRST

    relay_command: tuple[str, ...] = ("npx", "mcp-remote")
    relay_env: dict[str, str] | None = None

    request_timeout: float = 30.0
    connect_timeout: float = 10.0
    discovery_timeout: float = 15.0
    call_timeout: float = 30.0
    proxy_timeout: float = 45.0

    cache_ttl: float = 300.0
    discovery_attempts: int = 1
    retry_delay: float = 1.0

    client_name: str = "mcpbridge"
    client_version: str = "1.0.0"

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not self.url:
            raise ValueError("url is required")
        if isinstance(self.transport_policy, str):
            self.transport_policy = TransportPolicy.from_string(self.transport_policy)
        self.relay_command = tuple(self.relay_command)
        if not self.relay_command:
            raise ValueError("relay_command must not be empty")
        for name in (
            "request_timeout",
            "connect_timeout",
            "discovery_timeout",
            "call_timeout",
            "proxy_timeout",
            "cache_ttl",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if self.discovery_attempts < 1:
            raise ValueError("discovery_attempts must be at least 1")
        if self.retry_delay < 0:
            raise ValueError("retry_delay must not be negative")

    @property
    def base_url(self) -> str:
        """POST target: the configured URL without a trailing ``/sse``."""
        url = self.url.rstrip("/")
        if url.endswith(SSE_SUFFIX):
            return url[: -len(SSE_SUFFIX)]
        return url

    @property
    def auth_headers(self) -> dict[str, str]:
        """Configured headers plus the bearer token, if any."""
        headers = dict(self.headers)
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"
        return headers

    @property
    def client_info(self) -> ClientInfo:
        return ClientInfo(name=self.client_name, version=self.client_version)

    def transport_config(self) -> TransportConfig:
        """Settings for the direct HTTP transport."""
        return TransportConfig(
            url=self.base_url,
            timeout=self.request_timeout,
            connect_timeout=self.connect_timeout,
            headers=self.auth_headers,
        )

    def relay_config(self) -> RelayConfig:
        """Settings for the subprocess relay transport."""
        return RelayConfig(
            endpoint=self.base_url,
            command=self.relay_command,
            headers=self.auth_headers,
            env=self.relay_env,
            timeout=self.call_timeout,
        )

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any]) -> "MCPServerConfig":
        """Create from config dict (camelCase keys, as in ``mcp.json``)."""
        kwargs: dict[str, Any] = {
            "name": name,
            "url": data.get("url", ""),
            "headers": data.get("headers", {}),
            "auth_token": data.get("authToken"),
        }
        optional = {
            "transportPolicy": "transport_policy",
            "relayCommand": "relay_command",
            "relayEnv": "relay_env",
            "requestTimeout": "request_timeout",
            "connectTimeout": "connect_timeout",
            "discoveryTimeout": "discovery_timeout",
            "callTimeout": "call_timeout",
            "proxyTimeout": "proxy_timeout",
            "cacheTtl": "cache_ttl",
            "discoveryAttempts": "discovery_attempts",
            "retryDelay": "retry_delay",
        }
        for key, attr in optional.items():
            if key in data:
                kwargs[attr] = data[key]
        return cls(**kwargs)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "MCPServerConfig":
        """
        Create from environment variables.

        Raises:
            ValueError: If ``MCP_SERVER_URL`` is not set.
        """
        environ = os.environ if environ is None else environ
        url = environ.get(ENV_SERVER_URL, "").strip()
        if not url:
            raise ValueError(f"{ENV_SERVER_URL} is required for the tool server connection")
        kwargs: dict[str, Any] = {
            "url": url,
            "auth_token": environ.get(ENV_AUTH_TOKEN) or None,
        }
        if environ.get(ENV_TRANSPORT_POLICY):
            kwargs["transport_policy"] = TransportPolicy.from_string(environ[ENV_TRANSPORT_POLICY])
        return cls(**kwargs)


def _load_file(path: Path, configs: dict[str, MCPServerConfig]) -> None:
    try:
        data = oj.loads(path.read_bytes())
    except (OSError, oj.JSONDecodeError) as e:
        logger.warning(f"Skipping unreadable config {path}: {e}")
        return

    servers = data.get("mcpServers", {}) if isinstance(data, dict) else {}
    for name, server_data in servers.items():
        if not isinstance(server_data, dict) or not server_data.get("url"):
            continue
        try:
            configs[name] = MCPServerConfig.from_dict(name, server_data)
        except (TypeError, ValueError) as e:
            logger.warning(f"Skipping invalid server {name!r} in {path}: {e}")


def load_mcp_config(working_dir: Path | None = None) -> dict[str, MCPServerConfig]:
    """Load tool server configs from global and local config files.

    Global config (~/.mcpbridge/mcp.json) is loaded first.
    Local config ({working_dir}/.mcpbridge/mcp.json) overrides global.

    Returns:
        Dict mapping server name to config.
    """
    configs: dict[str, MCPServerConfig] = {}

    if GLOBAL_MCP_CONFIG.exists():
        _load_file(GLOBAL_MCP_CONFIG, configs)

    if working_dir:
        local_config = working_dir / LOCAL_MCP_CONFIG_DIR / MCP_CONFIG_FILENAME
        if local_config.exists():
            _load_file(local_config, configs)

    return configs
