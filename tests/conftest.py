"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import httpx
import pytest

from fixtures.remote import ScriptedServer
from mcpbridge.transport import DirectTransport, RelayConfig, SubprocessTransport, TransportConfig

# Enable async tests
pytest_plugins = ["pytest_asyncio"]

FAKE_RELAY = Path(__file__).parent / "fixtures" / "fake_relay.py"
SERVER_URL = "https://tools.example.com/mcp"


@pytest.fixture
def make_direct():
    """Build a DirectTransport wired to a ScriptedServer."""

    def factory(server: ScriptedServer, **config) -> DirectTransport:
        client = httpx.AsyncClient(transport=httpx.MockTransport(server))
        return DirectTransport(TransportConfig(url=SERVER_URL, **config), http_client=client)

    return factory


@pytest.fixture
def relay_command() -> tuple[str, ...]:
    """Launch the fake relay with the running interpreter."""
    return (sys.executable, str(FAKE_RELAY))


@pytest.fixture
def make_relay(relay_command):
    """Build a SubprocessTransport running the fake relay in a given mode."""

    def factory(mode: str, **config) -> SubprocessTransport:
        return SubprocessTransport(
            RelayConfig(endpoint=f"http://relay.test/{mode}", command=relay_command, **config)
        )

    return factory
