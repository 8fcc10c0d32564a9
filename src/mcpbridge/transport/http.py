"""Direct HTTP transport: one POST per JSON-RPC request."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from mcpbridge.lib import oj
from mcpbridge.transport.base import (
    Transport,
    TransportError,
    DecodeError,
    TimeoutError,
)
from mcpbridge.transport.sse import decode_body
from mcpbridge.transport.types import TransportConfig, TransportEventType

logger = logging.getLogger(__name__)


class DirectTransport(Transport):
    """
    Stateless request/response over plain HTTP POST.

    Every request is an independent POST of the JSON-RPC envelope; no session
    survives between calls. Response bodies may be plain JSON or wrapped in
    an SSE ``data:`` line.
    """

    REQUEST_HEADERS = {
        "Content-Type": "application/json",
        "Accept": "application/json, text/event-stream",
    }

    def __init__(
        self,
        config: TransportConfig,
        http_client: httpx.AsyncClient | None = None,
    ):
        """
        Args:
            config: Endpoint and timeout configuration.
            http_client: Pre-built client (tests inject one backed by
                ``httpx.MockTransport``). When given, the caller owns it.
        """
        super().__init__()
        self.config = config
        self._client = http_client
        self._owns_client = http_client is None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            timeout = httpx.Timeout(
                connect=self.config.connect_timeout,
                read=self.config.timeout,
                write=self.config.timeout,
                pool=self.config.timeout,
            )
            # Full URL per request; base_url would add a trailing slash some servers reject
            self._client = httpx.AsyncClient(
                timeout=timeout,
                headers=self.config.headers,
                verify=self.config.verify_ssl,
                follow_redirects=True,
            )
            self._owns_client = True
        return self._client

    async def request(
        self,
        message: dict[str, Any],
        timeout: float | None = None,
    ) -> dict[str, Any]:
        client = self._ensure_client()
        headers = dict(self.REQUEST_HEADERS)
        if not self._owns_client:
            headers.update(self.config.headers)

        self._emit(
            TransportEventType.REQUEST_SENT,
            data={"method": message.get("method"), "id": message.get("id")},
        )
        logger.debug(f"POST {self.config.url} {message.get('method')} id={message.get('id')}")

        kwargs: dict[str, Any] = {}
        if timeout is not None:
            kwargs["timeout"] = timeout

        try:
            response = await client.post(
                self.config.url,
                content=oj.dumps(message),
                headers=headers,
                follow_redirects=True,
                **kwargs,
            )
        except httpx.TimeoutException as e:
            self._emit(TransportEventType.ERROR, error=e)
            raise TimeoutError(f"Request timed out: {e}", cause=e)
        except httpx.HTTPError as e:
            self._emit(TransportEventType.ERROR, error=e)
            raise TransportError(f"HTTP error: {e}", cause=e)

        if not response.is_success:
            raise TransportError(
                f"HTTP {response.status_code}: {response.reason_phrase}",
                status=response.status_code,
            )

        body = response.text
        logger.debug(f"Response body for id={message.get('id')}: {body[:500]}")
        payload = decode_body(body, response.headers.get("Content-Type", ""))
        if not isinstance(payload, dict):
            raise DecodeError(f"Expected a JSON-RPC object, got {type(payload).__name__}")

        self._emit(
            TransportEventType.RESPONSE_RECEIVED,
            data={"id": payload.get("id"), "status": response.status_code},
        )
        return payload

    async def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
