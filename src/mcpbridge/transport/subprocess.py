"""Subprocess relay transport: one relay process per request."""

from __future__ import annotations

import asyncio
import logging
import os
import signal
from typing import Any

from mcpbridge.lib import oj
from mcpbridge.protocol.messages import ClientInfo, JSONRPCRequest, RequestIdGenerator
from mcpbridge.protocol.session import HandshakeSession
from mcpbridge.protocol.state import SessionState
from mcpbridge.transport.base import Transport, ProcessError, TimeoutError
from mcpbridge.transport.types import RelayConfig, TransportEventType

logger = logging.getLogger(__name__)

# Seconds to wait for a killed relay to be reaped and for its stderr to drain
KILL_GRACE = 5.0
STDERR_GRACE = 1.0

# End-of-stream marker on the output-line channel
_CLOSED = None


class SubprocessTransport(Transport):
    """
    Stateful sessions through an external relay process.

    Each request launches the relay with the endpoint URL as an argument,
    writes ``initialize`` to its stdin, and only after the relay answers with
    a protocol version writes the real request. Responses are read as
    newline-delimited JSON from stdout. The relay is killed when the matching
    response arrives, the timeout fires, or the process exits on its own,
    whichever happens first.
    """

    def __init__(
        self,
        config: RelayConfig,
        ids: RequestIdGenerator | None = None,
        client_info: ClientInfo | None = None,
    ):
        super().__init__()
        self.config = config
        self.ids = ids or RequestIdGenerator()
        self.client_info = client_info
        self._live: set[asyncio.subprocess.Process] = set()

    @property
    def live_processes(self) -> int:
        """Number of relay processes currently running."""
        return len(self._live)

    async def request(
        self,
        message: dict[str, Any],
        timeout: float | None = None,
    ) -> dict[str, Any]:
        budget = timeout if timeout is not None else self.config.timeout
        session = HandshakeSession(
            JSONRPCRequest.from_dict(message),
            self.ids,
            self.client_info,
        )
        session.machine.on_transition(self._on_session_transition)

        process = await self._spawn()
        lines: asyncio.Queue[bytes | None] = asyncio.Queue()
        pump = asyncio.create_task(self._pump(process.stdout, lines))
        stderr_task = asyncio.create_task(process.stderr.read())
        outcome = "error"

        try:
            await self._write(process, session.start())
            response = await asyncio.wait_for(
                self._converse(session, process, lines),
                timeout=budget,
            )
            outcome = "response"
            return response
        except asyncio.TimeoutError:
            outcome = "timeout"
            logger.warning(
                f"Relay gave no response to {session.operation.method} within {budget:g}s "
                f"(state {session.state})"
            )
            raise TimeoutError(f"No response from relay within {budget:g}s")
        finally:
            session.finish(outcome)
            await self._terminate(process)
            pump.cancel()
            await asyncio.gather(pump, return_exceptions=True)
            stderr = await self._collect_stderr(stderr_task)
            if stderr:
                if outcome == "response":
                    logger.debug(f"Relay stderr: {stderr}")
                else:
                    logger.warning(f"Relay stderr ({outcome}): {stderr}")

    async def _converse(
        self,
        session: HandshakeSession,
        process: asyncio.subprocess.Process,
        lines: asyncio.Queue[bytes | None],
    ) -> dict[str, Any]:
        """Feed output lines to the session until it reaches a terminal step."""
        while True:
            line = await lines.get()
            if line is _CLOSED:
                returncode = await process.wait()
                session.finish("process exit")
                raise ProcessError(
                    f"Relay exited with code {returncode} before responding",
                    returncode=returncode,
                )

            message = self._parse_line(line)
            if message is None:
                continue

            self._emit(
                TransportEventType.RESPONSE_RECEIVED,
                data={"id": message.get("id"), "method": message.get("method")},
            )
            step = session.feed(message)
            if step.outgoing is not None:
                await self._write(process, step.outgoing)
            if step.error is not None:
                raise step.error
            if step.response is not None:
                return step.response

    async def _spawn(self) -> asyncio.subprocess.Process:
        argv = self.config.argv()
        env = {**os.environ, **self.config.env} if self.config.env else None
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=env,
                limit=self.config.max_line_bytes,
                # Own process group so relay children die with it
                start_new_session=os.name == "posix",
            )
        except OSError as e:
            self._emit(TransportEventType.ERROR, error=e)
            raise ProcessError(f"Failed to launch relay {argv[0]!r}: {e}", cause=e)

        self._live.add(process)
        logger.debug(f"Spawned relay pid={process.pid} for {self.config.endpoint}")
        self._emit(
            TransportEventType.PROCESS_SPAWNED,
            data={"pid": process.pid, "command": list(self.config.command)},
        )
        return process

    async def _pump(
        self,
        stream: asyncio.StreamReader,
        lines: asyncio.Queue[bytes | None],
    ) -> None:
        """Copy stdout lines onto the channel; close the channel at end of stream."""
        try:
            while True:
                line = await stream.readline()
                if not line:
                    break
                lines.put_nowait(line)
        except ValueError as e:
            logger.warning(f"Relay output line exceeded {self.config.max_line_bytes} bytes: {e}")
        finally:
            lines.put_nowait(_CLOSED)

    async def _write(
        self,
        process: asyncio.subprocess.Process,
        message: dict[str, Any],
    ) -> None:
        try:
            process.stdin.write(oj.dumps_line(message))
            await process.stdin.drain()
        except (BrokenPipeError, ConnectionResetError) as e:
            raise ProcessError("Relay input stream closed", cause=e, returncode=process.returncode)

        logger.debug(f"-> relay {message.get('method')} id={message.get('id')}")
        self._emit(
            TransportEventType.REQUEST_SENT,
            data={"method": message.get("method"), "id": message.get("id")},
        )

    @staticmethod
    def _parse_line(line: bytes) -> dict[str, Any] | None:
        text = line.decode("utf-8", errors="replace").strip()
        if not text:
            return None
        try:
            message = oj.loads(text)
        except oj.JSONDecodeError:
            logger.debug(f"Skipping non-JSON relay output: {text[:200]}")
            return None
        if not isinstance(message, dict):
            logger.debug(f"Skipping non-object relay output: {text[:200]}")
            return None
        return message

    async def _terminate(self, process: asyncio.subprocess.Process) -> None:
        """Kill the relay (and its process group) and reap it."""
        if process.returncode is None:
            try:
                if os.name == "posix":
                    os.killpg(process.pid, signal.SIGKILL)
                else:
                    process.kill()
            except ProcessLookupError:
                pass
            except PermissionError:
                process.kill()

        try:
            await asyncio.wait_for(process.wait(), timeout=KILL_GRACE)
        except asyncio.TimeoutError:
            logger.warning(f"Relay pid={process.pid} not reaped within {KILL_GRACE:g}s")
        finally:
            self._live.discard(process)
            if process.stdin is not None and not process.stdin.is_closing():
                process.stdin.close()

        self._emit(
            TransportEventType.PROCESS_EXITED,
            data={"pid": process.pid, "returncode": process.returncode},
        )

    @staticmethod
    async def _collect_stderr(task: asyncio.Task) -> str:
        try:
            data = await asyncio.wait_for(task, timeout=STDERR_GRACE)
        except asyncio.TimeoutError:
            return ""
        return data.decode("utf-8", errors="replace").strip()

    def _on_session_transition(self, old: SessionState, new: SessionState) -> None:
        logger.debug(f"Relay session {old} -> {new}")
        self._emit(
            TransportEventType.SESSION_STATE,
            data={"from": old.name, "to": new.name},
        )

    async def close(self) -> None:
        """Kill every relay still running."""
        for process in list(self._live):
            await self._terminate(process)
