# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
MCP stdio transport
Spawns the server as a child process and exchanges newline-delimited
JSON-RPC frames over its stdin/stdout.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from focus_client.mcp_exceptions import TransportError
from focus_client.mcp_jsonrpc import (
    build_error_response,
    decode_message,
    encode_message,
    is_response
)

logger = logging.getLogger(__name__)

CloseHandler = Callable[[], None]
ErrorHandler = Callable[[Exception], None]

# Large tool payloads (full focus history) exceed asyncio's 64 KiB default
STREAM_LIMIT = 4 * 1024 * 1024


class StdioTransport:
    """
    Child-process channel carrying MCP frames.

    Observers registered with on_close/on_error are called from the
    reader task. on_close fires exactly once per transport.
    """

    def __init__(
        self,
        command: str,
        args: Sequence[str],
        env: Optional[Dict[str, str]] = None,
        close_grace: float = 2.0
    ):
        self.command = command
        self.args = list(args)
        self.env = env
        self.close_grace = close_grace

        self.process: Optional[asyncio.subprocess.Process] = None
        self._reader_task: Optional[asyncio.Task] = None
        self._stderr_task: Optional[asyncio.Task] = None
        self._pending: Dict[Any, asyncio.Future] = {}
        self._write_lock = asyncio.Lock()
        self._close_handlers: List[CloseHandler] = []
        self._error_handlers: List[ErrorHandler] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def on_close(self, handler: CloseHandler) -> None:
        self._close_handlers.append(handler)

    def on_error(self, handler: ErrorHandler) -> None:
        self._error_handlers.append(handler)

    async def start(self) -> None:
        """Spawn the server process and begin reading its output"""
        logger.info(f"Spawning MCP server: {self.command} {' '.join(self.args)}")
        self.process = await asyncio.create_subprocess_exec(
            self.command,
            *self.args,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=self.env,
            limit=STREAM_LIMIT
        )
        self._reader_task = asyncio.create_task(self._read_loop())
        self._stderr_task = asyncio.create_task(self._drain_stderr())

    async def request(self, message: Dict) -> Dict:
        """Send a request and wait for the response carrying the same id"""
        if self._closed or self.process is None:
            raise TransportError("Transport is not open")

        request_id = message["id"]
        future = asyncio.get_running_loop().create_future()
        self._pending[request_id] = future
        try:
            await self._send(message)
            return await future
        finally:
            self._pending.pop(request_id, None)

    async def notify(self, message: Dict) -> None:
        """Send a notification (no response expected)"""
        if self._closed or self.process is None:
            raise TransportError("Transport is not open")
        await self._send(message)

    async def close(self) -> None:
        """Close stdin, stop the process and wait for the reader to finish"""
        process = self.process
        if process is None:
            self._mark_closed()
            return

        if process.stdin and not process.stdin.is_closing():
            process.stdin.close()

        if process.returncode is None:
            try:
                process.terminate()
                await asyncio.wait_for(process.wait(), timeout=self.close_grace)
            except ProcessLookupError:
                pass
            except asyncio.TimeoutError:
                logger.warning(f"MCP server pid {process.pid} ignored SIGTERM, killing")
                process.kill()
                await process.wait()

        if self._reader_task:
            await asyncio.gather(self._reader_task, return_exceptions=True)
        if self._stderr_task and not self._stderr_task.done():
            self._stderr_task.cancel()
            await asyncio.gather(self._stderr_task, return_exceptions=True)

        self._mark_closed()

    async def _send(self, message: Dict) -> None:
        async with self._write_lock:
            try:
                self.process.stdin.write(encode_message(message))
                await self.process.stdin.drain()
            except (ConnectionError, OSError, RuntimeError) as e:
                error = TransportError(f"Failed to write to server: {e}")
                self._emit_error(error)
                raise error from e

    async def _read_loop(self) -> None:
        try:
            while True:
                line = await self.process.stdout.readline()
                if not line:
                    break

                try:
                    message = decode_message(line)
                except ValueError as e:
                    self._emit_error(TransportError(f"Malformed frame from server: {e}"))
                    continue

                if message is not None:
                    await self._dispatch(message)
        except (OSError, ValueError) as e:
            self._emit_error(TransportError(f"Failed to read from server: {e}"))
        finally:
            logger.info(f"MCP server stdout closed (returncode={self.process.returncode})")
            self._mark_closed()

    async def _dispatch(self, message: Dict) -> None:
        if is_response(message):
            future = self._pending.get(message["id"])
            if future is not None and not future.done():
                future.set_result(message)
            else:
                logger.debug(f"Dropping response for unknown request id {message['id']!r}")
            return

        method = message.get("method", "unknown")
        if "id" in message:
            # Server-to-client requests (sampling, roots) are not supported
            logger.debug(f"Refusing server request: {method}")
            try:
                await self._send(build_error_response(message["id"], -32601, f"Method not found: {method}"))
            except TransportError as e:
                # Already reported through on_error
                logger.debug(f"Could not refuse server request {method}: {e}")
        else:
            logger.debug(f"Server notification: {method} - {message.get('params', {})}")

    async def _drain_stderr(self) -> None:
        while True:
            line = await self.process.stderr.readline()
            if not line:
                return
            logger.debug(f"[server stderr] {line.decode('utf-8', errors='replace').rstrip()}")

    def _emit_error(self, error: Exception) -> None:
        logger.warning(f"Transport error: {error}")
        for handler in list(self._error_handlers):
            try:
                handler(error)
            except Exception:
                logger.exception("Transport error handler failed")

    def _mark_closed(self) -> None:
        if self._closed:
            return
        self._closed = True

        for future in self._pending.values():
            if not future.done():
                future.set_exception(TransportError("Connection to server closed"))
        self._pending.clear()

        for handler in list(self._close_handlers):
            try:
                handler()
            except Exception:
                logger.exception("Transport close handler failed")
