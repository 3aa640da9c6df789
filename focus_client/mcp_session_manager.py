# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
MCP Session Manager
Owns the single stdio session with the context server: launches the
process, performs the handshake, shares one in-flight attempt between
concurrent callers and drops the session when its transport closes.
"""

import asyncio
import logging
import os
from datetime import datetime
from enum import Enum
from typing import Callable, Optional, Set

from focus_client.binary_locator import BinaryLocator
from focus_client.core.config import Config
from focus_client.mcp_client import MCPClient
from focus_client.mcp_exceptions import (
    HandshakeFailedError,
    MCPConnectionError,
    ServerNotInstalledError
)
from focus_client.mcp_session import MCPSession
from focus_client.mcp_transport import StdioTransport

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class MCPSessionManager:
    """
    Manages the lifecycle of one MCP session.

    At most one connection attempt and one live server process exist at
    any time. Callers arriving while an attempt is in flight await that
    same attempt and observe the same outcome. Nothing is retried here;
    a failed attempt leaves the manager idle so the next acquire() starts
    over.

    release() during CONNECTING relaxes the one-process rule: the
    discarded attempt's child lives until its handshake finishes and the
    attempt closes it, and an acquire() made in that window spawns a
    second child alongside it.
    """

    def __init__(
        self,
        config: Config,
        locator: Optional[BinaryLocator] = None,
        transport_factory: Callable[..., StdioTransport] = StdioTransport,
        client_factory: Callable[..., MCPClient] = MCPClient
    ):
        self.config = config
        self.locator = locator or BinaryLocator(
            config.interpreter_paths,
            interpreter_name=config.interpreter_name
        )
        self.transport_factory = transport_factory
        self.client_factory = client_factory

        self._session: Optional[MCPSession] = None
        self._pending: Optional[asyncio.Task] = None
        self._reaping: Set[asyncio.Task] = set()
        self.connect_attempts = 0

    @property
    def state(self) -> SessionState:
        if self._session is not None:
            return SessionState.CONNECTED
        if self._pending is not None:
            return SessionState.CONNECTING
        return SessionState.IDLE

    @property
    def session(self) -> Optional[MCPSession]:
        return self._session

    async def __aenter__(self) -> "MCPSessionManager":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.release()

    async def acquire(self) -> MCPSession:
        """Get the cached session, join the in-flight attempt, or connect"""
        # Fast path
        if self._session is not None:
            return self._session

        if self._pending is None:
            self._pending = asyncio.create_task(self._connect())
            self._pending.add_done_callback(self._clear_pending)

        # Shield so one cancelled waiter does not cancel the shared attempt
        return await asyncio.shield(self._pending)

    async def release(self) -> None:
        """Disconnect. Local state is reset even if closing the client fails."""
        self._pending = None
        session, self._session = self._session, None
        if session is not None:
            logger.info(f"Disconnecting from {session.server_name} server")
            try:
                await session.close()
            except Exception as e:
                logger.error(f"Error closing client: {e}")

        # Wait for dropped sessions still shutting down their process
        if self._reaping:
            await asyncio.gather(*self._reaping, return_exceptions=True)

    def _clear_pending(self, task: asyncio.Task) -> None:
        if self._pending is task:
            self._pending = None
        # Mark the outcome retrieved even when every waiter was cancelled
        if not task.cancelled():
            task.exception()

    async def _connect(self) -> MCPSession:
        attempt = asyncio.current_task()
        self.connect_attempts += 1
        config = self.config
        server_name = config.server_name
        server_path = config.server_entry_point

        if not server_path.exists():
            raise ServerNotInstalledError(server_name, str(server_path))

        binary = await asyncio.to_thread(self.locator.locate)
        env = {**os.environ, **config.production_env}

        logger.info(f"Connecting to {server_name} server at {server_path}")
        transport = None
        try:
            transport = self.transport_factory(binary, [str(server_path)], env)
            await transport.start()

            client = self.client_factory(transport, config.client_info, config.protocol_version)
            if config.handshake_timeout:
                await asyncio.wait_for(client.initialize(), timeout=config.handshake_timeout)
            else:
                await client.initialize()
        except asyncio.CancelledError:
            if transport is not None:
                await self._close_transport(transport)
            raise
        except Exception as e:
            logger.error(f"Connection failed: {e}")
            if transport is not None:
                await self._close_transport(transport)
            raise HandshakeFailedError(server_name, e) from e

        if self._pending is not attempt:
            # release() ran while this attempt was in flight
            await self._close_transport(transport)
            raise MCPConnectionError(
                f"Connection to {server_name} server was released while connecting",
                server_name=server_name
            )

        session = MCPSession(
            server_name=server_name,
            transport=transport,
            client=client,
            protocol_version=client.protocol_version,
            initialized_at=datetime.now(),
            server_capabilities=client.server_capabilities,
            server_info=client.server_info
        )
        self._session = session

        transport.on_error(lambda error: self._handle_transport_error(session, error))
        transport.on_close(lambda: self._handle_transport_close(session))
        if transport.closed:
            self._session = None
            await self._close_transport(transport)
            raise HandshakeFailedError(server_name, ConnectionError("server exited after handshake"))

        logger.info(f"MCP session established with {server_name}")

        # Let the server settle before the first tool call
        if config.stabilization_delay:
            await asyncio.sleep(config.stabilization_delay)
        return session

    def _handle_transport_close(self, session: MCPSession) -> None:
        if self._session is session:
            logger.warning(f"Connection to {session.server_name} server closed")
            self._session = None
            # stdout EOF does not mean the process exited; stop it
            task = asyncio.ensure_future(self._reap(session))
            self._reaping.add(task)
            task.add_done_callback(self._reaping.discard)
        else:
            logger.debug("Ignoring close from a replaced session")

    async def _reap(self, session: MCPSession) -> None:
        try:
            await session.close()
        except Exception as e:
            logger.warning(f"Error shutting down dropped session: {e}")

    def _handle_transport_error(self, session: MCPSession, error: Exception) -> None:
        if self._session is session:
            logger.error(f"Transport error: {error}")
        else:
            logger.debug(f"Ignoring transport error from a replaced session: {error}")

    async def _close_transport(self, transport) -> None:
        try:
            await transport.close()
        except Exception as e:
            logger.warning(f"Error closing transport: {e}")
