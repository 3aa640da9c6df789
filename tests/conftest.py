# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Test Fixtures and Utilities

Provides in-memory stand-ins for the stdio transport and MCP client so the
session manager and focus service can be exercised without spawning
processes.
"""

import asyncio
import json
import os
import sys
from typing import Any, Callable, Dict, List, Optional

import pytest

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from focus_client.core.config import Config
from focus_client.focus_service import FocusService
from focus_client.mcp_exceptions import RemoteToolError
from focus_client.mcp_session_manager import MCPSessionManager
from focus_client.rpc_adapter import RPCAdapter


# ============================================================================
# Fake transport / client
# ============================================================================

class FakeTransport:
    """Records spawn arguments and lets tests fire close/error events"""

    def __init__(self, server: "FakeServer", command: str, args: List[str], env: Dict[str, str]):
        self.server = server
        self.command = command
        self.args = args
        self.env = env
        self.started = False
        self.closed = False
        self.close_calls = 0
        self._close_handlers: List[Callable[[], None]] = []
        self._error_handlers: List[Callable[[Exception], None]] = []

    def on_close(self, handler):
        self._close_handlers.append(handler)

    def on_error(self, handler):
        self._error_handlers.append(handler)

    async def start(self):
        if self.server.start_error:
            raise self.server.start_error
        self.started = True

    async def close(self):
        self.close_calls += 1
        if self.server.close_error:
            raise self.server.close_error
        if not self.closed:
            self.closed = True
            self.fire_close()

    def fire_close(self):
        for handler in list(self._close_handlers):
            handler()

    def fire_error(self, error: Exception):
        for handler in list(self._error_handlers):
            handler(error)


class FakeClient:
    """Answers tool calls from FakeServer.responses with JSON text content"""

    def __init__(self, server: "FakeServer", transport: FakeTransport, client_info: Dict, protocol_version: str):
        self.server = server
        self.transport = transport
        self.client_info = client_info
        self.protocol_version = protocol_version
        self.server_capabilities = {"tools": {}}
        self.server_info = {"name": "fake-context", "version": "0.0.1"}
        self.initialized = False

    async def initialize(self):
        if self.server.init_gate is not None:
            await self.server.init_gate.wait()
        if self.server.init_error:
            raise self.server.init_error
        self.initialized = True
        return {"protocolVersion": self.protocol_version}

    async def call_tool(self, tool_name: str, arguments: Dict, timeout: Optional[float] = None):
        self.server.calls.append((tool_name, dict(arguments)))
        if tool_name not in self.server.responses:
            raise RemoteToolError(tool_name, f"Unknown tool: {tool_name}", code=-32601)

        response = self.server.responses[tool_name]
        if callable(response):
            response = response(arguments)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, dict) and "content" in response:
            return response
        return {"content": [{"type": "text", "text": json.dumps(response)}]}

    async def close(self):
        await self.transport.close()


class FakeServer:
    """Configures fake behaviour and records everything the manager creates"""

    def __init__(self):
        self.responses: Dict[str, Any] = {}
        self.init_gate: Optional[asyncio.Event] = None
        self.init_error: Optional[Exception] = None
        self.start_error: Optional[Exception] = None
        self.close_error: Optional[Exception] = None
        self.transports: List[FakeTransport] = []
        self.clients: List[FakeClient] = []
        self.calls: List[tuple] = []

    def transport_factory(self, command, args, env):
        transport = FakeTransport(self, command, args, env)
        self.transports.append(transport)
        return transport

    def client_factory(self, transport, client_info, protocol_version):
        client = FakeClient(self, transport, client_info, protocol_version)
        self.clients.append(client)
        return client

    def tool_names(self) -> List[str]:
        return [name for name, _ in self.calls]

    async def wait_for_client(self, count: int = 1):
        while len(self.clients) < count:
            await asyncio.sleep(0.001)


class StaticLocator:
    """BinaryLocator stand-in"""

    def __init__(self, path: str = "/usr/bin/node", error: Optional[Exception] = None):
        self.path = path
        self.error = error
        self.calls = 0

    def locate(self) -> str:
        self.calls += 1
        if self.error:
            raise self.error
        return self.path


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def server_script(tmp_path):
    """Server entry point that exists on disk"""
    script = tmp_path / "thinking-partner-mcp" / "src" / "index.js"
    script.parent.mkdir(parents=True)
    script.write_text("// entry point\n")
    return script


@pytest.fixture
def config(server_script, tmp_path):
    return Config(
        server_path=str(server_script),
        context_file=str(tmp_path / "context.json"),
        interpreter_paths=["/usr/bin/node"],
        stabilization_delay=0
    )


@pytest.fixture
def fake_server():
    return FakeServer()


@pytest.fixture
def locator():
    return StaticLocator()


@pytest.fixture
def session_manager(config, fake_server, locator):
    return MCPSessionManager(
        config,
        locator=locator,
        transport_factory=fake_server.transport_factory,
        client_factory=fake_server.client_factory
    )


@pytest.fixture
def focus_service(session_manager, config):
    return FocusService(RPCAdapter(session_manager), config)


def _make_focus(focus_id: str, topic: str, status: str = "completed", **extra) -> Dict[str, Any]:
    focus = {
        "id": focus_id,
        "topic": topic,
        "context": "",
        "tool": "desktop",
        "status": status,
        "startedAt": "2025-06-01T09:00:00.000Z",
    }
    if status == "completed":
        focus["completedAt"] = "2025-06-01T10:00:00.000Z"
    focus.update(extra)
    return focus


@pytest.fixture
def make_focus():
    """Factory for wire-format focus dicts"""
    return _make_focus
