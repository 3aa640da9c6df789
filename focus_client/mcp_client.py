# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
MCP Client
Performs the initialize handshake and tools/call requests over a transport
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from focus_client.mcp_exceptions import MCPProtocolError, RemoteToolError, TransportError
from focus_client.mcp_jsonrpc import (
    build_initialize_request,
    build_initialized_notification,
    build_call_tool_request,
    build_cancel_notification
)

logger = logging.getLogger(__name__)


class MCPClient:
    """JSON-RPC client bound to one transport for its whole life"""

    def __init__(self, transport, client_info: Dict[str, Any], protocol_version: str = "2025-11-25"):
        self.transport = transport
        self.client_info = client_info
        self.protocol_version = protocol_version
        self.server_capabilities: Dict[str, Any] = {}
        self.server_info: Dict[str, Any] = {}
        self.request_id_counter = 0

    def _next_request_id(self) -> int:
        """Generate next request ID"""
        self.request_id_counter += 1
        return self.request_id_counter

    async def initialize(self) -> Dict[str, Any]:
        """Perform the initialize / notifications/initialized handshake"""
        request = build_initialize_request(self._next_request_id(), self.protocol_version, self.client_info)
        response = await self.transport.request(request)

        if "error" in response:
            error = response["error"] or {}
            message = error.get("message", "Unknown error") if isinstance(error, dict) else error
            raise MCPProtocolError(f"Initialize error: {message}")

        result = response.get("result")
        if not isinstance(result, dict):
            raise MCPProtocolError("Initialize response carried no result")

        self.server_capabilities = result.get("capabilities", {})
        self.server_info = result.get("serverInfo", {})
        self.protocol_version = result.get("protocolVersion") or self.protocol_version

        await self.transport.notify(build_initialized_notification())
        logger.info(
            f"MCP handshake complete with {self.server_info.get('name', 'server')} "
            f"(protocol {self.protocol_version})"
        )
        return result

    async def call_tool(self, tool_name: str, arguments: Dict, timeout: Optional[float] = None) -> Dict:
        """
        Call tool using JSON-RPC tools/call

        Raises:
            RemoteToolError: the server rejected the call or flagged isError
            TransportError: the channel failed or the call timed out
        """
        request_id = self._next_request_id()
        request = build_call_tool_request(request_id, tool_name, arguments)

        try:
            if timeout is None:
                response = await self.transport.request(request)
            else:
                response = await asyncio.wait_for(self.transport.request(request), timeout=timeout)
        except asyncio.TimeoutError:
            try:
                await self.transport.notify(build_cancel_notification(request_id))
                logger.info(f"Sent cancellation notification for request {request_id}")
            except TransportError as cancel_error:
                logger.warning(f"Failed to send cancellation: {cancel_error}")
            raise TransportError(f"Tool call {tool_name} timed out after {timeout}s")

        if "error" in response:
            error = response["error"] or {}
            if not isinstance(error, dict):
                raise MCPProtocolError(f"Tool call {tool_name} returned a malformed error: {error!r}")
            raise RemoteToolError(tool_name, error.get("message", "Unknown error"), code=error.get("code"))

        result = response.get("result") or {}
        if not isinstance(result, dict):
            raise MCPProtocolError(f"Tool call {tool_name} returned a malformed result: {result!r}")
        if result.get("isError"):
            raise RemoteToolError(tool_name, _first_text(result) or "Tool reported an error")
        return result

    async def close(self) -> None:
        await self.transport.close()


def _first_text(result: Dict) -> Optional[str]:
    for item in result.get("content") or []:
        if isinstance(item, dict) and isinstance(item.get("text"), str):
            return item["text"]
    return None
