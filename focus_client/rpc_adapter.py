# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
RPC Adapter
Issues tool calls over the managed session and parses the JSON text
payload each tool returns.
"""

import json
import logging
from typing import Any, Dict, Optional

from focus_client.mcp_exceptions import DecodeError
from focus_client.mcp_session_manager import MCPSessionManager

logger = logging.getLogger(__name__)


def extract_text(result: Dict) -> Optional[str]:
    """Return the first text-bearing content item of a tools/call result"""
    for item in result.get("content") or []:
        if not isinstance(item, dict):
            continue
        if item.get("type", "text") == "text" and isinstance(item.get("text"), str):
            return item["text"]
    return None


def parse_payload(tool_name: str, result: Dict) -> Any:
    """
    Parse the structured payload of a tool result.

    Raises:
        DecodeError: no text content, or the text is not JSON
    """
    text = extract_text(result)
    if text is None:
        raise DecodeError(f"Tool {tool_name} returned no text content", tool_name=tool_name)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Tool {tool_name} returned non-JSON text: {e}", tool_name=tool_name) from e


class RPCAdapter:
    """Named tool invocations against whatever session the manager holds"""

    def __init__(self, session_manager: MCPSessionManager, call_timeout: Optional[float] = None):
        self.session_manager = session_manager
        self.call_timeout = call_timeout

    async def call(self, tool_name: str, arguments: Dict[str, Any]) -> Any:
        """
        Call a tool and return its decoded JSON payload.

        Raises:
            MCPConnectionError: no session could be established
            RemoteToolError: the server rejected the call
            TransportError: the channel failed during the call
            DecodeError: the response could not be parsed
        """
        session = await self.session_manager.acquire()
        logger.debug(f"Calling tool {tool_name} with {arguments}")
        result = await session.client.call_tool(tool_name, arguments, timeout=self.call_timeout)
        return parse_payload(tool_name, result)
