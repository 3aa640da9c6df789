# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
MCP Session Data Structure
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any, TYPE_CHECKING

if TYPE_CHECKING:
    from focus_client.mcp_client import MCPClient
    from focus_client.mcp_transport import StdioTransport


@dataclass(eq=False)
class MCPSession:
    """A live transport/client pair; compared by identity, destroyed as a unit"""
    server_name: str
    transport: "StdioTransport"
    client: "MCPClient"
    protocol_version: str
    initialized_at: datetime
    server_capabilities: Dict[str, Any] = field(default_factory=dict)
    server_info: Dict[str, Any] = field(default_factory=dict)

    async def close(self) -> None:
        await self.client.close()
