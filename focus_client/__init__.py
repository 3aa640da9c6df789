# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Thinking Partner focus client
Keeps one stdio session with the thinking-partner MCP server and exposes
current focus, set focus and focus history operations.
"""

from focus_client.core.config import Config, get_config, load_config
from focus_client.focus_service import FocusService
from focus_client.focus_store import ContextStore
from focus_client.mcp_session_manager import MCPSessionManager, SessionState
from focus_client.models import ContextData, CurrentFocus, Focus, FocusStatus, FocusTool
from focus_client.rpc_adapter import RPCAdapter

__version__ = "1.0.0"

__all__ = [
    "Config",
    "ContextData",
    "ContextStore",
    "CurrentFocus",
    "Focus",
    "FocusService",
    "FocusStatus",
    "FocusTool",
    "MCPSessionManager",
    "RPCAdapter",
    "SessionState",
    "get_config",
    "load_config",
]
