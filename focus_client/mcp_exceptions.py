# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
MCP Protocol Exception Classes
"""

from typing import List, Optional

from focus_client.core.errors import FocusClientError


class MCPConnectionError(FocusClientError):
    """Raised when a session with the MCP server cannot be established"""

    def __init__(self, message: str, server_name: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message, details=details)
        self.server_name = server_name


class BinaryNotFoundError(MCPConnectionError):
    """Raised when no candidate interpreter can run the server"""

    def __init__(self, interpreter_name: str, candidates: List[str]):
        super().__init__(
            f"{interpreter_name} not found. Please ensure {interpreter_name} is installed.",
            details={"candidates": list(candidates)}
        )
        self.interpreter_name = interpreter_name
        self.candidates = list(candidates)


class ServerNotInstalledError(MCPConnectionError):
    """Raised when the server entry point is missing on disk"""

    def __init__(self, server_name: str, server_path: str):
        super().__init__(
            f"MCP server not found at {server_path}. Please ensure {server_name} is installed.",
            server_name=server_name,
            details={"server_path": server_path}
        )
        self.server_path = server_path


class HandshakeFailedError(MCPConnectionError):
    """Raised when the server process could not be started or initialized"""

    def __init__(self, server_name: str, cause: BaseException):
        reason = str(cause) or cause.__class__.__name__
        super().__init__(
            f"Failed to connect to {server_name} server: {reason}",
            server_name=server_name,
            details={"cause": cause.__class__.__name__}
        )
        self.cause = cause


class TransportError(FocusClientError):
    """Raised when the stdio channel faults or closes under a request"""
    pass


class RemoteToolError(FocusClientError):
    """Raised when the server rejects a tool call"""

    def __init__(self, tool_name: str, message: str, code: Optional[int] = None):
        super().__init__(
            f"Tool call {tool_name} failed: {message}",
            details={"tool": tool_name, "code": code}
        )
        self.tool_name = tool_name
        self.code = code


class DecodeError(FocusClientError):
    """Raised when a tool response matches no known payload shape"""

    def __init__(self, message: str, tool_name: Optional[str] = None):
        super().__init__(message, details={"tool": tool_name} if tool_name else None)
        self.tool_name = tool_name


class MCPProtocolError(FocusClientError):
    """Raised when the server answers outside the MCP protocol"""
    pass
