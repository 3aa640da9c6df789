# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
JSON-RPC 2.0 Message Builders for MCP Protocol over stdio
"""

import json
from typing import Dict, Any, Optional


def build_initialize_request(request_id: int, protocol_version: str, client_info: Dict[str, Any]) -> Dict:
    """Build JSON-RPC initialize request"""
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "method": "initialize",
        "params": {
            "protocolVersion": protocol_version,
            "capabilities": {
                "tools": {},
                "resources": {}
            },
            "clientInfo": client_info
        }
    }


def build_initialized_notification() -> Dict:
    """Build JSON-RPC initialized notification"""
    return {
        "jsonrpc": "2.0",
        "method": "notifications/initialized"
    }


def build_call_tool_request(request_id: int, tool_name: str, arguments: Dict) -> Dict:
    """Build JSON-RPC tools/call request"""
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "method": "tools/call",
        "params": {
            "name": tool_name,
            "arguments": arguments
        }
    }


def build_cancel_notification(request_id: int, reason: str = "Request timed out") -> Dict:
    """Build JSON-RPC cancellation notification"""
    return {
        "jsonrpc": "2.0",
        "method": "notifications/cancelled",
        "params": {
            "requestId": request_id,
            "reason": reason
        }
    }


def build_error_response(request_id: Any, code: int, message: str) -> Dict:
    """Build JSON-RPC error response, used to refuse server-to-client requests"""
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "error": {
            "code": code,
            "message": message
        }
    }


def encode_message(message: Dict) -> bytes:
    """Frame a message as one newline-terminated JSON line"""
    return (json.dumps(message, separators=(",", ":")) + "\n").encode("utf-8")


def decode_message(line: bytes) -> Optional[Dict]:
    """
    Parse one frame. Returns None for blank lines.

    Raises:
        ValueError: if the line is not a JSON object
    """
    text = line.decode("utf-8").strip()
    if not text:
        return None
    message = json.loads(text)
    if not isinstance(message, dict):
        raise ValueError(f"Expected JSON object frame, got {type(message).__name__}")
    return message


def is_response(message: Dict) -> bool:
    return "id" in message and ("result" in message or "error" in message) and "method" not in message
