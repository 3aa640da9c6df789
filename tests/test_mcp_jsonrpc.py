# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""Unit tests for MCP JSON-RPC message builders and framing"""

import json

import pytest
from focus_client.mcp_jsonrpc import (
    build_initialize_request,
    build_initialized_notification,
    build_call_tool_request,
    build_cancel_notification,
    build_error_response,
    decode_message,
    encode_message,
    is_response
)


def test_build_initialize_request():
    """Test initialize request builder"""
    client_info = {"name": "thinking-partner-raycast", "version": "1.0.0"}
    request = build_initialize_request(1, "2025-11-25", client_info)

    assert request["jsonrpc"] == "2.0"
    assert request["id"] == 1
    assert request["method"] == "initialize"
    assert request["params"]["protocolVersion"] == "2025-11-25"
    assert request["params"]["clientInfo"] == client_info
    assert request["params"]["capabilities"] == {"tools": {}, "resources": {}}


def test_build_initialized_notification():
    """Test initialized notification builder"""
    notification = build_initialized_notification()

    assert notification["jsonrpc"] == "2.0"
    assert notification["method"] == "notifications/initialized"
    assert "id" not in notification  # Notifications don't have IDs


def test_build_call_tool_request():
    """Test call tool request builder"""
    request = build_call_tool_request(3, "set_focus", {"topic": "Write spec", "context": "", "tool": "desktop"})

    assert request["jsonrpc"] == "2.0"
    assert request["id"] == 3
    assert request["method"] == "tools/call"
    assert request["params"]["name"] == "set_focus"
    assert request["params"]["arguments"]["topic"] == "Write spec"


def test_build_cancel_notification():
    """Test cancel notification builder"""
    notification = build_cancel_notification(4, "Timeout")

    assert notification["method"] == "notifications/cancelled"
    assert notification["params"] == {"requestId": 4, "reason": "Timeout"}
    assert "id" not in notification


def test_build_cancel_notification_default_reason():
    """Test cancel notification with default reason"""
    notification = build_cancel_notification(5)

    assert notification["params"]["reason"] == "Request timed out"


def test_build_error_response():
    response = build_error_response(7, -32601, "Method not found: sampling/createMessage")

    assert response["id"] == 7
    assert response["error"]["code"] == -32601
    assert "result" not in response


def test_encode_message_is_one_line():
    frame = encode_message(build_call_tool_request(1, "get_context", {"scope": "current", "note": "a\nb"}))

    assert frame.endswith(b"\n")
    assert frame.count(b"\n") == 1
    assert json.loads(frame)["params"]["arguments"]["note"] == "a\nb"


def test_decode_message():
    assert decode_message(b'{"jsonrpc": "2.0", "id": 1, "result": {}}\n') == {"jsonrpc": "2.0", "id": 1, "result": {}}


def test_decode_blank_line_returns_none():
    assert decode_message(b"   \n") is None


@pytest.mark.parametrize("line", [b"not json\n", b"[1, 2]\n", b"\xff\xfe\n"])
def test_decode_rejects_non_object_frames(line):
    with pytest.raises(ValueError):
        decode_message(line)


def test_is_response():
    assert is_response({"jsonrpc": "2.0", "id": 1, "result": {}})
    assert is_response({"jsonrpc": "2.0", "id": 1, "error": {"code": -1, "message": "x"}})
    assert not is_response({"jsonrpc": "2.0", "method": "notifications/message"})
    assert not is_response({"jsonrpc": "2.0", "id": 9, "method": "roots/list"})
