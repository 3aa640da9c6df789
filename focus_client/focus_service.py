# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Focus Service

Domain operations on top of the RPC adapter. Read operations never raise:
they log and fall back to empty results. Writes raise, because an empty
answer would hide a lost write.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

from focus_client.core.config import Config
from focus_client.core.errors import FocusClientError
from focus_client.core.logging import log_event
from focus_client.decoders import (
    CURRENT_FOCUS_DECODERS,
    HISTORY_DECODERS,
    SET_FOCUS_DECODERS,
    Decoder,
    first_match
)
from focus_client.mcp_exceptions import DecodeError, MCPConnectionError
from focus_client.mcp_session_manager import MCPSessionManager
from focus_client.models import CurrentFocus, Focus, FocusTool
from focus_client.rpc_adapter import RPCAdapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryStrategy:
    """One way of asking the server for focus history"""
    tool_name: str
    arguments: Dict[str, Any]
    decoders: Sequence[Decoder] = field(default=HISTORY_DECODERS)


class FocusService:
    """Current focus, set focus and focus history over one managed session"""

    def __init__(self, rpc: RPCAdapter, config: Config):
        self.rpc = rpc
        self.config = config

    @classmethod
    def from_config(cls, config: Config) -> "FocusService":
        """Wire a service, session manager and adapter from configuration"""
        manager = MCPSessionManager(config)
        return cls(RPCAdapter(manager, call_timeout=config.call_timeout), config)

    @property
    def session_manager(self) -> MCPSessionManager:
        return self.rpc.session_manager

    async def connect(self) -> None:
        """Establish the session now; connection errors propagate (retry action)"""
        await self.session_manager.acquire()

    async def disconnect(self) -> None:
        await self.session_manager.release()

    def history_strategies(self) -> List[HistoryStrategy]:
        tool = self.config.default_tool
        strategies = [
            HistoryStrategy("get_focus_history", {"tool": tool, "limit": self.config.history_limit})
        ]
        for scope in self.config.history_scopes:
            strategies.append(HistoryStrategy("get_context", {"tool": tool, "scope": scope}))
        return strategies

    async def get_current_focus(self) -> CurrentFocus:
        """Return the active focus and recent context, or an empty result"""
        try:
            payload = await self.rpc.call(
                "get_context",
                {"tool": self.config.default_tool, "scope": "current"}
            )
        except FocusClientError as e:
            logger.error(f"Failed to get current focus: {e}")
            return CurrentFocus.empty()

        result = first_match(CURRENT_FOCUS_DECODERS, payload)
        if result is None:
            logger.warning("get_context returned an unrecognised payload, assuming no focus")
            return CurrentFocus.empty()
        return result

    async def set_focus(
        self,
        topic: str,
        context: Optional[str] = None,
        tool: Optional[Union[str, FocusTool]] = None
    ) -> Focus:
        """
        Make topic the active focus. The server completes the previous one.

        Raises:
            MCPConnectionError: no session could be established
            RemoteToolError: the server rejected set_focus
            DecodeError: the response carried no recognisable focus
        """
        surface = FocusTool(tool or self.config.default_tool)
        payload = await self.rpc.call(
            "set_focus",
            {"topic": topic, "context": context or "", "tool": surface.value}
        )

        focus = first_match(SET_FOCUS_DECODERS, payload)
        if focus is None:
            raise DecodeError("Failed to set focus: response carried no focus", tool_name="set_focus")

        log_event(logger, "focus_set", focus_id=focus.id, topic=focus.topic, surface=focus.tool.value)
        return focus

    async def get_focus_history(self) -> List[Focus]:
        """Try each history strategy in order; never raises"""
        for strategy in self.history_strategies():
            try:
                payload = await self.rpc.call(strategy.tool_name, strategy.arguments)
            except MCPConnectionError as e:
                logger.error(f"Failed to get focus history: {e}")
                return []
            except FocusClientError as e:
                logger.info(f"History via {strategy.tool_name} {strategy.arguments} unavailable: {e}")
                continue

            history = first_match(strategy.decoders, payload)
            if history:
                return history
            logger.debug(f"No history in {strategy.tool_name} {strategy.arguments} response")

        current = await self.get_current_focus()
        if current.current_focus is not None:
            return [current.current_focus]
        return []
