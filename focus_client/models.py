# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Focus Models

Pydantic models for the focus objects exchanged with the context server.
Wire names are camelCase; both wire and attribute names are accepted.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FocusTool(str, Enum):
    """Client surface that originated a focus"""
    DESKTOP = "desktop"
    CODE = "code"


class FocusStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


class Focus(BaseModel):
    """The unit of attention tracking"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = None
    topic: str
    context: str = ""
    tool: FocusTool = FocusTool.DESKTOP
    status: FocusStatus = FocusStatus.ACTIVE
    started_at: Optional[datetime] = Field(default=None, alias="startedAt")
    completed_at: Optional[datetime] = Field(default=None, alias="completedAt")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        # Older servers used Date.now() numbers as ids
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(int(value))
        return value

    @field_validator("context", mode="before")
    @classmethod
    def _none_context(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def is_active(self) -> bool:
        return self.status == FocusStatus.ACTIVE

    def complete(self, at: Optional[datetime] = None) -> "Focus":
        """Return a completed copy of this focus"""
        return self.model_copy(update={
            "status": FocusStatus.COMPLETED,
            "completed_at": at or datetime.now().astimezone()
        })

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation (camelCase, ISO timestamps, no null completedAt)"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class CurrentFocus(BaseModel):
    """Result of a current-focus query"""
    model_config = ConfigDict(populate_by_name=True)

    current_focus: Optional[Focus] = Field(default=None, alias="currentFocus")
    recent_context: List[Any] = Field(default_factory=list, alias="recentContext")

    @classmethod
    def empty(cls) -> "CurrentFocus":
        return cls(current_focus=None, recent_context=[])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currentFocus": self.current_focus.to_dict() if self.current_focus else None,
            "recentContext": list(self.recent_context),
        }


class ContextData(BaseModel):
    """Persisted context document: current focus plus completed history"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    current_focus: Optional[Focus] = Field(default=None, alias="currentFocus")
    focus_history: List[Focus] = Field(default_factory=list, alias="focusHistory")
