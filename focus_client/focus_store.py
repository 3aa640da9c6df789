# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Context Store - direct access to the server's context.json
Responsibilities:
- Read current focus and focus history
- Complete the active focus before starting a new one
- Preserve keys owned by the server when writing
- Write atomically (temp file + rename)

The RPC core never touches this file; it exists for offline use.
"""
import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Union

from ulid import ULID

from focus_client.models import ContextData, Focus, FocusStatus, FocusTool

logger = logging.getLogger(__name__)


class ContextStore:
    """Reads and writes the {currentFocus, focusHistory} document"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def read(self) -> ContextData:
        """Return stored context, or empty context if missing or unreadable"""
        raw = self._read_raw()
        try:
            return ContextData.model_validate({
                "currentFocus": raw.get("currentFocus"),
                "focusHistory": raw.get("focusHistory") or [],
            })
        except ValueError as e:
            logger.error(f"Failed to read context data: {e}")
            return ContextData()

    def write(self, data: ContextData) -> None:
        """Replace currentFocus and focusHistory, keeping any other keys"""
        document = self._read_raw()
        document["currentFocus"] = data.current_focus.to_dict() if data.current_focus else None
        document["focusHistory"] = [focus.to_dict() for focus in data.focus_history]
        self._write_atomic(document)

    def set_focus(
        self,
        topic: str,
        context: str = "",
        tool: Union[str, FocusTool] = FocusTool.DESKTOP
    ) -> Focus:
        """
        Start a new focus

        The active focus, if any, is completed and moved to the front of
        history before the new one is installed.

        Returns:
            The new active focus
        """
        data = self.read()
        now = datetime.now(timezone.utc)

        if data.current_focus is not None:
            data.focus_history.insert(0, data.current_focus.complete(now))

        focus = Focus(
            id=str(ULID()),
            topic=topic,
            context=context or "",
            tool=FocusTool(tool),
            status=FocusStatus.ACTIVE,
            started_at=now
        )
        data.current_focus = focus
        self.write(data)
        return focus

    def _read_raw(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r') as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read {self.path}: {e}")
            return {}
        return document if isinstance(document, dict) else {}

    def _write_atomic(self, document: Dict[str, Any]) -> None:
        """Write JSON file atomically using temp file + rename"""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_file = self.path.parent / f".{self.path.name}.tmp"

        try:
            with open(temp_file, 'w') as f:
                json.dump(document, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            temp_file.replace(self.path)
        except Exception:
            temp_file.unlink(missing_ok=True)
            raise
