# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Interpreter discovery for the MCP server entry point
"""

import logging
import os
import subprocess
from typing import List, Sequence

from focus_client.mcp_exceptions import BinaryNotFoundError

logger = logging.getLogger(__name__)


class BinaryLocator:
    """
    Finds an interpreter able to run the server.

    Candidates are probed in order. Absolute paths must exist on disk;
    bare names are resolved through PATH by the probe itself.
    """

    def __init__(
        self,
        candidates: Sequence[str],
        interpreter_name: str = "Node.js",
        version_arg: str = "--version",
        probe_timeout: float = 5.0
    ):
        self.candidates: List[str] = list(candidates)
        self.interpreter_name = interpreter_name
        self.version_arg = version_arg
        self.probe_timeout = probe_timeout

    def _probe(self, candidate: str) -> bool:
        if os.path.isabs(candidate) and not os.path.exists(candidate):
            logger.debug(f"Interpreter candidate missing: {candidate}")
            return False

        try:
            subprocess.run(
                [candidate, self.version_arg],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=self.probe_timeout,
                check=True
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug(f"Interpreter candidate {candidate} rejected: {e}")
            return False
        return True

    def locate(self) -> str:
        """
        Return the first working candidate.

        Raises:
            BinaryNotFoundError: if every candidate fails
        """
        for candidate in self.candidates:
            if self._probe(candidate):
                logger.info(f"Using {self.interpreter_name} interpreter: {candidate}")
                return candidate

        raise BinaryNotFoundError(self.interpreter_name, self.candidates)
