# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Custom exceptions for the focus client.

All exceptions inherit from FocusClientError for consistent error handling.
"""

from typing import Optional


class FocusClientError(Exception):
    """Base exception for all focus client errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        """
        Initialize focus client error.

        Args:
            message: Human-readable error message
            details: Additional error details
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert error to dictionary for the presentation layer."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details
        }


class ConfigurationError(FocusClientError):
    """Configuration error."""

    def __init__(
        self,
        message: str,
        config_file: Optional[str] = None,
        field: Optional[str] = None,
        details: Optional[dict] = None
    ):
        """
        Initialize configuration error.

        Args:
            message: Configuration error message
            config_file: Configuration file path
            field: Offending configuration field
            details: Additional error details
        """
        super().__init__(message, details=details)
        self.config_file = config_file
        self.field = field
