# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Core utilities and shared modules for the focus client.

This package contains:
- config: Configuration management
- errors: Custom exceptions
- logging: Structured logging
"""

from focus_client.core.config import get_config, load_config, Config
from focus_client.core.errors import FocusClientError, ConfigurationError
from focus_client.core.logging import get_logger, configure_logging

__all__ = [
    "get_config",
    "load_config",
    "Config",
    "FocusClientError",
    "ConfigurationError",
    "get_logger",
    "configure_logging",
]
