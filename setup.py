# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Setup configuration for the Thinking Partner focus client
"""

from setuptools import setup, find_packages

setup(
    name="thinking-partner-focus-client",
    version="1.0.0",
    description="Session manager and tool client for the thinking-partner MCP context server",
    author="Jason Cafarelli",
    packages=find_packages(include=["focus_client", "focus_client.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.0",
        "PyYAML>=6.0",
        "python-ulid>=2.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.23",
        ],
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.23",
        ],
    },
)
