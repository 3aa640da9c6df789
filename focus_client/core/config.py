# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Focus client configuration - single source of truth.
YAML is king. Env vars ONLY for locations.

Everything the client needs to find and talk to the thinking-partner
MCP server lives here, inspectable via `cat`.
"""

import os
import yaml
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from focus_client.core.errors import ConfigurationError


DEFAULT_SERVER_ROOT = Path.home() / "projects" / "thinking-partner-mcp"

DEFAULT_INTERPRETER_PATHS = [
    "/opt/homebrew/bin/node",  # macOS Apple Silicon
    "/usr/local/bin/node",     # macOS Intel or Linux
    "/usr/bin/node",           # Linux system install
    "node",                    # Resolved via PATH
]

VALID_TOOLS = ("desktop", "code")


# =============================================================================
# CONFIGURATION DATACLASS
# =============================================================================

@dataclass(frozen=True)
class Config:
    """
    Immutable client configuration.
    All values from YAML. No hidden state.
    """

    # -- Server --
    server_name: str = "thinking-partner-mcp"
    server_path: str = str(DEFAULT_SERVER_ROOT / "src" / "index.js")
    client_name: str = "thinking-partner-raycast"
    client_version: str = "1.0.0"
    protocol_version: str = "2025-11-25"

    # -- Interpreter --
    interpreter_name: str = "Node.js"
    interpreter_paths: List[str] = field(default_factory=lambda: list(DEFAULT_INTERPRETER_PATHS))
    production_env: Dict[str, str] = field(default_factory=lambda: {"NODE_ENV": "production"})

    # -- Context store --
    context_file: str = str(DEFAULT_SERVER_ROOT / "data" / "context.json")

    # -- Focus defaults --
    default_tool: str = "desktop"
    history_limit: int = 50
    history_scopes: List[str] = field(default_factory=lambda: ["all"])

    # -- Timing (seconds) --
    stabilization_delay: float = 0.1
    handshake_timeout: Optional[float] = None
    call_timeout: Optional[float] = None

    # -- Logging --
    log_level: str = "INFO"
    log_format: str = "json"

    def __post_init__(self):
        if self.default_tool not in VALID_TOOLS:
            raise ConfigurationError(
                f"default_tool must be one of {', '.join(VALID_TOOLS)}, got {self.default_tool!r}",
                field="default_tool"
            )
        if not self.interpreter_paths:
            raise ConfigurationError("interpreter_paths must not be empty", field="interpreter_paths")

    @property
    def server_entry_point(self) -> Path:
        return Path(self.server_path).expanduser()

    @property
    def context_file_path(self) -> Path:
        return Path(self.context_file).expanduser()

    @property
    def client_info(self) -> Dict[str, str]:
        return {"name": self.client_name, "version": self.client_version}


# =============================================================================
# LOADER
# =============================================================================

def load_config(path: Optional[str] = None) -> Config:
    """
    Load configuration from YAML.
    Returns defaults if file doesn't exist.
    """
    defaults = Config()
    env_server_path = os.getenv("THINKING_PARTNER_SERVER_PATH")
    env_log_level = os.getenv("FOCUS_CLIENT_LOG_LEVEL")

    y = {}
    if path and Path(path).expanduser().exists():
        try:
            with open(Path(path).expanduser()) as f:
                y = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}", config_file=path) from e
        if not isinstance(y, dict):
            raise ConfigurationError(f"Top level of {path} must be a mapping", config_file=path)

    # Helper to safely navigate nested dicts
    def get(d: dict, *keys, default=None):
        for k in keys:
            if not isinstance(d, dict):
                return default
            d = d.get(k, {})
        return d if d != {} else default

    return Config(
        # Server
        server_name=get(y, "server", "name") or defaults.server_name,
        server_path=env_server_path or get(y, "server", "path") or defaults.server_path,
        client_name=get(y, "client", "name") or defaults.client_name,
        client_version=str(get(y, "client", "version") or defaults.client_version),
        protocol_version=str(get(y, "server", "protocol_version") or defaults.protocol_version),

        # Interpreter
        interpreter_name=get(y, "interpreter", "name") or defaults.interpreter_name,
        interpreter_paths=get(y, "interpreter", "paths") or defaults.interpreter_paths,
        production_env=get(y, "interpreter", "env") or defaults.production_env,

        # Context store
        context_file=get(y, "paths", "context_file") or defaults.context_file,

        # Focus defaults
        default_tool=get(y, "focus", "default_tool") or defaults.default_tool,
        history_limit=get(y, "focus", "history_limit") or defaults.history_limit,
        history_scopes=get(y, "focus", "history_scopes") or defaults.history_scopes,

        # Timing
        stabilization_delay=get(y, "timing", "stabilization_delay", default=defaults.stabilization_delay),
        handshake_timeout=get(y, "timing", "handshake_timeout"),
        call_timeout=get(y, "timing", "call_timeout"),

        # Logging
        log_level=env_log_level or get(y, "logging", "level") or defaults.log_level,
        log_format=get(y, "logging", "format") or defaults.log_format,
    )


# =============================================================================
# GLOBAL INSTANCE
# =============================================================================

_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the cached config for the composition root."""
    global _config
    if _config is None:
        config_path = os.getenv(
            "FOCUS_CLIENT_CONFIG_PATH",
            str(Path.home() / ".config" / "thinking-partner" / "focus-client.yaml")
        )
        _config = load_config(config_path)
    return _config


def reload_config() -> Config:
    """Force reload configuration."""
    global _config
    _config = None
    return get_config()
