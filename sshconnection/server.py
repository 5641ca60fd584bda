"""MCP server bootstrap and global state.

Initializes the FastMCP server, optionally configures Weave tracing, and
exposes the host inventory through `get_config_manager()`. The global `mcp`
object is imported by `main.py` and the tool modules.
"""

from __future__ import annotations

import logging
import os

import weave
from mcp.server.fastmcp import FastMCP

from sshconnection.config import ConfigManager

logger = logging.getLogger(__name__)

if os.getenv("WEAVE_PROJECT"):
    weave.init(os.environ["WEAVE_PROJECT"])

# Create the MCP server
mcp: FastMCP = FastMCP("SSHConnection", stateless_http=True)

_config_manager: ConfigManager | None = None


def get_config_manager() -> ConfigManager:
    """Return the inventory named by the CONFIG variable, loading it once.

    Raises:
        ConfigurationError: If the file is missing or fails schema validation.
    """
    global _config_manager
    if _config_manager is None:
        config_path = os.getenv("CONFIG", "hosts.yaml")
        logger.info("Loading host inventory from %s", config_path)
        _config_manager = ConfigManager(config_path)
    return _config_manager


# ruff: noqa: F401, E402
import sshconnection.ssh.tools
