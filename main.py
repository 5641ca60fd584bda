import logging
import os

from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

from sshconnection.server import get_config_manager, mcp  # noqa: E402

if __name__ == "__main__":
    # Fail fast on a broken inventory instead of on the first tool call
    get_config_manager()
    mcp.run(transport=os.getenv("MCP_TRANSPORT", "stdio"))
