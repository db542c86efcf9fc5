"""FastMCP server instance and main entry point."""

import logging

from fastmcp import FastMCP

from .config import settings

# Create FastMCP application instance
app = FastMCP("deck-analysis-mcp")

# Import tools and resources to register them with the MCP server
# This must come after app creation
from . import resources, tools  # noqa: E402, F401


def main() -> None:
    """Main entry point for the MCP server."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.run()


if __name__ == "__main__":
    main()
