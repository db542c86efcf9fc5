"""MCP tools for deck analysis and card lookup."""

# Import tools to register them with the MCP server
from . import analysis, cards

__all__ = ["analysis", "cards"]
