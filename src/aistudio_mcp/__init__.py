"""MCP server exposing Oxylabs AI Studio extraction tools."""

__version__ = "0.1.0"
