"""Typed-field protocol frame builder with hex dump preview, served over MCP."""

__version__ = "0.1.0"
