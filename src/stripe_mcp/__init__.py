"""MCP server exposing the Stripe API through generic operations."""

__version__ = "0.1.0"
