"""MCP server exposing the Paperless-ngx REST API as agent tools."""

__version__ = "1.0.0"
