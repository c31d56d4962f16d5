"""Configuration module."""

from paperless_mcp.config.settings import PaperlessSettings

__all__ = ["PaperlessSettings"]
