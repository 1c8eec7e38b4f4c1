"""Routers module - FastAPI route handlers"""

from . import config, files, modify

__all__ = ["config", "files", "modify"]
