"""
Environment settings module for SOTU Cluster.

Exports:
- Settings: Pydantic settings class for environment variables
- get_settings: Cached settings getter
"""

from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
