"""Core configuration and logging."""

from .config import Settings, get_settings, settings
from .logging import configure_logging

__all__ = ["Settings", "get_settings", "settings", "configure_logging"]
