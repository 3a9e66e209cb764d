"""
Storage Layer.

This package handles persisted settings: the INI configuration file.
"""

from .config_manager import ConfigManager

__all__ = ["ConfigManager"]
