"""
Configuration Module.
Exposes the Settings object and the loader.
"""

from .settings import Settings, load_settings, parse_api_table

__all__ = ["Settings", "load_settings", "parse_api_table"]
