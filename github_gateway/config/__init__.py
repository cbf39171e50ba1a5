"""Configuration package for the GitHub gateway."""

from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
