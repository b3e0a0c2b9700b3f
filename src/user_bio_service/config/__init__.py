"""Configuration module"""
from .settings import GEMINI_PLACEHOLDER_KEY, Settings, get_settings, settings

__all__ = ["Settings", "get_settings", "settings", "GEMINI_PLACEHOLDER_KEY"]
