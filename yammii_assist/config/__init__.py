"""
Configuration System

Configuration Priority (highest to lowest):
    1. Programmatic (passed to AssistConfig())
    2. Environment variables (YAMMII_* prefix, GOOGLE_API_KEY)
    3. Built-in defaults

A TOML file can be loaded explicitly with AssistConfig.from_file().

Modules:
    settings: AssistConfig class
    pricing: Model price table for cost telemetry
"""

from yammii_assist.config.settings import AssistConfig

__all__ = ["AssistConfig"]
