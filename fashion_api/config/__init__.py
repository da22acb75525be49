"""
Configuration module for the fashion API.

Provides centralized configuration using Pydantic Settings with environment variable support.
"""

from fashion_api.config.settings import Settings, get_settings


__all__ = ['Settings', 'get_settings']
