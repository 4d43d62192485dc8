"""
Configuration for the default compliance engine.
"""

from .settings import EngineSettings, load_settings

__all__ = ["EngineSettings", "load_settings"]
