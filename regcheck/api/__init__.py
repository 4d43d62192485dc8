"""
HTTP surface for the compliance engine.
"""

from .app import create_api

__all__ = ["create_api"]
