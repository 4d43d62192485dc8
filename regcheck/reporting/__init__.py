"""
Report serialisation and rendering.
"""

from .html import render_html, write_html
from .schema import serialize_report, serialize_requirements

__all__ = ["render_html", "write_html", "serialize_report", "serialize_requirements"]
