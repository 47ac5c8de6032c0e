# File: restyle_proxy/report/__init__.py
"""restyle_proxy.report: saving the result of a one-shot ``fetch`` to disk."""

from __future__ import annotations

from .html_report import render_html
from .json_report import render_json

__all__ = ["render_json", "render_html"]
