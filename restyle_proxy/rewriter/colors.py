# restyle_proxy/rewriter/colors.py
"""
Color substitution over CSS-bearing text.

The same matcher serves stylesheets fetched through the proxy, inline
``style`` attributes and ``<style>`` block bodies.
"""
from __future__ import annotations

import re

from restyle_proxy.models import RGBColor, TargetColor

__all__ = ("ColorRewriter",)


def _triple_pattern(color: RGBColor) -> str:
    return r"\s*,\s*".join(str(c) for c in (color.red, color.green, color.blue))


class ColorRewriter:
    """Replaces the source color with the replacement in hex, rgb() and rgba() forms."""

    def __init__(self, target: TargetColor) -> None:
        self.target = target
        src, dst = target.source, target.replacement
        triple = _triple_pattern(src)
        self._hex_re = re.compile(re.escape(src.hex), re.IGNORECASE)
        self._rgb_re = re.compile(rf"rgb\(\s*{triple}\s*\)", re.IGNORECASE)
        # alpha may be "1", "0.25", ".5" or "50%"; captured verbatim
        self._rgba_re = re.compile(rf"rgba\(\s*{triple}\s*,\s*(\d*\.?\d+%?)\s*\)", re.IGNORECASE)
        self._hex_out = dst.hex
        self._rgb_out = dst.rgb
        self._rgba_prefix = f"rgba({dst.red}, {dst.green}, {dst.blue}, "

    def rewrite(self, text: str) -> str:
        """Return *text* with every source-color occurrence replaced."""
        if not text:
            return text
        text = self._hex_re.sub(self._hex_out, text)
        text = self._rgb_re.sub(self._rgb_out, text)
        return self._rgba_re.sub(lambda m: f"{self._rgba_prefix}{m.group(1)})", text)
