# restyle_proxy/models.py
"""
Data models for the restyle_proxy pipeline.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

__all__ = ("RGBColor", "TargetColor", "FetchedResource", "TransformResult", "PageResult")

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")


@dataclass(frozen=True, slots=True)
class RGBColor:
    """An opaque sRGB color as an integer triple."""

    red: int
    green: int
    blue: int

    def __post_init__(self) -> None:
        for channel in (self.red, self.green, self.blue):
            if not 0 <= channel <= 255:
                raise ValueError(f"Color channel out of range: {channel}")

    @classmethod
    def from_hex(cls, value: str) -> RGBColor:
        """Parse ``#RRGGBB`` (the leading ``#`` is optional)."""
        match = _HEX_RE.match(value.strip())
        if not match:
            raise ValueError(f"Invalid hex color: {value!r}")
        digits = match.group(1)
        return cls(*(int(digits[i:i + 2], 16) for i in (0, 2, 4)))

    @property
    def hex(self) -> str:
        return f"#{self.red:02X}{self.green:02X}{self.blue:02X}"

    @property
    def rgb(self) -> str:
        """Textual form browsers report for computed styles."""
        return f"rgb({self.red}, {self.green}, {self.blue})"


@dataclass(frozen=True, slots=True)
class TargetColor:
    """The color rewrite rule: *source* is matched, *replacement* is substituted."""

    source: RGBColor
    replacement: RGBColor

    def __post_init__(self) -> None:
        if self.source == self.replacement:
            raise ValueError("Source and replacement colors must differ")

    @classmethod
    def from_hex(cls, source: str, replacement: str) -> TargetColor:
        return cls(RGBColor.from_hex(source), RGBColor.from_hex(replacement))


@dataclass(slots=True)
class FetchedResource:
    """Raw upstream response: bytes plus the declared content type."""

    url: str
    content_type: Optional[str]
    body: bytes
    encoding: Optional[str] = None

    @property
    def mime_type(self) -> str:
        if not self.content_type:
            return ""
        return self.content_type.split(";", 1)[0].strip().lower()

    @property
    def is_css(self) -> bool:
        return "text/css" in (self.content_type or "").lower()

    @property
    def is_html(self) -> bool:
        return "html" in self.mime_type

    def text(self) -> str:
        """Decode the body with the declared charset, falling back to UTF-8."""
        try:
            return self.body.decode(self.encoding or "utf-8", errors="replace")
        except LookupError:
            return self.body.decode("utf-8", errors="replace")


@dataclass(slots=True)
class TransformResult:
    """Serialized document and its title."""

    content: str
    title: str


@dataclass(slots=True)
class PageResult:
    """Outcome of one ``/fetch`` call."""

    content: str
    title: str
    original_url: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "content": self.content,
            "title": self.title,
            "originalUrl": self.original_url,
        }
