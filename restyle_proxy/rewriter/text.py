# restyle_proxy/rewriter/text.py
"""Literal substitutions applied to the visible text of a document."""
from __future__ import annotations

from typing import Dict, Mapping, Optional

from bs4 import BeautifulSoup
from bs4.element import PreformattedString

__all__ = ("TextRewriter",)

_SKIP_PARENTS = frozenset({"script", "style", "template", "noscript"})


class TextRewriter:
    """Apply ``{old: new}`` rules to text nodes; attribute values are never touched."""

    def __init__(self, rules: Optional[Mapping[str, str]] = None) -> None:
        self.rules: Dict[str, str] = {k: v for k, v in (rules or {}).items() if k}

    def __bool__(self) -> bool:
        return bool(self.rules)

    def rewrite(self, text: str) -> str:
        for old, new in self.rules.items():
            text = text.replace(old, new)
        return text

    def rewrite_document(self, soup: BeautifulSoup) -> int:
        """Rewrite text nodes in place and return how many were changed."""
        if not self.rules:
            return 0
        changed = 0
        for node in soup.find_all(string=True):
            # comments, doctype, CDATA
            if isinstance(node, PreformattedString):
                continue
            if node.parent is not None and node.parent.name in _SKIP_PARENTS:
                continue
            new = self.rewrite(str(node))
            if new != node:
                node.replace_with(type(node)(new))
                changed += 1
        return changed
