# restyle_proxy/rewriter/resources.py
"""
Resource reference rewriting.

Images, stylesheet links and scripts are resolved against the page origin
and routed through the same-origin proxy endpoint. Inline ``style``
attributes and ``<style>`` blocks are handed to :class:`ColorRewriter`.
"""
from __future__ import annotations

from typing import Optional
from urllib.parse import quote, urljoin, urlparse

from bs4 import BeautifulSoup
from bs4.element import Tag

from restyle_proxy.logger import logger
from restyle_proxy.rewriter.colors import ColorRewriter

__all__ = ("ResourceRewriter", "build_proxy_reference", "DEFAULT_PROXY_PATH")

DEFAULT_PROXY_PATH = "/proxy-resource"

# characters encodeURIComponent leaves alone besides alphanumerics and "-_.~"
_URI_COMPONENT_SAFE = "!*'()"
_UNPROXIED_SCHEMES = ("data", "blob", "javascript", "about", "mailto")


def build_proxy_reference(url: str, base_origin: str, proxy_path: str = DEFAULT_PROXY_PATH) -> str:
    """Resolve *url* against *base_origin* and wrap it in a proxy reference.

    Raises ValueError when *url* cannot be parsed.
    """
    absolute = urljoin(base_origin, url.strip())
    # urljoin tolerates some garbage; urlparse is stricter (e.g. bad IPv6 hosts)
    urlparse(absolute)
    return f"{proxy_path}?url={quote(absolute, safe=_URI_COMPONENT_SAFE)}"


def _is_resource(tag: Tag) -> bool:
    if tag.name in ("img", "script"):
        return True
    if tag.name == "link":
        rel = tag.get("rel") or []
        if isinstance(rel, str):
            rel = rel.split()
        return "stylesheet" in (r.lower() for r in rel)
    return False


class ResourceRewriter:
    """Mutates a parsed document so every resource loads through the proxy."""

    def __init__(self, colors: ColorRewriter, proxy_path: str = DEFAULT_PROXY_PATH) -> None:
        self.colors = colors
        self.proxy_path = proxy_path

    def rewrite_resources(self, soup: BeautifulSoup, base_origin: str) -> None:
        for tag in soup.find_all(_is_resource):
            self._rewrite_reference(tag, base_origin)
        self.rewrite_styles(soup)

    def rewrite_styles(self, soup: BeautifulSoup) -> None:
        """Pass inline style attributes and style blocks through the color rewriter."""
        for tag in soup.find_all(style=True):
            style = tag.get("style")
            if isinstance(style, str) and style:
                tag["style"] = self.colors.rewrite(style)

        for tag in soup.find_all("style"):
            css = tag.string
            if css:
                tag.string = self.colors.rewrite(str(css))

    def _rewrite_reference(self, tag: Tag, base_origin: str) -> None:
        value = self._reference_of(tag)
        if value is None:
            return
        if self._keep_as_is(value):
            return
        try:
            proxied = build_proxy_reference(value, base_origin, self.proxy_path)
        except ValueError as exc:
            logger.warning("Skipping <%s> with unresolvable URL %r: %s", tag.name, value, exc)
            return
        target_attr = "href" if tag.name == "link" else "src"
        tag[target_attr] = proxied

    @staticmethod
    def _reference_of(tag: Tag) -> Optional[str]:
        for attr in ("src", "href"):
            value = tag.get(attr)
            if isinstance(value, str) and value.strip():
                return value
        return None

    def _keep_as_is(self, value: str) -> bool:
        stripped = value.strip()
        if stripped.startswith(f"{self.proxy_path}?"):
            return True
        scheme = stripped.split(":", 1)[0].lower() if ":" in stripped else ""
        return scheme in _UNPROXIED_SCHEMES
