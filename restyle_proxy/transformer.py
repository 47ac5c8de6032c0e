# File: restyle_proxy/transformer.py
"""restyle_proxy.transformer: parse, rewrite and serialize one fetched HTML document.

A fresh :class:`~bs4.BeautifulSoup` tree is built for every call to
:meth:`DocumentTransformer.transform`; the transformer itself only holds the
immutable rewrite rules, so one instance can serve concurrent requests.
"""
from __future__ import annotations

from typing import Mapping, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from restyle_proxy.errors import ParseError
from restyle_proxy.logger import logger
from restyle_proxy.models import TargetColor, TransformResult
from restyle_proxy.rewriter import (
    DEFAULT_PROXY_PATH,
    ColorRewriter,
    ResourceRewriter,
    TextRewriter,
    generate_patch_script,
)

__all__ = ["DocumentTransformer", "base_origin_of"]

_DEFAULT_PORTS = {"http": 80, "https": 443}


def base_origin_of(url: str) -> str:
    """Return ``scheme://host[:port]`` of *url*; raise ParseError if there is none.

    Userinfo is dropped and a port equal to the scheme default is omitted.
    """
    try:
        parsed = urlparse(url.strip())
        port = parsed.port
    except ValueError as exc:
        raise ParseError(f"Invalid target URL {url!r}: {exc}") from exc
    host = parsed.hostname
    if not parsed.scheme or not host:
        raise ParseError(f"Target URL must be absolute: {url!r}")
    scheme = parsed.scheme.lower()
    if ":" in host:
        host = f"[{host}]"
    if port is not None and port != _DEFAULT_PORTS.get(scheme):
        host = f"{host}:{port}"
    return f"{scheme}://{host}"


class DocumentTransformer:
    """Runs resource, color and text rewriting over a page and appends the patch script."""

    def __init__(
        self,
        target: TargetColor,
        text_rules: Optional[Mapping[str, str]] = None,
        proxy_path: str = DEFAULT_PROXY_PATH,
    ) -> None:
        self.target = target
        self.colors = ColorRewriter(target)
        self.resources = ResourceRewriter(self.colors, proxy_path=proxy_path)
        self.text = TextRewriter(text_rules)
        self._patch_script = generate_patch_script(target.source, target.replacement)

    @classmethod
    def from_config(cls, config) -> DocumentTransformer:
        return cls(config.target_color, text_rules=config.text_rules, proxy_path=config.proxy_path)

    def transform(self, html: str, target_url: str) -> TransformResult:
        base_origin = base_origin_of(target_url)
        soup = self._parse(html)

        self.resources.rewrite_resources(soup, base_origin)
        if self.text:
            changed = self.text.rewrite_document(soup)
            logger.debug("Text rules changed %d nodes in %s", changed, target_url)

        title_tag = soup.find("title")
        title = title_tag.get_text() if title_tag else ""

        script = soup.new_tag("script")
        script.string = self._patch_script
        container = soup.body or soup.html or soup
        container.append(script)

        return TransformResult(content=str(soup), title=title)

    @staticmethod
    def _parse(html: str) -> BeautifulSoup:
        try:
            return BeautifulSoup(html, "html.parser")
        except Exception as exc:
            raise ParseError(f"Could not parse document: {exc}") from exc
