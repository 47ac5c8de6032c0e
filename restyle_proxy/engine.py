# File: restyle_proxy/engine.py
"""restyle_proxy.engine: the page flow and the sub-resource flow, shared by the server and the CLI."""

from __future__ import annotations

from restyle_proxy.fetcher import FetchGateway
from restyle_proxy.logger import logger
from restyle_proxy.models import FetchedResource, PageResult
from restyle_proxy.rewriter import ColorRewriter
from restyle_proxy.transformer import DocumentTransformer

__all__ = ["fetch_page", "fetch_resource"]


async def fetch_page(gateway: FetchGateway, transformer: DocumentTransformer, url: str) -> PageResult:
    """Fetch *url* and return the rewritten document with its title.

    Raises FetchError or ParseError; the caller turns them into a response.
    """
    logger.info("Fetching page %s", url)
    resource = await gateway.fetch(url)
    if not resource.is_html:
        logger.warning("Treating %s response from %s as HTML", resource.mime_type or "untyped", url)
    result = transformer.transform(resource.text(), url)
    logger.info("Transformed %s (%d bytes in, %d chars out)", url, len(resource.body), len(result.content))
    return PageResult(content=result.content, title=result.title, original_url=url)


async def fetch_resource(gateway: FetchGateway, colors: ColorRewriter, url: str) -> FetchedResource:
    """Fetch a sub-resource; stylesheets come back color-rewritten as UTF-8 ``text/css``."""
    resource = await gateway.fetch(url)
    if not resource.is_css:
        return resource
    css = colors.rewrite(resource.text())
    return FetchedResource(url=resource.url, content_type="text/css", body=css.encode("utf-8"), encoding="utf-8")
