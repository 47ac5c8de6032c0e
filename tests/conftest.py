# File: tests/conftest.py
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import pytest
import pytest_asyncio
from aiohttp import web

from restyle_proxy.config import ProxyConfig
from restyle_proxy.models import TargetColor

#: tiny but valid PNG signature + header chunk, enough to check byte pass-through
PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x06\x00\x00\x00\x1f\x15\xc4\x89"

SAMPLE_CSS = "a { color: #00356b; }\n.bar { background: rgba(0, 53, 107, .5); border-color: rgb(0,53,107); }\n"

SAMPLE_HTML = """<!DOCTYPE html>
<html>
<head>
  <title>Yale University Test Page</title>
  <meta name="description" content="This is a test page about Yale University">
  <link rel="stylesheet" href="/style.css">
  <style>h1 { color: #00356B; }</style>
</head>
<body>
  <header style="background-color: rgb(0, 53, 107)">
    <h1>Welcome to Yale University</h1>
    <nav>
      <a href="https://www.yale.edu/about">About Yale</a>
      <a href="https://www.yale.edu/admissions">Yale Admissions</a>
    </nav>
  </header>
  <main>
    <img src="/logo.png" alt="Yale logo">
    <p>Yale University is a private Ivy League research university in New Haven, Connecticut.</p>
    <p>Yale was founded in 1701 as the Collegiate School.</p>
  </main>
</body>
</html>
"""


@pytest.fixture()
def target_color() -> TargetColor:
    return TargetColor.from_hex("#00356B", "#A51C30")


@pytest.fixture()
def png_bytes() -> bytes:
    return PNG_BYTES


@pytest.fixture()
def proxy_config() -> ProxyConfig:
    """Config used against the local upstream test site."""
    return ProxyConfig(timeout=2.0, user_agent="TestAgent/1.0")


@asynccontextmanager
async def _serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", port)
    await site.start()
    try:
        yield f"http://127.0.0.1:{port}"
    finally:
        await runner.cleanup()


@pytest.fixture()
def serve_app():
    """The `_serve_app` context manager, for tests that need their own upstream."""
    return _serve_app


@pytest_asyncio.fixture
async def upstream(unused_tcp_port: int) -> AsyncIterator[str]:
    """A small origin site: one page, a stylesheet, an image and a 500 route."""
    app = web.Application()

    async def handle_root(_):
        return web.Response(text=SAMPLE_HTML, content_type="text/html")

    async def handle_css(_):
        return web.Response(text=SAMPLE_CSS, content_type="text/css")

    async def handle_logo(_):
        return web.Response(body=PNG_BYTES, content_type="image/png")

    async def handle_agent(request):
        return web.Response(text=request.headers.get("User-Agent", ""), content_type="text/plain")

    async def handle_broken(_):
        return web.Response(status=500, text="boom")

    app.router.add_get("/", handle_root)
    app.router.add_get("/style.css", handle_css)
    app.router.add_get("/logo.png", handle_logo)
    app.router.add_get("/agent", handle_agent)
    app.router.add_get("/broken", handle_broken)

    async with _serve_app(app, unused_tcp_port) as url:
        yield url
