# File: restyle_proxy/server.py
"""restyle_proxy.server: aiohttp.web application exposing ``/fetch`` and ``/proxy-resource``.

Routes
------
``GET /``                 landing page
``POST /fetch``           ``{"url": ...}`` → rewritten page as JSON
``GET /proxy-resource``   ``?url=...`` → upstream bytes (CSS color-rewritten)

Every failure is converted to a JSON ``{"error": ...}`` envelope here; nothing
from the pipeline escapes as an unhandled exception.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from aiohttp import web

from restyle_proxy.config import ProxyConfig
from restyle_proxy.engine import fetch_page, fetch_resource
from restyle_proxy.errors import ProxyError, RequestValidationError
from restyle_proxy.fetcher import FetchGateway
from restyle_proxy.logger import ACCESS_LOG_FORMAT, access_logger, logger
from restyle_proxy.rewriter.patch_script import template_env
from restyle_proxy.transformer import DocumentTransformer

__all__ = ["create_app", "run", "CONFIG_KEY", "GATEWAY_KEY", "TRANSFORMER_KEY"]

CONFIG_KEY = web.AppKey("config", ProxyConfig)
GATEWAY_KEY = web.AppKey("gateway", FetchGateway)
TRANSFORMER_KEY = web.AppKey("transformer", DocumentTransformer)

LANDING_TEMPLATE = "index.html.j2"


def _error(message: str, status: int) -> web.Response:
    return web.json_response({"error": message}, status=status)


async def _read_payload(request: web.Request) -> Dict[str, Any]:
    if request.content_type == "application/json":
        try:
            data = await request.json()
        except ValueError:
            # JSONDecodeError and UnicodeDecodeError
            return {}
        return data if isinstance(data, dict) else {}
    form = await request.post()
    return dict(form)


def _require_url(value: Optional[Any], message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise RequestValidationError(message)
    return value.strip()


async def index(request: web.Request) -> web.Response:
    config = request.app[CONFIG_KEY]
    html = template_env().get_template(LANDING_TEMPLATE).render(
        title="restyle proxy",
        replacement_hex=config.target_color.replacement.hex,
    )
    return web.Response(text=html, content_type="text/html")


async def fetch_handler(request: web.Request) -> web.Response:
    payload = await _read_payload(request)
    try:
        url = _require_url(payload.get("url"), "URL is required")
    except RequestValidationError as exc:
        return _error(str(exc), exc.status)

    try:
        page = await fetch_page(request.app[GATEWAY_KEY], request.app[TRANSFORMER_KEY], url)
    except ProxyError as exc:
        logger.error("Error fetching URL %s: %s", url, exc)
        return _error(f"Failed to fetch content: {exc}", 500)
    except Exception as exc:
        logger.exception("Unexpected failure transforming %s", url)
        return _error(f"Failed to fetch content: {exc}", 500)
    return web.json_response(page.to_dict())


async def proxy_resource_handler(request: web.Request) -> web.Response:
    try:
        url = _require_url(request.query.get("url"), "Resource URL is required")
    except RequestValidationError as exc:
        return _error(str(exc), exc.status)

    colors = request.app[TRANSFORMER_KEY].colors
    try:
        resource = await fetch_resource(request.app[GATEWAY_KEY], colors, url)
    except ProxyError as exc:
        logger.error("Error fetching resource %s: %s", url, exc)
        return _error("Failed to fetch resource", 500)
    except Exception:
        logger.exception("Unexpected failure proxying %s", url)
        return _error("Failed to fetch resource", 500)

    headers = {"Content-Type": resource.content_type} if resource.content_type else None
    return web.Response(body=resource.body, headers=headers)


async def _open_gateway(app: web.Application) -> None:
    await app[GATEWAY_KEY].__aenter__()


async def _close_gateway(app: web.Application) -> None:
    await app[GATEWAY_KEY].close()


def create_app(config: Optional[ProxyConfig] = None) -> web.Application:
    """Build the application; the upstream session opens on startup and closes on cleanup."""
    config = config or ProxyConfig()
    app = web.Application()
    app[CONFIG_KEY] = config
    app[TRANSFORMER_KEY] = DocumentTransformer.from_config(config)
    app[GATEWAY_KEY] = FetchGateway(config)

    app.router.add_get("/", index)
    app.router.add_post("/fetch", fetch_handler)
    app.router.add_get(config.proxy_path, proxy_resource_handler)

    app.on_startup.append(_open_gateway)
    app.on_cleanup.append(_close_gateway)
    return app


def run(config: ProxyConfig) -> None:
    logger.info("Web proxy server running at http://%s:%d", config.host, config.port)
    web.run_app(
        create_app(config),
        host=config.host,
        port=config.port,
        access_log=access_logger(),
        access_log_format=ACCESS_LOG_FORMAT,
        print=None,
    )
