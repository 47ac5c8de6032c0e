# restyle_proxy/fetcher.py
"""
Fetcher module: outbound HTTP GET with a fixed browser User-Agent, timeout and optional retry.
"""
from __future__ import annotations

import asyncio
import random
from typing import Optional, Sequence

from aiohttp import ClientError, ClientResponseError, ClientSession, ClientTimeout, InvalidURL

from restyle_proxy.config import ProxyConfig
from restyle_proxy.errors import FetchError
from restyle_proxy.logger import logger
from restyle_proxy.models import FetchedResource

__all__ = ("FetchGateway",)


class FetchGateway:
    """Performs upstream GETs and returns the body as opaque bytes."""

    _RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)

    def __init__(self, config: ProxyConfig, session: Optional[ClientSession] = None) -> None:
        self.config = config
        self.session = session
        self._owns_session = session is None

    async def __aenter__(self) -> FetchGateway:
        if self.session is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.timeout),
                headers={"User-Agent": self.config.user_agent},
                raise_for_status=False,
            )
            self._owns_session = True
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def fetch(self, url: str) -> FetchedResource:
        """
        GET *url* and return a FetchedResource.

        Any transport error, timeout, invalid URL or non-2xx status raises FetchError.
        """
        if not self.session:
            raise RuntimeError("Session not initialized")
        attempts = 0
        while True:
            try:
                return await self._get(url)
            except ClientResponseError as e:
                if e.status not in self._RETRY_STATUS or attempts >= self.config.retry_times:
                    raise FetchError(url, f"Request failed with status code {e.status}", e.status) from e
            except asyncio.TimeoutError as e:
                raise FetchError(url, f"Timeout of {self.config.timeout:g}s exceeded") from e
            except InvalidURL as e:
                raise FetchError(url, f"Invalid URL: {e}") from e
            except (ClientError, ValueError) as e:
                raise FetchError(url, str(e) or type(e).__name__) from e
            attempts += 1
            backoff = min(60, 2**attempts + random.random())
            logger.debug("Retry %d/%d for %s after %.2f s", attempts, self.config.retry_times, url, backoff)
            await asyncio.sleep(backoff)

    async def _get(self, url: str) -> FetchedResource:
        async with self.session.get(url) as resp:
            # redirects are followed; anything left outside 2xx is a failure
            if not 200 <= resp.status < 300:
                raise ClientResponseError(
                    resp.request_info,
                    resp.history,
                    status=resp.status,
                    message=resp.reason or "",
                    headers=resp.headers,
                )
            body = await resp.read()
            ctype = resp.headers.get("Content-Type")
            logger.debug("GET %s -> %s (%s, %d bytes)", url, resp.status, ctype, len(body))
            return FetchedResource(url=url, content_type=ctype, body=body, encoding=resp.charset)
