# restyle_proxy/errors.py
"""
Error taxonomy shared by the rewriting pipeline and the HTTP boundary.
"""
from __future__ import annotations

from typing import Optional

__all__ = ["ProxyError", "RequestValidationError", "FetchError", "ParseError"]


class ProxyError(Exception):
    """Base class for all restyle_proxy failures."""

    status: int = 500


class RequestValidationError(ProxyError):
    """A required input (e.g. the target URL) is missing or empty."""

    status = 400


class FetchError(ProxyError):
    """Outbound GET failed: transport error, timeout, invalid URL or non-2xx status."""

    def __init__(self, url: str, cause: str, status: Optional[int] = None) -> None:
        super().__init__(cause)
        self.url = url
        self.cause = cause
        self.upstream_status = status


class ParseError(ProxyError):
    """The document or its target URL could not be turned into a tree."""
