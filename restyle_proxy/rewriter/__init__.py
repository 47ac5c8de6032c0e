# File: restyle_proxy/rewriter/__init__.py
"""restyle_proxy.rewriter: text, color and resource rewriting of fetched documents."""

from .colors import ColorRewriter
from .patch_script import generate_patch_script
from .resources import DEFAULT_PROXY_PATH, ResourceRewriter, build_proxy_reference
from .text import TextRewriter

__all__ = [
    "ColorRewriter",
    "ResourceRewriter",
    "TextRewriter",
    "build_proxy_reference",
    "generate_patch_script",
    "DEFAULT_PROXY_PATH",
]
