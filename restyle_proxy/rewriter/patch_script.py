# restyle_proxy/rewriter/patch_script.py
"""Client-side script correcting computed colors the static rewrite cannot reach."""
from __future__ import annotations

from functools import lru_cache

from jinja2 import Environment, PackageLoader, StrictUndefined, Template, select_autoescape

from restyle_proxy.models import RGBColor

__all__ = ("generate_patch_script", "template_env")

PATCH_TEMPLATE = "patch_script.js.j2"


@lru_cache(maxsize=1)
def template_env() -> Environment:
    """Jinja2 environment over the templates shipped inside the package."""
    return Environment(
        loader=PackageLoader("restyle_proxy", "templates"),
        autoescape=select_autoescape(["html", "xml", "html.j2"]),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
    )


def _template() -> Template:
    return template_env().get_template(PATCH_TEMPLATE)


def generate_patch_script(source: RGBColor, replacement: RGBColor) -> str:
    """Return the script body (without ``<script>`` tags) for the given color pair.

    The routine runs eagerly, on DOMContentLoaded, on load and on every
    MutationObserver batch (child list and style/class attribute changes).
    """
    return _template().render(
        source_hex=source.hex,
        source_rgb=source.rgb,
        replacement_hex=replacement.hex,
    )
