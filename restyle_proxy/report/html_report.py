"""restyle_proxy.report.html_report: write the rewritten document to an HTML file."""

from __future__ import annotations

from pathlib import Path
from typing import Union

from restyle_proxy.models import PageResult


def render_html(result: PageResult, output_path: Union[Path, str]) -> Path:
    """Save the rewritten page so it can be opened directly in a browser.

    Relative proxy references in the saved file only resolve when it is served
    by a running proxy; images and stylesheets will be missing otherwise.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(result.content, encoding="utf-8")
    return output_path
