# restyle_proxy/report/json_report.py

"""
JSON output for the ``fetch`` CLI command.

Writes the same envelope ``POST /fetch`` returns.
"""
import json
from pathlib import Path
from typing import Optional

from restyle_proxy.models import PageResult


def render_json(result: PageResult, output_path: Path | str, indent: Optional[int] = None) -> Path:
    """
    Save *result* as JSON at *output_path*.

    :param result: PageResult of a fetch
    :param output_path: path of the JSON file
    :param indent: pretty-print indentation, compact when None
    :return: Path of the written file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(result.to_dict(), ensure_ascii=False, indent=indent), encoding="utf-8")
    return output_path
