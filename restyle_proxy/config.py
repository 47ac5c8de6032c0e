# === FILE: restyle_proxy/config.py ===
"""
Loading and validation of the restyle_proxy configuration.
The schema is described with Pydantic; files may be YAML or JSON.
"""
from __future__ import annotations

import errno
import json
import os
import re
from pathlib import Path
from typing import Any, Dict, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from restyle_proxy.models import TargetColor

__all__ = ["ProxyConfig", "load_config", "DEFAULT_USER_AGENT"]

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

_HEX_RE = re.compile(r"^#?[0-9a-fA-F]{6}$")


class ProxyConfig(BaseModel):
    """Settings for one proxy process."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    host: str = Field("0.0.0.0", min_length=1, description="Listening interface.")
    port: int = Field(3001, ge=1, le=65535, description="Listening port.")
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="Outbound User-Agent header.")
    timeout: float = Field(15.0, gt=0, description="Timeout for one upstream request (seconds).")
    retry_times: int = Field(0, ge=0, description="Retries on upstream 5xx/429.")
    source_color: str = Field("#00356B", description="Color to replace (#RRGGBB).")
    replacement_color: str = Field("#A51C30", description="Substituted color (#RRGGBB).")
    text_rules: Dict[str, str] = Field(
        default_factory=dict, description="Literal text substitutions applied to visible text."
    )
    proxy_path: str = Field("/proxy-resource", description="Path of the sub-resource endpoint.")

    @field_validator("source_color", "replacement_color", mode="before")
    def _normalize_hex(cls, v: Any) -> Any:
        if isinstance(v, str):
            if not _HEX_RE.match(v.strip()):
                raise ValueError(f"expected #RRGGBB, got {v!r}")
            return "#" + v.strip().lstrip("#").upper()
        return v

    @field_validator("proxy_path")
    def _check_proxy_path(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("proxy_path must start with '/'")
        return v

    @field_validator("text_rules")
    def _drop_empty_rules(cls, v: Dict[str, str]) -> Dict[str, str]:
        return {k: r for k, r in v.items() if k}

    @model_validator(mode="after")
    def _check_colors_differ(self) -> ProxyConfig:
        if self.source_color == self.replacement_color:
            raise ValueError("source_color and replacement_color must differ")
        return self

    @property
    def target_color(self) -> TargetColor:
        return TargetColor.from_hex(self.source_color, self.replacement_color)


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None] = None) -> ProxyConfig:
    """
    Read YAML or JSON and return a validated ProxyConfig.

    Without *path* the ``configs/default.yaml`` of the working directory is
    used when present, otherwise built-in defaults. An explicit path that does
    not exist raises FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return ProxyConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    try:
        return ProxyConfig(**data)
    except ValidationError:
        raise
