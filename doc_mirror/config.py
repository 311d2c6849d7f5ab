# === FILE: doc_mirror/config.py ===
"""
Loading and validation of the DocMirror crawl configuration.
Pydantic describes the schema; YAML or JSON files and command-line
overrides feed into it.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    field_validator,
    model_validator,
)

TOKEN_ENV = "JINA_READER_TOKEN"
DEFAULT_READER_URL = "https://r.jina.ai"


def _first_env(*names: str) -> Optional[str]:
    for name in names:
        value = os.environ.get(name)
        if value:
            return value
    return None


class CrawlerConfig(BaseModel):
    """Configuration of a single mirroring run."""
    model_config = ConfigDict(extra="forbid", frozen=True, validate_default=True)

    base_url: HttpUrl = Field(..., description="Root URL; defines the crawl scope.")
    name: str = Field(..., min_length=1, description="Project name, used as the output subdirectory.")
    max_depth: int = Field(2, ge=0, description="Maximum link depth; the seed is depth 0.")
    token: Optional[str] = Field(None, description="Bearer token for the reader proxy.")
    reader_url: HttpUrl = Field(DEFAULT_READER_URL, description="Content-extraction proxy host.")
    output_dir: Path = Field(Path("docs"), description="Root directory for Markdown artifacts.")
    request_interval: float = Field(3.0, ge=0, description="Pause between scheduled fetch jobs (seconds).")
    concurrency: int = Field(2, ge=1, description="Simultaneous in-flight crawl branches.")
    timeout: float = Field(30.0, gt=0, description="Per-request timeout (seconds).")
    user_agent: str = Field("DocMirror/0.1", min_length=1, description="User-Agent header.")
    http_proxy: Optional[str] = Field(None, description="Outbound proxy for http:// targets.")
    https_proxy: Optional[str] = Field(None, description="Outbound proxy for https:// targets.")

    @field_validator("name")
    def _plain_name(cls, v: str) -> str:
        v = v.strip()
        if not v or "/" in v or "\\" in v or v in (".", ".."):
            raise ValueError("name must be a single directory name")
        return v

    @model_validator(mode="before")
    @classmethod
    def _env_fallbacks(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if not data.get("token"):
            data["token"] = _first_env(TOKEN_ENV)
        if not data.get("http_proxy"):
            data["http_proxy"] = _first_env("HTTP_PROXY", "http_proxy")
        if not data.get("https_proxy"):
            data["https_proxy"] = _first_env("HTTPS_PROXY", "https_proxy")
        return data

    def proxy_for(self, url: str) -> Optional[str]:
        """Outbound proxy to use for *url*, chosen by its scheme."""
        if url.lower().startswith("https:"):
            return self.https_proxy
        return self.http_proxy


_DEFAULT_CFG = Path("doc_mirror.yaml")


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


def read_config_file(path: Union[str, Path, None]) -> Dict[str, Any]:
    """
    Returns the raw mapping stored in a YAML or JSON config file.
    Without *path* the optional ``doc_mirror.yaml`` in the working directory is used.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return {}
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path_obj)
    if suffix == ".json":
        return _read_json(path_obj)
    raise ValueError(f"Unsupported config format: {suffix}")


def load_config(
    path: Union[str, Path, None] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> CrawlerConfig:
    """
    Reads YAML or JSON, applies non-None *overrides* and returns a validated CrawlerConfig.
    Raises FileNotFoundError for a missing explicit file and ValidationError for bad values.
    """
    data = read_config_file(path)
    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return CrawlerConfig(**data)


__all__ = ["CrawlerConfig", "TOKEN_ENV", "DEFAULT_READER_URL", "load_config", "read_config_file"]
