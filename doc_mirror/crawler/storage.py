# doc_mirror/crawler/storage.py
"""
On-disk Markdown artifacts.

The artifact of URL ``U`` crawled from base ``B`` lives at
``<output_dir>/<name>/<path of U below the path of B>.md``; the base itself
maps to ``index.md``. An existing artifact is never overwritten.
"""
from __future__ import annotations

import posixpath
from pathlib import Path
from typing import Optional, Union
from urllib.parse import unquote, urlsplit

from doc_mirror.logger import get_logger

__all__ = ("ArtifactStore",)

logger = get_logger("storage")


class ArtifactStore:
    """Maps target URLs to Markdown files under one project directory."""

    def __init__(self, output_dir: Union[str, Path], name: str, base_url: str) -> None:
        self.root = Path(output_dir) / name
        self._base_path = urlsplit(base_url).path.rstrip("/")

    def relative_path(self, url: str) -> str:
        """Path of *url* below the base path, without leading or trailing slashes."""
        path = unquote(urlsplit(url).path)
        base = unquote(self._base_path)
        if base and (path == base or path.startswith(f"{base}/")):
            path = path[len(base):]
        segments = [s for s in posixpath.normpath(f"/{path}").split("/") if s not in ("", ".", "..")]
        return "/".join(segments)

    def path_for(self, url: str) -> Path:
        relative = self.relative_path(url)
        if not relative:
            return self.root / "index.md"
        return self.root / f"{relative}.md"

    def exists(self, url: str) -> bool:
        return self.path_for(url).is_file()

    def read(self, url: str) -> str:
        path = self.path_for(url)
        logger.info("Reading existing file: %s", path)
        return path.read_text(encoding="utf-8")

    def save(self, url: str, content: str) -> Optional[Path]:
        """Write *content* as the artifact of *url*; returns None if it already exists."""
        path = self.path_for(url)
        if path.exists():
            logger.info("File already exists: %s", path)
            return None
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Saving content to: %s", path)
        path.write_text(content, encoding="utf-8")
        return path
