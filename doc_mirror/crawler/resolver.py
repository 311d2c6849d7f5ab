# doc_mirror/crawler/resolver.py
"""
Content resolution for one target: reader proxy first, direct fetch second.

States::

    START --primary ok--> HAVE_MD --secondary ok--> HAVE_BOTH
      |                      `--secondary failed--> HAVE_MD
      `--primary failed--> MD_FAILED --secondary + conversion ok--> HAVE_CONVERTED
                               `--secondary or conversion failed--> UNREADABLE

Links of every representation that was obtained are unioned.
"""
from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List, Optional

from doc_mirror.crawler.converter import ConversionError, html_to_markdown
from doc_mirror.crawler.fetcher import FetchError, Fetcher
from doc_mirror.crawler.link_extractor import extract_links_from_html, extract_links_from_markdown
from doc_mirror.crawler.models import Resolution, ResolutionState
from doc_mirror.crawler.storage import ArtifactStore
from doc_mirror.logger import get_logger

__all__ = ("ContentResolver",)

logger = get_logger("resolver")


class ContentResolver:
    """Obtains Markdown for a target, persists it and reports outbound links."""

    def __init__(self, fetcher: Fetcher, store: ArtifactStore, base_url: str) -> None:
        self.fetcher = fetcher
        self.store = store
        self.base_url = base_url

    async def resolve(self, url: str) -> Resolution:
        resolution = Resolution(url, ResolutionState.MD_FAILED)
        md_links: List[str] = []
        html_links: List[str] = []

        try:
            page = await self.fetcher.fetch_markdown(url)
        except FetchError as exc:
            logger.warning("Reader fetch failed for %s, falling back to direct fetch: %s", url, exc)
        else:
            resolution.state = ResolutionState.HAVE_MD
            resolution.saved_path = await self._save(url, page.content)
            md_links = extract_links_from_markdown(page.content, url, self.base_url)

        html = await self._fetch_original(url)
        if html is not None:
            if resolution.state is ResolutionState.HAVE_MD:
                html_links = extract_links_from_html(html, url, self.base_url)
                resolution.state = ResolutionState.HAVE_BOTH
            else:
                try:
                    markdown = html_to_markdown(html)
                except ConversionError as exc:
                    logger.warning("Could not convert %s: %s", url, exc)
                else:
                    resolution.saved_path = await self._save(url, markdown)
                    md_links = extract_links_from_markdown(markdown, url, self.base_url)
                    resolution.state = ResolutionState.HAVE_CONVERTED

        if resolution.state is ResolutionState.MD_FAILED:
            resolution.state = ResolutionState.UNREADABLE
            logger.error("No content could be obtained for %s", url)
            return resolution

        resolution.links = list(dict.fromkeys(md_links + html_links))
        logger.debug("%s resolved as %s with %d links", url, resolution.state.value, len(resolution.links))
        return resolution

    async def _fetch_original(self, url: str) -> Optional[str]:
        try:
            page = await self.fetcher.fetch_original(url)
        except FetchError as exc:
            logger.warning("Direct fetch failed for %s: %s", url, exc)
            return None
        return page.content

    async def _save(self, url: str, content: str) -> Optional[Path]:
        # links are still reported when the write fails
        try:
            return await asyncio.to_thread(self.store.save, url, content)
        except OSError as exc:
            logger.error("Could not save %s to %s: %s", url, self.store.path_for(url), exc)
            return None
