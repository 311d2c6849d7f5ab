# doc_mirror/crawler/link_extractor.py
"""
Link extraction for DocMirror.

Both entry points harvest raw link targets from a content blob (Markdown or
HTML) and run them through the same policy: resolve against the current page,
keep crawlable in-scope URLs only, normalize and deduplicate.
"""
from __future__ import annotations

import re
from typing import Iterable, List
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup
from bs4.element import Tag

from doc_mirror.crawler.scope import ScopeBoundary, normalize_url, should_crawl_url
from doc_mirror.logger import get_logger

__all__ = ("extract_links_from_markdown", "extract_links_from_html", "filter_links")

logger = get_logger("links")

_MD_IMAGE_RE = re.compile(r"!\[[^\]]*\]\([^)]*\)")
_MD_LINK_RE = re.compile(r"\[[^\]]*\]\((.*?)\)")
_IMAGE_EXT_RE = re.compile(r"\.(?:jpg|jpeg|png|gif|bmp|webp|svg|ico)$", re.IGNORECASE)


def _markdown_target(raw: str) -> str:
    """``<url> "title"`` -> ``url``."""
    raw = raw.strip()
    if raw.startswith("<") and ">" in raw:
        return raw[1 : raw.index(">")].strip()
    return raw.split(None, 1)[0] if raw else raw


def filter_links(candidates: Iterable[str], current_url: str, base_url: str) -> List[str]:
    """
    Resolve *candidates* against *current_url* and keep crawlable URLs inside
    the scope of *base_url*, normalized and deduplicated.

    A malformed candidate is logged and skipped; the rest are still processed.
    """
    boundary = ScopeBoundary.from_url(base_url)
    links: dict[str, None] = {}
    for raw in candidates:
        try:
            absolute = urljoin(current_url, raw)
            if not should_crawl_url(absolute):
                logger.debug("Skipping non-crawlable link: %s", absolute)
                continue
            if not boundary.contains(absolute):
                logger.debug("Skipping out-of-scope link: %s", absolute)
                continue
        except ValueError as exc:
            logger.warning("Invalid URL: %s (%s)", raw, exc)
            continue
        links.setdefault(normalize_url(absolute), None)
    return list(links)


def extract_links_from_markdown(content: str, current_url: str, base_url: str) -> List[str]:
    """
    Extract navigable links from Markdown.

    Image constructs ``![alt](src)`` are removed first, so a clickable image
    ``[![alt](img)](page)`` leaves ``[](page)`` behind and yields only ``page``.
    """
    without_images = _MD_IMAGE_RE.sub("", content)
    targets = (_markdown_target(m.group(1)) for m in _MD_LINK_RE.finditer(without_images))
    return filter_links((t for t in targets if t), current_url, base_url)


def _html_hrefs(content: str) -> Iterable[str]:
    soup = BeautifulSoup(content, "html.parser")
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        href = href_val.strip()
        if not href:
            continue
        try:
            path = urlsplit(href).path
        except ValueError as exc:
            logger.warning("Invalid URL: %s (%s)", href, exc)
            continue
        if _IMAGE_EXT_RE.search(path):
            continue
        yield href


def extract_links_from_html(content: str, current_url: str, base_url: str) -> List[str]:
    """Extract ``<a href>`` targets from HTML, ignoring links to image files."""
    return filter_links(_html_hrefs(content), current_url, base_url)
