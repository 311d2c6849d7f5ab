# File: doc_mirror/crawler/__init__.py
"""doc_mirror.crawler: scope rules, link extraction, content resolution, scheduling and the crawl itself."""

from doc_mirror.crawler.crawler import DocCrawler, start_crawling
from doc_mirror.crawler.link_extractor import extract_links_from_html, extract_links_from_markdown
from doc_mirror.crawler.scope import is_url_in_scope, normalize_url, should_crawl_url

__all__ = [
    "DocCrawler",
    "start_crawling",
    "extract_links_from_html",
    "extract_links_from_markdown",
    "is_url_in_scope",
    "normalize_url",
    "should_crawl_url",
]
