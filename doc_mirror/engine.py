# File: doc_mirror/engine.py
"""doc_mirror.engine: orchestration layer that runs a crawl and builds its report."""

from __future__ import annotations

from doc_mirror.config import CrawlerConfig
from doc_mirror.crawler.crawler import DocCrawler
from doc_mirror.logger import get_logger
from doc_mirror.report import CrawlReport, aggregate_results

__all__ = ["start_crawl"]

logger = get_logger("engine")


async def start_crawl(config: CrawlerConfig) -> CrawlReport:
    """Runs one mirroring pass described by *config* and returns its report."""
    logger.info("Starting crawl…")
    async with DocCrawler(config) as crawler:
        stats = await crawler.run()
    return aggregate_results(stats, str(config.base_url), config.name)
