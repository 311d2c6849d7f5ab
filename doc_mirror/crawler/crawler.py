# === FILE: doc_mirror/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import time
from typing import Any, Iterable, List, Optional, Set

from doc_mirror.config import CrawlerConfig
from doc_mirror.crawler.fetcher import Fetcher
from doc_mirror.crawler.link_extractor import extract_links_from_markdown
from doc_mirror.crawler.models import CrawlStats
from doc_mirror.crawler.resolver import ContentResolver
from doc_mirror.crawler.scheduler import RequestScheduler
from doc_mirror.crawler.scope import normalize_url
from doc_mirror.crawler.storage import ArtifactStore
from doc_mirror.logger import get_logger

__all__ = ("DocCrawler", "start_crawling")

logger = get_logger("crawler")


class DocCrawler:
    """
    Depth-bounded mirror of one documentation site.

    All state (visited set, scheduler, fan-out limiter) belongs to the
    instance, so several runs can share a process. Network work goes through
    the scheduler one job at a time; the limiter only bounds how many crawl
    branches are doing work at once.
    """

    def __init__(
        self,
        config: CrawlerConfig,
        fetcher: Optional[Fetcher] = None,
        store: Optional[ArtifactStore] = None,
    ) -> None:
        self.config = config
        self.base_url = str(config.base_url)
        self.fetcher = fetcher or Fetcher(config)
        self.store = store or ArtifactStore(config.output_dir, config.name, self.base_url)
        self.resolver = ContentResolver(self.fetcher, self.store, self.base_url)
        self.scheduler = RequestScheduler(config.request_interval)
        self.visited: Set[str] = set()
        self.stats = CrawlStats()
        self._limiter = asyncio.Semaphore(config.concurrency)

    async def __aenter__(self) -> DocCrawler:
        await self.fetcher.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.fetcher.__aexit__(exc_type, exc, tb)

    async def run(self) -> CrawlStats:
        """Crawl from the base URL until all reachable work is done."""
        logger.info("Crawl started: %s (max depth %d)", self.base_url, self.config.max_depth)
        start = time.monotonic()
        await self.crawl(self.base_url, 0)
        await self.scheduler.join()
        duration = time.monotonic() - start
        logger.info(
            "Finished: %d visited, %d fetched, %d converted, %d reused, %d unreadable in %.2f s",
            self.stats.visited,
            self.stats.fetched,
            self.stats.converted,
            self.stats.reused,
            len(self.stats.unreadable),
            duration,
        )
        return self.stats

    async def crawl(self, url: str, depth: int) -> None:
        """Visit *url* at *depth*, then its in-scope links one level deeper."""
        normalized = normalize_url(url)
        if not self._claim(normalized, depth):
            return
        async with self._limiter:
            links = await self._visit(normalized, depth)
        await self._fan_out(links, depth + 1)

    def _claim(self, url: str, depth: int) -> bool:
        # check and add with no suspension point in between
        if depth > self.config.max_depth or url in self.visited:
            return False
        self.visited.add(url)
        self.stats.visited += 1
        return True

    async def _visit(self, url: str, depth: int) -> List[str]:
        """A branch's own work: links of an existing artifact, or a scheduled fetch."""
        if not await asyncio.to_thread(self.store.exists, url):
            self.scheduler.submit(lambda: self._fetch_job(url, depth))
            return []
        try:
            content = await asyncio.to_thread(self.store.read, url)
        except OSError as exc:
            logger.error("Could not read artifact for %s: %s", url, exc)
            return []
        self.stats.reused += 1
        return extract_links_from_markdown(content, url, self.base_url)

    async def _fetch_job(self, url: str, depth: int) -> None:
        try:
            resolution = await self.resolver.resolve(url)
        except Exception:
            logger.exception("Failed to resolve %s", url)
            self.stats.unreadable.append(url)
            return
        self.stats.record(resolution)
        await self._fan_out(resolution.links, depth + 1)

    async def _fan_out(self, links: Iterable[str], depth: int) -> None:
        """
        Start one branch per unvisited link. A permit is taken before each
        branch is created, so at most ``concurrency`` branches are visiting at
        any time; each gives its permit back before fanning out itself.
        """
        if depth > self.config.max_depth:
            return
        branches: List[asyncio.Task[None]] = []
        for link in links:
            normalized = normalize_url(link)
            if not self._claim(normalized, depth):
                continue
            await self._limiter.acquire()
            branches.append(asyncio.create_task(self._branch(normalized, depth)))
        if branches:
            await asyncio.gather(*branches)

    async def _branch(self, url: str, depth: int) -> None:
        try:
            links = await self._visit(url, depth)
        finally:
            self._limiter.release()
        await self._fan_out(links, depth + 1)


async def start_crawling(
    base_url: str,
    name: str,
    max_depth: int = 2,
    token: Optional[str] = None,
    **options: Any,
) -> CrawlStats:
    """Mirror *base_url* into ``<output_dir>/<name>``; extra *options* go to CrawlerConfig."""
    config = CrawlerConfig(base_url=base_url, name=name, max_depth=max_depth, token=token, **options)
    async with DocCrawler(config) as crawler:
        return await crawler.run()
