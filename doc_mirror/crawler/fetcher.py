# doc_mirror/crawler/fetcher.py
"""
Fetcher module: the two content sources of a target.

* primary   - the reader proxy, ``GET <reader_url>/<target>``, returns Markdown;
* secondary - the target itself, returns the original HTML.

Each call is a single attempt; failures surface as :class:`FetchError`.
"""
from __future__ import annotations

import asyncio
from typing import Dict, Optional

from aiohttp import ClientError, ClientSession, ClientTimeout

from doc_mirror.config import CrawlerConfig
from doc_mirror.crawler.models import PageData
from doc_mirror.logger import get_logger

__all__ = ("FetchError", "Fetcher")

logger = get_logger("fetcher")


class FetchError(Exception):
    """A content source failed for *url* (network error or non-2xx status)."""

    def __init__(self, url: str, message: str, status: Optional[int] = None) -> None:
        super().__init__(f"{url}: {message}")
        self.url = url
        self.status = status


class Fetcher:
    """Fetches Markdown through the reader proxy and HTML directly."""

    def __init__(self, config: CrawlerConfig, session: Optional[ClientSession] = None) -> None:
        self.config = config
        self.session = session
        self._owns_session = session is None
        self._reader = str(config.reader_url).rstrip("/")

    async def __aenter__(self) -> Fetcher:
        if self.session is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.timeout),
                headers={"User-Agent": self.config.user_agent},
                raise_for_status=False,
                trust_env=True,
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    def reader_url_for(self, url: str) -> str:
        return f"{self._reader}{'' if url.startswith('/') else '/'}{url}"

    async def fetch_markdown(self, url: str) -> PageData:
        """Primary source: Markdown rendition of *url* from the reader proxy."""
        proxy_url = self.reader_url_for(url)
        headers: Dict[str, str] = {}
        if self.config.token:
            headers["Authorization"] = f"Bearer {self.config.token}"
        logger.info("Fetching content from: %s", proxy_url)
        text = await self._get(proxy_url, url, headers)
        return PageData(url, text)

    async def fetch_original(self, url: str) -> PageData:
        """Secondary source: the original document at *url*."""
        logger.info("Fetching original content from: %s", url)
        text = await self._get(url, url, {})
        return PageData(url, text)

    async def _get(self, request_url: str, target: str, headers: Dict[str, str]) -> str:
        if not self.session:
            raise RuntimeError("Session not initialized")
        try:
            async with self.session.get(
                request_url, headers=headers, proxy=self.config.proxy_for(request_url)
            ) as resp:
                if not 200 <= resp.status < 300:
                    raise FetchError(target, f"HTTP {resp.status} from {request_url}", resp.status)
                return await resp.text(errors="replace")
        except asyncio.TimeoutError as exc:
            raise FetchError(target, f"timeout fetching {request_url}") from exc
        except ClientError as exc:
            raise FetchError(target, f"{type(exc).__name__}: {exc}") from exc
