# File: tests/conftest.py
from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import Awaitable, Callable, Dict, List, Optional, Tuple

import pytest
import pytest_asyncio
from aiohttp import web

from doc_mirror.config import CrawlerConfig
from doc_mirror.crawler.fetcher import FetchError
from doc_mirror.crawler.models import PageData
from doc_mirror.logger import configure

BASE_URL = "https://example.com/docs"

_ENV_VARS = (
    "JINA_READER_TOKEN",
    "HTTP_PROXY",
    "http_proxy",
    "HTTPS_PROXY",
    "https_proxy",
    "ALL_PROXY",
    "all_proxy",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """
    Keep the developer's token and proxy settings out of the tests and
    re-attach the project logger to the current stdout.
    """
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    configure(level="DEBUG")


@pytest.fixture()
def make_config(tmp_path) -> Callable[..., CrawlerConfig]:
    """
    Return a factory for CrawlerConfig objects writing into *tmp_path*
    with no pause between scheduled jobs.
    """

    def _make(**overrides) -> CrawlerConfig:
        data = {
            "base_url": BASE_URL,
            "name": "example",
            "output_dir": tmp_path / "out",
            "request_interval": 0,
            "timeout": 5.0,
        }
        data.update(overrides)
        return CrawlerConfig(**data)

    return _make


class FakeFetcher:
    """
    In-memory stand-in for Fetcher: serves Markdown and HTML from dicts,
    raises FetchError for unknown URLs and records every call.
    """

    def __init__(
        self,
        markdown: Optional[Dict[str, str]] = None,
        html: Optional[Dict[str, str]] = None,
        delay: float = 0.0,
    ) -> None:
        self.markdown = markdown or {}
        self.html = html or {}
        self.delay = delay
        self.calls: List[Tuple[str, str]] = []
        self.active = 0
        self.max_active = 0

    async def __aenter__(self) -> FakeFetcher:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    async def _serve(self, kind: str, url: str, pages: Dict[str, str]) -> PageData:
        self.calls.append((kind, url))
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if url not in pages:
                raise FetchError(url, "HTTP 404", 404)
            return PageData(url, pages[url])
        finally:
            self.active -= 1

    async def fetch_markdown(self, url: str) -> PageData:
        return await self._serve("markdown", url, self.markdown)

    async def fetch_original(self, url: str) -> PageData:
        return await self._serve("html", url, self.html)

    def urls(self, kind: str) -> List[str]:
        return [url for k, url in self.calls if k == kind]


@pytest.fixture()
def fake_fetcher() -> type[FakeFetcher]:
    """Provide the FakeFetcher class; tests build it with their own pages."""
    return FakeFetcher


@pytest_asyncio.fixture
async def serve(unused_tcp_port_factory) -> AsyncIterator[Callable[[web.Application], Awaitable[str]]]:
    """Start aiohttp apps on free local ports; every app is cleaned up after the test."""
    runners: List[web.AppRunner] = []

    async def _serve(app: web.Application) -> str:
        runner = web.AppRunner(app)
        await runner.setup()
        runners.append(runner)
        port = unused_tcp_port_factory()
        site = web.TCPSite(runner, "127.0.0.1", port)
        await site.start()
        return f"http://127.0.0.1:{port}"

    yield _serve
    for runner in runners:
        await runner.cleanup()
