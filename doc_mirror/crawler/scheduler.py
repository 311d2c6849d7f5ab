# doc_mirror/crawler/scheduler.py
"""
Request scheduler: a FIFO of network jobs drained by a single worker task
with a fixed pause after every job (3 s by default, roughly 20 requests per
minute against the reader proxy).
"""
from __future__ import annotations

import asyncio
from collections import deque
from typing import Awaitable, Callable, Deque, Optional

from doc_mirror.logger import get_logger

__all__ = ("Job", "RequestScheduler")

logger = get_logger("scheduler")

Job = Callable[[], Awaitable[None]]


class RequestScheduler:
    """Runs submitted jobs one at a time, ``interval`` seconds apart."""

    def __init__(self, interval: float = 3.0) -> None:
        if interval < 0:
            raise ValueError("interval must be >= 0")
        self.interval = interval
        self._queue: Deque[Job] = deque()
        self._worker: Optional[asyncio.Task[None]] = None
        self._processed = 0

    @property
    def pending(self) -> int:
        return len(self._queue)

    @property
    def processed(self) -> int:
        return self._processed

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    def submit(self, job: Job) -> None:
        """Enqueue *job* without waiting; starts the worker if it is idle."""
        self._queue.append(job)
        if not self.running:
            self._worker = asyncio.get_running_loop().create_task(self._drain())

    async def join(self) -> None:
        """Wait until every submitted job (including ones submitted meanwhile) has run."""
        while (worker := self._worker) is not None and not worker.done():
            await asyncio.wait({worker})

    async def _drain(self) -> None:
        while self._queue:
            job = self._queue.popleft()
            try:
                await job()
            except Exception:
                logger.exception("Scheduled job raised; continuing with the next one")
            self._processed += 1
            await asyncio.sleep(self.interval)
