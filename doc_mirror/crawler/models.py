# doc_mirror/crawler/models.py
"""
Data models for the DocMirror crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


@dataclass(slots=True)
class PageData:
    """Holds the URL and text content of one representation of a page."""

    url: str
    content: str


class ResolutionState(str, Enum):
    """Where the content resolver ended up for a single target."""

    HAVE_MD = "have_md"
    MD_FAILED = "md_failed"
    HAVE_CONVERTED = "have_converted"
    HAVE_BOTH = "have_both"
    UNREADABLE = "unreadable"


@dataclass(slots=True)
class Resolution:
    """Outcome of resolving one target: final state, outbound links, artifact path."""

    url: str
    state: ResolutionState
    links: List[str] = field(default_factory=list)
    saved_path: Optional[Path] = None

    @property
    def readable(self) -> bool:
        return self.state is not ResolutionState.UNREADABLE


@dataclass(slots=True)
class CrawlStats:
    """Counters collected during one crawl run."""

    visited: int = 0
    reused: int = 0
    fetched: int = 0
    converted: int = 0
    unreadable: List[str] = field(default_factory=list)
    saved: List[str] = field(default_factory=list)

    def record(self, resolution: Resolution) -> None:
        if resolution.state in (ResolutionState.HAVE_MD, ResolutionState.HAVE_BOTH):
            self.fetched += 1
        elif resolution.state is ResolutionState.HAVE_CONVERTED:
            self.converted += 1
        elif resolution.state is ResolutionState.UNREADABLE:
            self.unreadable.append(resolution.url)
        if resolution.saved_path is not None:
            self.saved.append(str(resolution.saved_path))
