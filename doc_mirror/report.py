# File: doc_mirror/report.py
"""doc_mirror.report: run summary built from CrawlStats, rendered as JSON."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import List, Union

from doc_mirror.crawler.models import CrawlStats


@dataclass(slots=True)
class CrawlReport:
    """Outcome of one mirroring run."""

    base_url: str
    name: str
    visited: int = 0
    fetched: int = 0
    converted: int = 0
    reused: int = 0
    saved: List[str] = field(default_factory=list)
    unreadable: List[str] = field(default_factory=list)

    def summary(self) -> str:
        return (
            f"{self.name}: {self.visited} pages visited, {self.fetched} via reader, "
            f"{self.converted} converted locally, {self.reused} already on disk, "
            f"{len(self.unreadable)} unreadable"
        )

    def json(self, *, pretty: bool = False) -> str:
        return json.dumps(asdict(self), ensure_ascii=False, indent=2 if pretty else None)


def aggregate_results(stats: CrawlStats, base_url: str, name: str) -> CrawlReport:
    """Collects the counters of a finished run into a CrawlReport."""
    return CrawlReport(
        base_url=base_url,
        name=name,
        visited=stats.visited,
        fetched=stats.fetched,
        converted=stats.converted,
        reused=stats.reused,
        saved=sorted(stats.saved),
        unreadable=sorted(stats.unreadable),
    )


def render_json(report: CrawlReport, output_path: Union[str, Path], *, pretty: bool = True) -> Path:
    """
    Saves *report* as JSON at *output_path* and returns the path.

    Example:
    ```python
    from doc_mirror.report import render_json
    report_path = render_json(report, "reports/run.json")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(report.json(pretty=pretty), encoding="utf-8")
    return output


__all__ = ["CrawlReport", "aggregate_results", "render_json"]
