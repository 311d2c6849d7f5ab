# doc_mirror/crawler/converter.py
"""
Local HTML -> Markdown conversion, used when the reader proxy is unavailable.
"""
from __future__ import annotations

from bs4 import BeautifulSoup
from markdownify import markdownify

__all__ = ("ConversionError", "html_to_markdown")

_NON_CONTENT_TAGS = ("script", "style", "noscript", "template")


class ConversionError(Exception):
    """Raised when HTML cannot be turned into Markdown."""


def html_to_markdown(html: str) -> str:
    """Convert *html* to Markdown with ATX headings and inline links."""
    try:
        soup = BeautifulSoup(html, "html.parser")
        for element in soup(list(_NON_CONTENT_TAGS)):
            element.decompose()
        markdown = markdownify(str(soup), heading_style="ATX")
    except Exception as exc:
        raise ConversionError(f"HTML to Markdown conversion failed: {exc}") from exc
    # collapse runs of blank lines left behind by removed markup
    lines = [line.rstrip() for line in markdown.splitlines()]
    cleaned: list[str] = []
    for line in lines:
        if not line and cleaned and not cleaned[-1]:
            continue
        cleaned.append(line)
    return "\n".join(cleaned).strip() + "\n"
