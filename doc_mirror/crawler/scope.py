# doc_mirror/crawler/scope.py
"""
URL scope and filter rules: which URLs are crawlable, which belong to the
mirrored site, and how URLs are normalized before deduplication.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Tuple
from urllib.parse import urlsplit

__all__ = (
    "ScopeBoundary",
    "is_url_in_scope",
    "should_crawl_url",
    "normalize_url",
    "origin_of",
)

_ALLOWED_SCHEMES = ("http", "https")
_DEFAULT_PORTS = {"http": 80, "https": 443}

# Non-document resources: archives, office documents, executables, video, audio.
_SKIP_EXTENSION_RE = re.compile(
    r"\.(?:"
    r"zip|rar|7z|tar|gz|bz2|xz"
    r"|pdf|docx?|xlsx?|pptx?|odt|ods|odp"
    r"|exe|dmg|pkg|deb|rpm|msi|apk"
    r"|mp4|avi|mov|wmv|flv|mkv|webm"
    r"|mp3|wav|ogg|flac|aac|m4a"
    r")$",
    re.IGNORECASE,
)

Origin = Tuple[str, str, int]


def origin_of(url: str) -> Origin:
    """Return ``(scheme, host, port)`` with the default port made explicit.

    Raises ValueError for URLs that are not absolute or carry an invalid port.
    """
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()
    if not scheme or not host:
        raise ValueError(f"not an absolute URL: {url!r}")
    port = parts.port or _DEFAULT_PORTS.get(scheme, 0)
    return scheme, host, port


@dataclass(frozen=True, slots=True)
class ScopeBoundary:
    """Origin and base path derived from the run's base URL."""

    origin: Origin
    base_path: str

    @classmethod
    def from_url(cls, base_url: str) -> ScopeBoundary:
        return cls(origin_of(base_url), urlsplit(base_url).path.rstrip("/"))

    def contains(self, url: str) -> bool:
        if origin_of(url) != self.origin:
            return False
        path = urlsplit(url).path.rstrip("/")
        base = self.base_path
        return path == base or path.startswith(f"{base}/") or (base == "" and path.startswith("/"))


def is_url_in_scope(url: str, base_url: str) -> bool:
    """Same origin as *base_url* and a path equal to or below its path.

    ``/docs`` contains ``/docs/guide`` but not ``/documentation``.
    """
    return ScopeBoundary.from_url(base_url).contains(url)


def should_crawl_url(url: str) -> bool:
    """Fail-closed filter: only http(s) documents, never binaries or media."""
    try:
        parts = urlsplit(url)
        _ = parts.port  # raises ValueError on a malformed port
    except ValueError:
        return False
    if parts.scheme.lower() not in _ALLOWED_SCHEMES or not parts.hostname:
        return False
    last_segment = parts.path.rsplit("/", 1)[-1]
    return not _SKIP_EXTENSION_RE.search(last_segment)


def normalize_url(url: str) -> str:
    """Drop in-page anchors, keep hash-router fragments.

    A fragment containing ``/`` (``#/guide/intro``) identifies a distinct page
    in a client-side router and is kept verbatim; any other fragment, including
    an empty one, is removed together with the ``#``.
    """
    try:
        fragment = urlsplit(url).fragment
    except ValueError:
        return url.split("#", 1)[0]
    if "/" in fragment:
        return url
    return url.split("#", 1)[0]
