"""
Feed fetch/parse failures. Each is fatal to one source's fetch only.
"""
from __future__ import annotations

from typing import Optional


class FeedError(Exception):
    """Base class for per-source feed failures."""


class InvalidURLError(FeedError):
    def __init__(self, url: str) -> None:
        super().__init__(f"Invalid feed URL: {url!r}")
        self.url = url


class NetworkError(FeedError):
    def __init__(self, url: str, status_code: Optional[int] = None, detail: str = "") -> None:
        message = f"Failed to fetch feed {url}"
        if status_code is not None:
            message += f" (HTTP {status_code})"
        if detail:
            message += f": {detail}"
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ParsingFailed(FeedError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to parse feed: {reason}")
        self.reason = reason


__all__ = ["FeedError", "InvalidURLError", "NetworkError", "ParsingFailed"]
