"""
Persistence collaborator interface and an in-memory reference store.

The pipeline has no durable state; it re-fetches everything each cycle and
relies on the store to upsert-if-absent by article id.
"""
from __future__ import annotations

import threading
from typing import Dict, Iterable, List, Optional, Protocol

from goodfeed.models import Candidate, Category


class ArticleStore(Protocol):
    def upsert_if_absent(self, candidates: Iterable[Candidate]) -> int:
        """Insert candidates whose id is new; return how many were inserted."""
        ...

    def recent(self, limit: Optional[int] = None, category: Optional[Category] = None) -> List[Candidate]:
        """Stored articles, newest first."""
        ...


class InMemoryArticleStore:
    """Process-local store keyed by article id."""

    def __init__(self) -> None:
        self._articles: Dict[str, Candidate] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._articles)

    def upsert_if_absent(self, candidates: Iterable[Candidate]) -> int:
        candidates = list(candidates)
        for candidate in candidates:
            if not candidate.is_verified_positive:
                raise ValueError(f"Refusing to store unverified article {candidate.id}")

        inserted = 0
        with self._lock:
            for candidate in candidates:
                if candidate.id in self._articles:
                    continue
                self._articles[candidate.id] = candidate
                inserted += 1
        return inserted

    def recent(self, limit: Optional[int] = None, category: Optional[Category] = None) -> List[Candidate]:
        with self._lock:
            articles = list(self._articles.values())

        if category is not None and category is not Category.FOR_YOU:
            articles = [a for a in articles if a.category is category]
        articles.sort(key=lambda a: a.published_at, reverse=True)
        return articles[:limit] if limit is not None else articles
