"""
Feed aggregation: fan out one task per source, fan in, sort, filter.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Iterable, List, Optional

import httpx

from goodfeed.config import get_settings, http_headers
from goodfeed.core.classifier import classify, extract_keywords
from goodfeed.core.positivity import PositivityFilter
from goodfeed.core.sentiment import SentimentScorer
from goodfeed.models import Candidate, Category, RawItem, Source
from goodfeed.sources.common import make_article_id, parse_published_at
from goodfeed.sources.errors import FeedError
from goodfeed.sources.feed_parser import fetch_and_parse

logger = logging.getLogger(__name__)

FeedFetcher = Callable[[str, Optional[httpx.AsyncClient]], Awaitable[List[RawItem]]]


class FeedAggregator:
    """Runs one fetch -> parse -> classify -> score cycle over all sources."""

    def __init__(
        self,
        scorer: SentimentScorer,
        positivity_filter: PositivityFilter,
        fetcher: FeedFetcher = fetch_and_parse,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.scorer = scorer
        self.positivity_filter = positivity_filter
        self._fetcher = fetcher
        self._client = client

    async def build_candidate(self, item: RawItem, source: Source) -> Candidate:
        """Classify and score one feed item."""
        category = classify(item.title, item.description, source.default_category)
        sentiment = await self.scorer.score(f"{item.title}. {item.description}")

        return Candidate(
            id=make_article_id(item.link),
            title=item.title,
            description=item.description,
            content=item.content,
            author=item.author,
            source_name=source.name,
            source_icon=source.icon,
            image_url=item.image_url,
            article_url=item.link,
            published_at=parse_published_at(item.pub_date),
            category=category,
            keywords=extract_keywords(f"{item.title} {item.description}"),
            sentiment_score=sentiment,
        )

    async def collect_source(self, source: Source, client: Optional[httpx.AsyncClient] = None) -> List[Candidate]:
        """
        Fetch one source and turn its items into candidates.

        Feed failures only cost this source its articles for the cycle.
        """
        try:
            items = await self._fetcher(source.feed_url, client)
        except FeedError as e:
            logger.warning("Failed to fetch feed from %s: %s", source.name, e)
            return []

        candidates = [await self.build_candidate(item, source) for item in items]
        logger.info("Fetched %d articles from %s", len(candidates), source.name)
        return candidates

    async def _gather(self, sources: List[Source], client: Optional[httpx.AsyncClient]) -> List[Candidate]:
        results = await asyncio.gather(
            *(self.collect_source(source, client) for source in sources),
            return_exceptions=True,
        )

        merged: List[Candidate] = []
        for source, result in zip(sources, results):
            if isinstance(result, BaseException):
                logger.error("Unexpected failure collecting %s", source.name, exc_info=result)
                continue
            merged.extend(result)
        return merged

    async def fetch_all(
        self,
        sources: Iterable[Source],
        category: Optional[Category] = None,
    ) -> List[Candidate]:
        """
        Collect every enabled source concurrently and return admitted articles.

        Args:
            sources: Configured sources; disabled ones are skipped
            category: Optional narrowing; ``for_you`` keeps everything

        Returns:
            Admitted candidates, newest first
        """
        enabled = [s for s in sources if s.enabled]

        if self._client is not None:
            merged = await self._gather(enabled, self._client)
        else:
            settings = get_settings()
            async with httpx.AsyncClient(
                headers=http_headers(settings),
                timeout=settings.HTTP_TIMEOUT_SECONDS,
            ) as client:
                merged = await self._gather(enabled, client)

        if not merged:
            logger.warning("No content: all %d sources failed or returned nothing", len(enabled))
            return []

        # Stable sort, newest first
        merged.sort(key=lambda c: c.published_at, reverse=True)
        admitted = self.positivity_filter.filter(merged)
        logger.info("Admitted %d of %d articles", len(admitted), len(merged))

        if category is not None and category is not Category.FOR_YOU:
            admitted = [c for c in admitted if c.category is category]
        return admitted
