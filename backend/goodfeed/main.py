"""
FastAPI surface over the feed pipeline.
"""
from __future__ import annotations

import asyncio
import logging
import time
from functools import lru_cache
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from goodfeed.config import configured_sources, get_settings
from goodfeed.core.positivity import FilterPolicy, PositivityFilter
from goodfeed.core.sentiment import SentimentScorer, warm_up
from goodfeed.logging_config import setup_logging
from goodfeed.models import Category
from goodfeed.schemas import ArticleOut, FeedResponse, RefreshResponse
from goodfeed.sources.collector import FeedAggregator
from goodfeed.store import ArticleStore, InMemoryArticleStore
from goodfeed.utils import now_utc

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_aggregator() -> FeedAggregator:
    settings = get_settings()
    return FeedAggregator(
        scorer=SentimentScorer(),
        positivity_filter=PositivityFilter(FilterPolicy.from_settings(settings)),
    )


@lru_cache(maxsize=1)
def get_store() -> ArticleStore:
    return InMemoryArticleStore()


def parse_category(category: Optional[str]) -> Category:
    if not category:
        return Category.FOR_YOU
    try:
        return Category(category)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Unknown category: {category}")


settings = get_settings()

app = FastAPI(
    title="Good Feed API",
    version="0.1.0",
    description="Positive news aggregated from curated RSS/Atom feeds",
)


@app.on_event("startup")
async def warm_startup():
    """Configure logging and warm up the sentiment model."""
    setup_logging(
        level=settings.LOG_LEVEL,
        fmt=settings.LOG_FORMAT,
        log_dir=Path(settings.LOG_DIR) if settings.LOG_DIR else None,
        retention_days=settings.LOG_RETENTION_DAYS,
    )

    async def load_model():
        start_time = time.perf_counter()
        try:
            # Load model in thread to avoid blocking startup
            await asyncio.to_thread(warm_up)
            logger.info("Sentiment model loaded in %.1fs", time.perf_counter() - start_time)
        except Exception as e:
            logger.warning("Model warm-up skipped: %s", e)

    # Held on app.state so the task is not garbage-collected mid-load
    app.state.model_warmup = asyncio.create_task(load_model())


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "ok",
        "as_of": now_utc().isoformat(),
        "service": "goodfeed",
    }


@app.post("/refresh", response_model=RefreshResponse)
async def refresh_feeds(
    aggregator: FeedAggregator = Depends(get_aggregator),
    store: ArticleStore = Depends(get_store),
):
    """Run one aggregation cycle and store newly admitted articles."""
    sources = configured_sources()
    admitted = await aggregator.fetch_all(sources)
    inserted = store.upsert_if_absent(admitted)
    logger.info("Refresh stored %d new of %d admitted articles", inserted, len(admitted))

    return RefreshResponse(
        as_of=now_utc().isoformat(),
        n_sources=len([s for s in sources if s.enabled]),
        n_admitted=len(admitted),
        n_inserted=inserted,
    )


@app.get("/articles", response_model=FeedResponse)
async def list_articles(
    category: Optional[str] = Query(None, description="Category filter; for_you shows everything"),
    limit: int = Query(50, ge=1, le=200, description="Maximum number of articles"),
    store: ArticleStore = Depends(get_store),
):
    """Stored positive articles, newest first."""
    selected = parse_category(category)
    articles = store.recent(limit=limit, category=selected)

    return FeedResponse(
        as_of=now_utc().isoformat(),
        category=selected,
        n_items=len(articles),
        items=[ArticleOut.from_candidate(a) for a in articles],
        message="" if articles else "No content yet. Try refreshing.",
    )


if __name__ == "__main__":
    # For development
    import uvicorn
    uvicorn.run("goodfeed.main:app", host="0.0.0.0", port=settings.PORT, reload=True)
