"""
Application configuration with environment variable support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings

from goodfeed.models import Category, Source


class Settings(BaseSettings):
    # HTTP fetching
    HTTP_TIMEOUT_SECONDS: float = 20.0
    USER_AGENT: str = (
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0 Safari/537.36 goodfeed/0.1"
    )

    # Sentiment model (Hugging Face hub id)
    SENTIMENT_MODEL: str = "cardiffnlp/twitter-roberta-base-sentiment-latest"

    # Positivity gate thresholds
    SENTIMENT_FLOOR: float = 0.3
    MIN_POSITIVITY_SCORE: int = 65

    # Sources switched off by name
    DISABLED_SOURCES: List[str] = []

    # API
    CORS_ALLOW_ORIGINS: List[str] = ["*"]
    PORT: int = 8000

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_DIR: str = ""
    LOG_RETENTION_DAYS: int = 30


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once per process."""
    return Settings(_env_file=".env", _env_file_encoding="utf-8")


# Curated positive-news feeds
DEFAULT_SOURCES: List[Source] = [
    Source(
        name="Good News Network",
        feed_url="https://www.goodnewsnetwork.org/feed/",
        icon="sun.max.fill",
        default_category=Category.GOOD_NEWS,
    ),
    Source(
        name="Positive News",
        feed_url="https://www.positive.news/feed/",
        icon="sparkles",
        default_category=Category.INSPIRING_STORIES,
    ),
    Source(
        name="Reasons to be Cheerful",
        feed_url="https://reasonstobecheerful.world/feed/",
        icon="face.smiling.fill",
        default_category=Category.GOOD_NEWS,
    ),
    Source(
        name="The Optimist Daily",
        feed_url="https://www.theoptimistdaily.com/feed/",
        icon="sunrise.fill",
        default_category=Category.GOOD_NEWS,
    ),
    Source(
        name="Upworthy",
        feed_url="https://www.upworthy.com/rss.xml",
        icon="arrow.up.heart.fill",
        default_category=Category.INSPIRING_STORIES,
    ),
    Source(
        name="Good Good Good",
        feed_url="https://www.goodgoodgood.co/articles/rss.xml",
        icon="hand.thumbsup.fill",
        default_category=Category.ACTS_OF_KINDNESS,
    ),
    Source(
        name="Sunny Skyz",
        feed_url="https://www.sunnyskyz.com/rss.xml",
        icon="sun.max.fill",
        default_category=Category.GOOD_NEWS,
    ),
]


def configured_sources(settings: Settings | None = None) -> List[Source]:
    """Default sources minus the ones disabled through settings."""
    settings = settings or get_settings()
    disabled = {name.strip().lower() for name in settings.DISABLED_SOURCES}
    return [s for s in DEFAULT_SOURCES if s.name.lower() not in disabled]


def http_headers(settings: Settings | None = None) -> dict[str, str]:
    settings = settings or get_settings()
    return {
        "User-Agent": settings.USER_AGENT,
        "Accept": "application/rss+xml, application/atom+xml, application/xml;q=0.9, */*;q=0.8",
    }
