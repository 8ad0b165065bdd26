"""
File: goodfeed/models.py
Internal data structures used during collection/analysis.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Tuple


class Category(str, Enum):
    """Closed set of topical categories, in classification order."""

    FOR_YOU = "for_you"
    GOOD_NEWS = "good_news"
    INSPIRING_STORIES = "inspiring_stories"
    ACTS_OF_KINDNESS = "acts_of_kindness"
    SCIENCE_INNOVATION = "science_innovation"
    ENVIRONMENT = "environment"
    HEALTH_WELLNESS = "health_wellness"
    ARTS_CULTURE = "arts_culture"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def keywords(self) -> Tuple[str, ...]:
        return _CATEGORY_KEYWORDS[self]

    @classmethod
    def from_value(cls, raw: Optional[str], default: Optional["Category"] = None) -> "Category":
        """Resolve a raw value, falling back to ``default`` (good news)."""
        try:
            return cls(raw)
        except ValueError:
            return default or cls.GOOD_NEWS


_DISPLAY_NAMES = {
    Category.FOR_YOU: "For You",
    Category.GOOD_NEWS: "Good News",
    Category.INSPIRING_STORIES: "Inspiring Stories",
    Category.ACTS_OF_KINDNESS: "Acts of Kindness",
    Category.SCIENCE_INNOVATION: "Science & Innovation",
    Category.ENVIRONMENT: "Environment",
    Category.HEALTH_WELLNESS: "Health & Wellness",
    Category.ARTS_CULTURE: "Arts & Culture",
}

_CATEGORY_KEYWORDS = {
    Category.FOR_YOU: (),
    Category.GOOD_NEWS: (
        "positive", "uplifting", "success", "breakthrough",
        "achievement", "celebrate", "joy", "happy",
    ),
    Category.INSPIRING_STORIES: (
        "inspiration", "hero", "overcome", "triumph",
        "courage", "brave", "remarkable", "extraordinary",
    ),
    Category.ACTS_OF_KINDNESS: (
        "kindness", "charity", "volunteer", "donate",
        "help", "community", "generous", "compassion",
    ),
    Category.SCIENCE_INNOVATION: (
        "discovery", "innovation", "research", "breakthrough",
        "cure", "solution", "technology", "science",
    ),
    Category.ENVIRONMENT: (
        "sustainability", "conservation", "clean", "renewable",
        "wildlife", "nature", "climate", "green",
    ),
    Category.HEALTH_WELLNESS: (
        "wellness", "recovery", "fitness", "mental health",
        "healing", "healthy", "self-care", "wellbeing",
    ),
    Category.ARTS_CULTURE: (
        "creativity", "music", "art", "culture",
        "exhibition", "performance", "artist", "creative",
    ),
}


def _slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


@dataclass(frozen=True)
class Source:
    """A configured feed endpoint. Never mutated after startup."""

    name: str
    feed_url: str
    icon: str
    default_category: Category
    enabled: bool = True
    id: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            object.__setattr__(self, "id", _slugify(self.name))


@dataclass(frozen=True)
class RawItem:
    """One parsed feed entry, before classification and scoring."""

    title: str
    description: str
    link: str
    pub_date: str
    image_url: Optional[str] = None
    author: Optional[str] = None
    content: Optional[str] = None


@dataclass
class Candidate:
    """Article record produced by the pipeline.

    ``category`` and ``sentiment_score`` are filled before filtering;
    ``is_verified_positive`` and ``positivity_score`` are set only by the
    positivity filter.
    """

    # Identity & content
    id: str
    title: str
    description: str
    article_url: str
    published_at: datetime
    source_name: str
    category: Category
    source_icon: Optional[str] = None
    content: Optional[str] = None
    author: Optional[str] = None
    image_url: Optional[str] = None
    keywords: List[str] = field(default_factory=list)

    # Scoring outputs
    sentiment_score: float = 0.0  # [-1, 1]
    is_verified_positive: bool = False
    positivity_score: int = 0  # 0-100, set by the positivity filter

    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def positivity_percentage(self) -> float:
        return self.positivity_score / 100

    @property
    def estimated_reading_time(self) -> int:
        """Minutes at 200 words per minute, never below one."""
        words = len((self.content or self.description or "").split())
        return max(1, words // 200)


__all__ = ["Category", "Source", "RawItem", "Candidate"]
