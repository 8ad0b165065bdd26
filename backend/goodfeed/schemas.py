# goodfeed/schemas.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from goodfeed.models import Candidate, Category


class ArticleOut(BaseModel):
    id: str
    title: str
    description: str = ""
    content: Optional[str] = None
    author: Optional[str] = None
    source_name: str
    source_icon: Optional[str] = None
    image_url: Optional[str] = None
    article_url: str
    published_at: datetime
    category: Category
    category_name: str = ""
    keywords: List[str] = Field(default_factory=list)
    sentiment_score: float = Field(ge=-1.0, le=1.0)
    positivity_score: int = Field(ge=0, le=100)     # composite gate score, shown as a percentage
    reading_time_minutes: int = 1
    fetched_at: Optional[datetime] = None

    @classmethod
    def from_candidate(cls, candidate: Candidate) -> "ArticleOut":
        return cls(
            id=candidate.id,
            title=candidate.title,
            description=candidate.description,
            content=candidate.content,
            author=candidate.author,
            source_name=candidate.source_name,
            source_icon=candidate.source_icon,
            image_url=candidate.image_url,
            article_url=candidate.article_url,
            published_at=candidate.published_at,
            category=candidate.category,
            category_name=candidate.category.display_name,
            keywords=candidate.keywords,
            sentiment_score=candidate.sentiment_score,
            positivity_score=candidate.positivity_score,
            reading_time_minutes=candidate.estimated_reading_time,
            fetched_at=candidate.fetched_at,
        )


class FeedResponse(BaseModel):
    as_of: str
    category: Category
    n_items: int
    items: List[ArticleOut]
    message: str = ""                        # "no content" notice when empty


class RefreshResponse(BaseModel):
    as_of: str
    n_sources: int
    n_admitted: int
    n_inserted: int
