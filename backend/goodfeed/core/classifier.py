"""
Deterministic keyword-based category assignment.
"""
from __future__ import annotations

import re
from typing import List

from goodfeed.models import Category

STOP_WORDS = frozenset({
    "this", "that", "with", "from", "have", "been", "were", "they", "their",
    "about", "would", "could", "should", "which", "there", "being", "other",
})

_WORD_SPLIT = re.compile(r"[^0-9a-z]+")


def category_match_count(category: Category, text: str) -> int:
    """Number of the category's keywords found as substrings of lowercased ``text``."""
    return sum(1 for keyword in category.keywords if keyword.lower() in text)


def classify(title: str, description: str, default_category: Category) -> Category:
    """
    Pick the category whose keyword list matches the article best.

    Categories are visited in enum order and only a strictly higher count
    replaces the current best, so ties keep the first category seen. The
    catch-all ``for_you`` category never matches.

    Args:
        title: Article title
        description: Article description (plain text)
        default_category: Returned when no keyword matches at all

    Returns:
        Winning category, or ``default_category``
    """
    text = f"{title} {description}".lower()

    best_match = default_category
    highest = 0
    for category in Category:
        if category is Category.FOR_YOU:
            continue
        count = category_match_count(category, text)
        if count > highest:
            highest = count
            best_match = category

    return best_match if highest > 0 else default_category


def extract_keywords(text: str, limit: int = 10) -> List[str]:
    """Distinct words longer than three characters, stop words removed, first-seen order."""
    words = (w for w in _WORD_SPLIT.split(text.lower()) if len(w) > 3 and w not in STOP_WORDS)
    return list(dict.fromkeys(words))[:limit]
