"""
Shared utility functions for the feed pipeline.
"""
from __future__ import annotations

import math
import re
from datetime import datetime, timezone


def now_utc() -> datetime:
    """
    Get current UTC datetime with timezone information.

    Returns:
        Current UTC datetime
    """
    return datetime.now(timezone.utc)


def normalize_text(text: str | None) -> str:
    """
    Normalize whitespace in text content.

    Args:
        text: Input text string (can be None)

    Returns:
        Normalized text with single spaces and trimmed edges
    """
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()


def clamp(value: float, low: float, high: float) -> float:
    """Clamp a float into [low, high]. NaN maps to 0.0 when the range holds it, else to ``low``."""
    if math.isnan(value):
        return 0.0 if low <= 0.0 <= high else low
    return max(low, min(high, value))


def clamp_to_sentiment_range(value: float) -> float:
    """
    Clamp a float value to the sentiment range [-1.0, 1.0].

    Args:
        value: Input float value

    Returns:
        Value clamped to [-1.0, 1.0] range
    """
    return clamp(value, -1.0, 1.0)
