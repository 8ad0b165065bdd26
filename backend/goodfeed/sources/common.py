"""
Common utilities for feed sources: article ids and publish-date parsing.
"""
from __future__ import annotations

import hashlib
import logging
import re
from datetime import datetime, timezone
from typing import Optional

from dateutil import parser as dateparser

from goodfeed.utils import now_utc

logger = logging.getLogger(__name__)

# Tried in order; %a/%b use the C locale names Python starts with.
DATE_FORMATS = (
    "%a, %d %b %Y %H:%M:%S %z",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f%z",
)

# "EEE, dd MMM yyyy HH:mm:ss zzz" with a named zone
NAMED_ZONE_PATTERN = re.compile(
    r"^[A-Za-z]{3}, \d{1,2} [A-Za-z]{3} \d{4} \d{2}:\d{2}:\d{2} ([A-Za-z]{1,5})$"
)

TZ_ABBREVIATIONS = {
    "UT": 0,
    "UTC": 0,
    "GMT": 0,
    "Z": 0,
    "EST": -5 * 3600,
    "EDT": -4 * 3600,
    "CST": -6 * 3600,
    "CDT": -5 * 3600,
    "MST": -7 * 3600,
    "MDT": -6 * 3600,
    "PST": -8 * 3600,
    "PDT": -7 * 3600,
    "BST": 1 * 3600,
    "CET": 1 * 3600,
    "CEST": 2 * 3600,
    "AEST": 10 * 3600,
    "AEDT": 11 * 3600,
}


def make_article_id(url: str) -> str:
    """
    Generate a deterministic id for an article.

    Only the article URL participates, so the same URL always maps to the
    same id and the store can upsert-if-absent on it.

    Args:
        url: Article URL

    Returns:
        32-character hexadecimal string ID
    """
    return hashlib.blake2b(url.encode("utf-8", "ignore"), digest_size=16).hexdigest()


def _parse_named_zone(date_string: str) -> Optional[datetime]:
    match = NAMED_ZONE_PATTERN.match(date_string)
    if not match or match.group(1).upper() not in TZ_ABBREVIATIONS:
        return None
    try:
        return dateparser.parse(date_string, tzinfos=TZ_ABBREVIATIONS)
    except (ValueError, OverflowError):
        return None


def parse_published_at(date_string: Optional[str]) -> datetime:
    """
    Parse a feed publish date into an aware UTC datetime.

    Tries the RFC-822 form with a numeric offset, the two ISO-8601 forms and
    finally RFC-822 with a zone abbreviation. Anything else yields the current
    time.

    Args:
        date_string: Raw ``pubDate``/``published``/``updated`` text, or None

    Returns:
        UTC datetime
    """
    raw = (date_string or "").strip()
    if raw:
        for fmt in DATE_FORMATS:
            try:
                return datetime.strptime(raw, fmt).astimezone(timezone.utc)
            except ValueError:
                continue

        parsed = _parse_named_zone(raw)
        if parsed is not None and parsed.tzinfo is not None:
            return parsed.astimezone(timezone.utc)

    logger.debug("Unparseable publish date %r, using now", raw)
    return now_utc()
